"""
Job Post Routes

CRUD, lifecycle transitions, history and apply endpoints for job posts.
Endpoints are plain ``def`` because pymongo is blocking; FastAPI runs them
in its threadpool.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from ..deps import (
    get_current_user_dep, get_optional_user_dep, get_correlation_id_dep,
    get_job_post_service, get_application_service
)
from ...domain.models import ActorContext, JobApplication, JobPost
from ...services.job_post_service import JobPostService
from ...services.application_service import ApplicationService
from ...utils.logger import get_logger
from .schemas import (
    JobPostRequest, JobPostTransitionRequest, AvailableTransitionsResponse,
    PublishableResponse, AuditRecordResponse, JobPostListResponse, ApplicationListResponse
)

logger = get_logger(__name__)
router = APIRouter()

ReasonQuery = Query(None, max_length=2000, description="Why the status changes")


# =============================================================================
# CRUD
# =============================================================================

@router.post("", response_model=JobPost, status_code=status.HTTP_201_CREATED)
def create_job_post(
    request: JobPostRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """
    Create a job post

    The post starts in DRAFT and belongs to the caller's organization.
    Only hiring managers can create job posts.
    """
    job_post = service.create_job_post(request, actor)
    logger.info(
        f"Created job post: {job_post.job_post_id}",
        extra={"entity_id": job_post.job_post_id, "actor_id": actor.actor_id, "tenant_id": actor.tenant_id}
    )
    return job_post


@router.get("", response_model=JobPostListResponse)
def list_job_posts(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    actor: Optional[ActorContext] = Depends(get_optional_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """
    List job posts, newest first

    Without a token, and for candidates, only OPEN posts are listed.
    Hiring managers and recruiters see every post of their organization.
    """
    job_posts, total = service.list_job_posts(actor, skip=(page - 1) * page_size, limit=page_size)
    return JobPostListResponse(items=job_posts, page=page, page_size=page_size, total=total)


@router.get("/my-posts", response_model=JobPostListResponse)
def list_my_job_posts(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Job posts created by the caller"""
    job_posts, total = service.list_my_job_posts(actor, skip=(page - 1) * page_size, limit=page_size)
    return JobPostListResponse(items=job_posts, page=page, page_size=page_size, total=total)


@router.get("/{job_post_id}", response_model=JobPost)
def get_job_post(
    job_post_id: str,
    actor: Optional[ActorContext] = Depends(get_optional_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Get a job post. OPEN posts are visible without a token."""
    return service.get_job_post(job_post_id, actor)


@router.put("/{job_post_id}", response_model=JobPost)
def update_job_post(
    job_post_id: str,
    request: JobPostRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Replace the editable fields of a job post"""
    return service.update_job_post(job_post_id, request, actor)


@router.delete("/{job_post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job_post(
    job_post_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Delete a job post (only the hiring manager who created it)"""
    service.delete_job_post(job_post_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Lifecycle
# =============================================================================

@router.patch("/{job_post_id}/transition", response_model=JobPost)
def transition_job_post(
    job_post_id: str,
    request: JobPostTransitionRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Move a job post to any status reachable from its current one"""
    return service.transition_job_post(job_post_id, request.target_status, actor, request.reason)


@router.patch("/{job_post_id}/publish", response_model=JobPost)
def publish_job_post(
    job_post_id: str,
    reason: Optional[str] = ReasonQuery,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """DRAFT -> OPEN. Requires title, description, job type, location and experience level."""
    return service.publish(job_post_id, actor, reason)


@router.patch("/{job_post_id}/close", response_model=JobPost)
def close_job_post(
    job_post_id: str,
    reason: Optional[str] = ReasonQuery,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """OPEN -> CLOSED"""
    return service.close(job_post_id, actor, reason)


@router.patch("/{job_post_id}/reopen", response_model=JobPost)
def reopen_job_post(
    job_post_id: str,
    reason: Optional[str] = ReasonQuery,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """CLOSED -> OPEN"""
    return service.reopen(job_post_id, actor, reason)


@router.patch("/{job_post_id}/archive", response_model=JobPost)
def archive_job_post(
    job_post_id: str,
    reason: Optional[str] = ReasonQuery,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Any non-terminal status -> ARCHIVED"""
    return service.archive(job_post_id, actor, reason)


@router.get("/{job_post_id}/history", response_model=List[AuditRecordResponse])
def get_job_post_history(
    job_post_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Status history, newest first"""
    return [AuditRecordResponse.from_record(r) for r in service.get_state_history(job_post_id, actor)]


@router.get("/{job_post_id}/available-transitions", response_model=AvailableTransitionsResponse)
def get_available_transitions(
    job_post_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    return service.get_available_transitions(job_post_id, actor)


@router.get("/{job_post_id}/publishable", response_model=PublishableResponse)
def check_publishable(
    job_post_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: JobPostService = Depends(get_job_post_service)
):
    """Whether the job post can be published and, if not, which fields are missing"""
    result = service.check_publishable(job_post_id, actor)
    return PublishableResponse(
        job_post_id=job_post_id,
        can_publish=result.allowed,
        reasons=result.unmet_reasons
    )


# =============================================================================
# Applications
# =============================================================================

@router.post("/{job_post_id}/apply", response_model=JobApplication, status_code=status.HTTP_201_CREATED)
def apply_for_job(
    job_post_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """Apply to an OPEN job post (candidates only, once per post)"""
    application = service.apply_for_job(job_post_id, actor)
    logger.info(
        f"Candidate applied: {application.application_id}",
        extra={"entity_id": application.application_id, "actor_id": actor.actor_id}
    )
    return application


@router.get("/{job_post_id}/applications", response_model=ApplicationListResponse)
def list_job_post_applications(
    job_post_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """Applications received by a job post (hiring managers and recruiters of its organization)"""
    applications, total = service.list_applications_for_job(
        job_post_id, actor, skip=(page - 1) * page_size, limit=page_size
    )
    return ApplicationListResponse(items=applications, page=page, page_size=page_size, total=total)
