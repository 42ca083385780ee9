"""
Application Routes

Listing, details, pipeline transitions (single and bulk), withdrawal and
history for job applications.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from ..deps import get_current_user_dep, get_correlation_id_dep, get_application_service
from ...domain.models import ActorContext, BulkTransitionResult, JobApplication
from ...services.application_service import ApplicationService
from .schemas import (
    ApplicationTransitionRequest, ApplicationDetailsResponse, AuditRecordResponse,
    ApplicationListResponse, BulkTransitionRequest
)

router = APIRouter()


@router.get("/me", response_model=ApplicationListResponse)
def list_my_applications(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """The caller's own applications, most recent first (candidates only)"""
    applications, total = service.list_my_applications(actor, skip=(page - 1) * page_size, limit=page_size)
    return ApplicationListResponse(items=applications, page=page, page_size=page_size, total=total)


@router.post("/bulk-transition", response_model=BulkTransitionResult)
def bulk_transition_applications(
    request: BulkTransitionRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """
    Move up to 100 applications to the same status

    Every application is checked and audited on its own; the response lists
    the ones that could not be moved and why.
    """
    return service.bulk_transition(request.application_ids, request.target_status, actor, request.reason)


@router.get("/{application_id}", response_model=ApplicationDetailsResponse)
def get_application(
    application_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """Application details with status history (owner or organization staff)"""
    details = service.get_application(application_id, actor)
    return ApplicationDetailsResponse(
        application=details["application"],
        history=[AuditRecordResponse.from_record(r) for r in details["history"]]
    )


@router.post("/{application_id}/transition", response_model=JobApplication)
def transition_application(
    application_id: str,
    request: ApplicationTransitionRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """
    Move an application through the review pipeline

    Hiring managers and recruiters of the posting's organization may apply
    any allowed transition; candidates may only withdraw their own.
    """
    return service.transition_application(application_id, request.target_status, actor, request.reason)


@router.delete("/{application_id}", response_model=JobApplication)
def withdraw_application(
    application_id: str,
    reason: Optional[str] = Query(None, max_length=2000),
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ApplicationService = Depends(get_application_service)
):
    """Withdraw your own application. The record is kept with status WITHDRAWN."""
    return service.withdraw_application(application_id, actor, reason)


@router.get("/{application_id}/history", response_model=List[AuditRecordResponse])
def get_application_history(
    application_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ApplicationService = Depends(get_application_service)
):
    return [AuditRecordResponse.from_record(r) for r in service.get_history(application_id, actor)]
