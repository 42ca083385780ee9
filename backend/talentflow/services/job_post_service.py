"""Job Post Service - Job posting business logic"""
from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import (
    ActorContext, AuditRecord, JobPost, JobPostFields, UserSnapshot,
    IntendedChange, PreconditionResult
)
from ..domain.enums import EntityKind, JobPostStatus, PermissionAction
from ..repositories.job_post_repo import JobPostRepository
from ..engine.permission_gate import PermissionGate
from ..engine.executor import TransitionExecutor
from ..utils.idgen import generate_job_post_id
from ..utils.time import today_iso_date
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REASONS: Dict[JobPostStatus, str] = {
    JobPostStatus.OPEN: "Publishing job post",
    JobPostStatus.CLOSED: "Closing job post",
    JobPostStatus.ARCHIVED: "Archiving job post",
}
REOPEN_REASON = "Reopening job post"


class JobPostService:
    """Service for job post operations"""

    def __init__(
        self,
        repo: Optional[JobPostRepository] = None,
        permission_gate: Optional[PermissionGate] = None,
        executor: Optional[TransitionExecutor] = None
    ):
        self.repo = repo or JobPostRepository()
        self.permission_gate = permission_gate or PermissionGate()
        self.executor = executor or TransitionExecutor(
            job_post_repo=self.repo,
            permission_gate=self.permission_gate
        )

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_job_post(self, fields: JobPostFields, actor: Optional[ActorContext]) -> JobPost:
        """Create a job post in DRAFT, owned by the actor's organization"""
        self.permission_gate.enforce(
            self.permission_gate.decide_create_job_post(actor),
            actor,
            action=PermissionAction.CREATE
        )

        job_post = JobPost(
            **fields.model_dump(),
            job_post_id=generate_job_post_id(),
            tenant_id=actor.tenant_id,
            status=JobPostStatus.DRAFT,
            created_by=UserSnapshot.of(actor),
            date_posted=today_iso_date()
        )
        return self.repo.create(job_post)

    def get_job_post(self, job_post_id: str, actor: Optional[ActorContext] = None) -> JobPost:
        """Get a job post; OPEN posts are public, others need organization staff"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.VIEW))
        return job_post

    def list_job_posts(
        self,
        actor: Optional[ActorContext] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[JobPost], int]:
        """
        List the job posts visible to the actor, newest first

        Returns:
            Tuple of (page of job posts, total matching)
        """
        scope = self.permission_gate.job_post_list_scope(actor)
        job_posts = self.repo.list_job_posts(skip=skip, limit=limit, **scope)
        return job_posts, self.repo.count_job_posts(**scope)

    def list_my_job_posts(
        self,
        actor: Optional[ActorContext],
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[JobPost], int]:
        """Job posts the actor created within their organization"""
        self.permission_gate.enforce(
            self.permission_gate.decide_list_own_job_posts(actor),
            actor,
            action=PermissionAction.VIEW
        )
        scope = {"tenant_id": actor.tenant_id, "created_by": actor.actor_id}
        job_posts = self.repo.list_job_posts(skip=skip, limit=limit, **scope)
        return job_posts, self.repo.count_job_posts(**scope)

    def update_job_post(
        self,
        job_post_id: str,
        fields: JobPostFields,
        actor: Optional[ActorContext]
    ) -> JobPost:
        """Replace editable fields; status only changes through transitions"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.UPDATE))

        updates = fields.model_dump()
        return self.repo.update_fields(job_post_id, updates, expected_version=job_post.version)

    def delete_job_post(self, job_post_id: str, actor: Optional[ActorContext]) -> None:
        """Delete a job post (creator only); its audit history is kept"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.DELETE))
        self.repo.delete(job_post_id)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def transition_job_post(
        self,
        job_post_id: str,
        target_status: JobPostStatus,
        actor: Optional[ActorContext],
        reason: Optional[str] = None
    ) -> JobPost:
        """Move a job post to target_status"""
        job_post = self.repo.get_or_raise(job_post_id)
        return self.executor.transition_state(job_post, target_status, actor, reason)

    def publish(self, job_post_id: str, actor: Optional[ActorContext], reason: Optional[str] = None) -> JobPost:
        return self.transition_job_post(
            job_post_id, JobPostStatus.OPEN, actor, reason or DEFAULT_REASONS[JobPostStatus.OPEN]
        )

    def close(self, job_post_id: str, actor: Optional[ActorContext], reason: Optional[str] = None) -> JobPost:
        return self.transition_job_post(
            job_post_id, JobPostStatus.CLOSED, actor, reason or DEFAULT_REASONS[JobPostStatus.CLOSED]
        )

    def reopen(self, job_post_id: str, actor: Optional[ActorContext], reason: Optional[str] = None) -> JobPost:
        return self.transition_job_post(job_post_id, JobPostStatus.OPEN, actor, reason or REOPEN_REASON)

    def archive(self, job_post_id: str, actor: Optional[ActorContext], reason: Optional[str] = None) -> JobPost:
        return self.transition_job_post(
            job_post_id, JobPostStatus.ARCHIVED, actor, reason or DEFAULT_REASONS[JobPostStatus.ARCHIVED]
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state_history(self, job_post_id: str, actor: Optional[ActorContext]) -> List[AuditRecord]:
        """Audit history, newest first (organization staff only)"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.VIEW_HISTORY))
        return self.executor.get_history(EntityKind.JOB_POST, job_post_id)

    def get_available_transitions(
        self,
        job_post_id: str,
        actor: Optional[ActorContext]
    ) -> Dict[str, Any]:
        """Statuses the job post can move to from where it is now"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.VIEW_HISTORY))
        targets = self.executor.available_transitions(job_post)
        return {
            "job_post_id": job_post_id,
            "current_status": job_post.status,
            "available_transitions": targets,
        }

    def check_publishable(self, job_post_id: str, actor: Optional[ActorContext]) -> PreconditionResult:
        """Whether the job post has every field required to be published"""
        job_post = self.repo.get_or_raise(job_post_id)
        self.permission_gate.require(actor, job_post, IntendedChange(action=PermissionAction.UPDATE))
        return self.executor.can_be_published(job_post)
