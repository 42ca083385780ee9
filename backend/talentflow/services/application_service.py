"""Application Service - Candidate application business logic"""
from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import (
    ActorContext, AuditRecord, JobApplication, IntendedChange, BulkTransitionError, BulkTransitionResult
)
from ..domain.enums import ApplicationStatus, EntityKind, JobPostStatus, PermissionAction
from ..domain.errors import DomainError, ValidationError
from ..repositories.job_post_repo import JobPostRepository
from ..repositories.application_repo import ApplicationRepository
from ..engine.permission_gate import PermissionGate
from ..engine.executor import TransitionExecutor
from ..utils.idgen import generate_application_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

WITHDRAW_REASON = "Application withdrawn by candidate."
MAX_BULK_SIZE = 100


class ApplicationService:
    """Service for job application operations"""

    def __init__(
        self,
        job_post_repo: Optional[JobPostRepository] = None,
        application_repo: Optional[ApplicationRepository] = None,
        permission_gate: Optional[PermissionGate] = None,
        executor: Optional[TransitionExecutor] = None
    ):
        self.job_post_repo = job_post_repo or JobPostRepository()
        self.application_repo = application_repo or ApplicationRepository()
        self.permission_gate = permission_gate or PermissionGate()
        self.executor = executor or TransitionExecutor(
            job_post_repo=self.job_post_repo,
            application_repo=self.application_repo,
            permission_gate=self.permission_gate
        )

    def apply_for_job(self, job_post_id: str, actor: Optional[ActorContext]) -> JobApplication:
        """
        Submit an application for an OPEN job post

        The application starts in APPLIED and inherits the posting's
        organization. No audit record is written for the initial status.
        """
        job_post = self.job_post_repo.get_or_raise(job_post_id)
        self.permission_gate.enforce(
            self.permission_gate.decide_apply(actor, job_post),
            actor,
            job_post,
            PermissionAction.CREATE
        )

        if job_post.status != JobPostStatus.OPEN:
            raise ValidationError(
                "Cannot apply for a job that is not OPEN.",
                details={"job_post_id": job_post_id, "status": job_post.status.value}
            )

        if self.application_repo.exists_for_candidate(actor.actor_id, job_post_id):
            raise ValidationError(
                "You have already applied for this job.",
                details={"job_post_id": job_post_id}
            )

        application = JobApplication(
            application_id=generate_application_id(),
            job_post_id=job_post_id,
            tenant_id=job_post.tenant_id,
            candidate_id=actor.actor_id,
            candidate_email=actor.email,
            status=ApplicationStatus.APPLIED
        )
        return self.application_repo.create(application)

    def get_application(self, application_id: str, actor: Optional[ActorContext]) -> Dict[str, Any]:
        """Application with its audit history"""
        application = self.application_repo.get_or_raise(application_id)
        self.permission_gate.require(actor, application, IntendedChange(action=PermissionAction.VIEW))
        return {
            "application": application,
            "history": self.executor.get_history(EntityKind.APPLICATION, application_id),
        }

    def list_my_applications(
        self,
        actor: Optional[ActorContext],
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[JobApplication], int]:
        """The candidate's own applications, most recent first"""
        self.permission_gate.enforce(
            self.permission_gate.decide_list_own_applications(actor),
            actor,
            action=PermissionAction.VIEW
        )
        applications = self.application_repo.list_applications(
            candidate_id=actor.actor_id, skip=skip, limit=limit
        )
        return applications, self.application_repo.count_applications(candidate_id=actor.actor_id)

    def list_applications_for_job(
        self,
        job_post_id: str,
        actor: Optional[ActorContext],
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[JobApplication], int]:
        """Applications received by a job post (organization staff only)"""
        job_post = self.job_post_repo.get_or_raise(job_post_id)
        self.permission_gate.require(
            actor, job_post, IntendedChange(action=PermissionAction.VIEW_APPLICATIONS)
        )
        applications = self.application_repo.list_applications(
            job_post_id=job_post_id, skip=skip, limit=limit
        )
        return applications, self.application_repo.count_applications(job_post_id=job_post_id)

    def transition_application(
        self,
        application_id: str,
        target_status: ApplicationStatus,
        actor: Optional[ActorContext],
        reason: Optional[str] = None
    ) -> JobApplication:
        """Move an application through the review pipeline"""
        application = self.application_repo.get_or_raise(application_id)
        return self.executor.transition_state(application, target_status, actor, reason)

    def withdraw_application(
        self,
        application_id: str,
        actor: Optional[ActorContext],
        reason: Optional[str] = None
    ) -> JobApplication:
        return self.transition_application(
            application_id, ApplicationStatus.WITHDRAWN, actor, reason or WITHDRAW_REASON
        )

    def bulk_transition(
        self,
        application_ids: List[str],
        target_status: ApplicationStatus,
        actor: Optional[ActorContext],
        reason: Optional[str] = None
    ) -> BulkTransitionResult:
        """
        Move several applications to the same status

        Each application goes through the executor on its own: one failure
        does not undo or stop the others. Failures are reported per
        application with the error code and message.

        Raises:
            AuthorizationError: actor is not organization staff
            ValidationError: no ids, or more than MAX_BULK_SIZE
        """
        self.permission_gate.enforce(
            self.permission_gate.decide_bulk_transition(actor),
            actor,
            action=PermissionAction.BULK_TRANSITION
        )
        if not application_ids:
            raise ValidationError("Application IDs cannot be empty")
        if len(application_ids) > MAX_BULK_SIZE:
            raise ValidationError(
                f"Cannot update more than {MAX_BULK_SIZE} applications at once",
                details={"requested": len(application_ids), "max": MAX_BULK_SIZE}
            )

        logger.info(
            f"Bulk status update to {target_status.value} for {len(application_ids)} applications",
            extra={"actor_id": actor.actor_id, "tenant_id": actor.tenant_id, "to_status": target_status.value}
        )

        errors: List[BulkTransitionError] = []
        for application_id in application_ids:
            try:
                self.transition_application(application_id, target_status, actor, reason)
            except DomainError as e:
                errors.append(BulkTransitionError(
                    application_id=application_id,
                    error=e.error_code,
                    reason=e.message
                ))
                logger.warning(
                    f"Bulk status update skipped application {application_id}: {e.message}",
                    extra={"entity_id": application_id, "error_code": e.error_code}
                )

        return BulkTransitionResult(
            target_status=target_status,
            total_requested=len(application_ids),
            success_count=len(application_ids) - len(errors),
            failure_count=len(errors),
            errors=errors
        )

    def get_history(self, application_id: str, actor: Optional[ActorContext]) -> List[AuditRecord]:
        application = self.application_repo.get_or_raise(application_id)
        self.permission_gate.require(actor, application, IntendedChange(action=PermissionAction.VIEW_HISTORY))
        return self.executor.get_history(EntityKind.APPLICATION, application_id)
