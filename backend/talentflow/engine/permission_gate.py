"""Permission Gate - Single authorization policy for lifecycle entities"""
from typing import Any, Dict, Optional

from ..domain.models import (
    ActorContext, JobPost, JobApplication, LifecycleEntity, LifecycleStatus,
    IntendedChange, PermissionDecision
)
from ..domain.enums import (
    ApplicationStatus, JobPostStatus, PermissionAction, Role, STAFF_ROLES
)
from ..domain.errors import AuthorizationError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PermissionGate:
    """
    Authorization policy consulted before any read or mutation

    Rules:
    - Only hiring managers who belong to an organization can create job posts
    - Hiring managers and recruiters of the owning organization can update
      job posts and change their status
    - Only the hiring manager who created a job post can delete it
    - OPEN job posts are public; other statuses are visible to organization
      staff only (never to candidates)
    - Hiring managers and recruiters of the posting's organization can move
      applications through the pipeline
    - Applications received by a job post are listed to its organization's
      staff only
    - A candidate can view their own application and withdraw it, nothing else
    """

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def evaluate(
        self,
        actor: Optional[ActorContext],
        entity: LifecycleEntity,
        change: IntendedChange
    ) -> PermissionDecision:
        """Decide whether actor may apply change to entity"""
        if isinstance(entity, JobPost):
            return self._decide_job_post(actor, entity, change)
        if isinstance(entity, JobApplication):
            return self._decide_application(actor, entity, change)
        return PermissionDecision.deny("Unsupported entity")

    def can_request(
        self,
        actor: Optional[ActorContext],
        entity: LifecycleEntity,
        target_status: LifecycleStatus
    ) -> bool:
        change = IntendedChange(action=PermissionAction.TRANSITION, target_status=target_status)
        return self.evaluate(actor, entity, change).allowed

    def can_view(self, actor: Optional[ActorContext], entity: LifecycleEntity) -> bool:
        return self.evaluate(actor, entity, IntendedChange(action=PermissionAction.VIEW)).allowed

    def decide_create_job_post(self, actor: Optional[ActorContext]) -> PermissionDecision:
        if actor is None:
            return PermissionDecision.deny("Authentication is required")
        # Organization first for the clearer message
        if not actor.tenant_id:
            return PermissionDecision.deny("User must belong to an organization to create job posts")
        if actor.role != Role.HIRING_MANAGER:
            return PermissionDecision.deny("Only hiring managers can create job posts")
        return PermissionDecision.allow()

    def decide_apply(self, actor: Optional[ActorContext], job_post: JobPost) -> PermissionDecision:
        if actor is None or actor.role != Role.CANDIDATE:
            return PermissionDecision.deny("Only candidates can apply for jobs")
        return PermissionDecision.allow()

    def decide_list_own_job_posts(self, actor: Optional[ActorContext]) -> PermissionDecision:
        if actor is None:
            return PermissionDecision.deny("Authentication is required")
        if actor.role not in STAFF_ROLES or not actor.tenant_id:
            return PermissionDecision.deny("Only hiring managers and recruiters of an organization have job posts")
        return PermissionDecision.allow()

    def decide_list_own_applications(self, actor: Optional[ActorContext]) -> PermissionDecision:
        if actor is None or actor.role != Role.CANDIDATE:
            return PermissionDecision.deny("Only candidates have applications")
        return PermissionDecision.allow()

    def decide_bulk_transition(self, actor: Optional[ActorContext]) -> PermissionDecision:
        if actor is None:
            return PermissionDecision.deny("Authentication is required")
        if actor.role not in STAFF_ROLES:
            return PermissionDecision.deny("Only Hiring Managers and Recruiters can update applications in bulk.")
        return PermissionDecision.allow()

    def job_post_list_scope(self, actor: Optional[ActorContext]) -> Dict[str, Any]:
        """
        Repository filter for the job posts an actor may list

        Anonymous users and candidates see OPEN posts of every organization;
        organization staff see every post of their own organization.
        """
        if actor is None or actor.role not in STAFF_ROLES or not actor.tenant_id:
            return {"status": JobPostStatus.OPEN}
        return {"tenant_id": actor.tenant_id}

    def require(
        self,
        actor: Optional[ActorContext],
        entity: LifecycleEntity,
        change: IntendedChange
    ) -> None:
        """Raise AuthorizationError unless change is allowed"""
        self.enforce(self.evaluate(actor, entity, change), actor, entity, change.action)

    def enforce(
        self,
        decision: PermissionDecision,
        actor: Optional[ActorContext],
        entity: Optional[LifecycleEntity] = None,
        action: Optional[PermissionAction] = None
    ) -> None:
        if decision.allowed:
            return

        details = {}
        extra = {"action": action.value if action else None}
        if actor is not None:
            extra["actor_id"] = actor.actor_id
            extra["tenant_id"] = actor.tenant_id
        if entity is not None:
            details = {"entity_kind": entity.entity_kind.value, "entity_id": entity.entity_id}
            extra.update(details)

        logger.warning(f"Permission denied: {decision.reason}", extra=extra)
        raise AuthorizationError(decision.reason or "Permission denied", details=details)

    # -------------------------------------------------------------------------
    # Job posts
    # -------------------------------------------------------------------------

    def _decide_job_post(
        self,
        actor: Optional[ActorContext],
        job_post: JobPost,
        change: IntendedChange
    ) -> PermissionDecision:
        action = change.action

        if action == PermissionAction.VIEW:
            if job_post.status == JobPostStatus.OPEN:
                return PermissionDecision.allow()
            if actor is None or actor.role == Role.CANDIDATE:
                return PermissionDecision.deny("You don't have access to this job post")
            if not self._same_tenant(actor, job_post.tenant_id):
                return PermissionDecision.deny("You don't have access to this job post")
            return PermissionDecision.allow()

        if actor is None:
            return PermissionDecision.deny("Authentication is required")

        if action == PermissionAction.CREATE:
            return self.decide_create_job_post(actor)

        if action == PermissionAction.DELETE:
            if actor.role != Role.HIRING_MANAGER:
                return PermissionDecision.deny("Only hiring managers can delete job posts")
            if not self._same_tenant(actor, job_post.tenant_id):
                return PermissionDecision.deny("You can only delete job posts in your organization")
            if job_post.created_by.actor_id != actor.actor_id:
                return PermissionDecision.deny("You can only delete your own job posts")
            return PermissionDecision.allow()

        if action == PermissionAction.UPDATE:
            if not self._same_tenant(actor, job_post.tenant_id):
                return PermissionDecision.deny("You can only update job posts in your organization")
            if actor.role not in STAFF_ROLES:
                return PermissionDecision.deny("Only hiring managers and recruiters can update job posts")
            return PermissionDecision.allow()

        if action == PermissionAction.VIEW_HISTORY:
            if not self._same_tenant(actor, job_post.tenant_id) or actor.role not in STAFF_ROLES:
                return PermissionDecision.deny("You don't have access to this job post")
            return PermissionDecision.allow()

        if action == PermissionAction.VIEW_APPLICATIONS:
            if actor.role not in STAFF_ROLES:
                return PermissionDecision.deny("Only hiring managers and recruiters can view applications.")
            if not self._same_tenant(actor, job_post.tenant_id):
                return PermissionDecision.deny("You are not authorized to view applications for this job post.")
            return PermissionDecision.allow()

        if action == PermissionAction.TRANSITION:
            if not self._same_tenant(actor, job_post.tenant_id):
                return PermissionDecision.deny("You can only change status of job posts in your organization")
            if actor.role not in STAFF_ROLES:
                return PermissionDecision.deny("Only hiring managers and recruiters can change job post status")
            return PermissionDecision.allow()

        return PermissionDecision.deny(f"Action {action.value} is not supported for job posts")

    # -------------------------------------------------------------------------
    # Applications
    # -------------------------------------------------------------------------

    def _decide_application(
        self,
        actor: Optional[ActorContext],
        application: JobApplication,
        change: IntendedChange
    ) -> PermissionDecision:
        if actor is None:
            return PermissionDecision.deny("Authentication is required")

        is_owner = actor.role == Role.CANDIDATE and actor.actor_id == application.candidate_id
        is_staff = actor.role in STAFF_ROLES and self._same_tenant(actor, application.tenant_id)

        if change.action in (PermissionAction.VIEW, PermissionAction.VIEW_HISTORY):
            if is_owner or is_staff:
                return PermissionDecision.allow()
            return PermissionDecision.deny("You are not authorized to view this application.")

        if change.action == PermissionAction.TRANSITION:
            if actor.role == Role.CANDIDATE:
                if not is_owner:
                    return PermissionDecision.deny("You can only modify your own application.")
                if change.target_status != ApplicationStatus.WITHDRAWN:
                    return PermissionDecision.deny("Candidates can only withdraw their application.")
                return PermissionDecision.allow()
            if actor.role not in STAFF_ROLES:
                return PermissionDecision.deny(
                    "Only Hiring Managers and Recruiters can transition application status."
                )
            if not is_staff:
                return PermissionDecision.deny("You are not authorized to transition this application.")
            return PermissionDecision.allow()

        return PermissionDecision.deny(f"Action {change.action.value} is not supported for applications")

    @staticmethod
    def _same_tenant(actor: ActorContext, tenant_id: Optional[str]) -> bool:
        if not actor.tenant_id or not tenant_id:
            return False
        return actor.tenant_id == tenant_id
