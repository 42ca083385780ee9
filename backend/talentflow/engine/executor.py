"""
Transition Executor - Atomic, audited status changes

Every status change of a job post or application goes through
TransitionExecutor.transition_state:

1. PermissionGate       - may this actor request this change?
2. Same-status check    - requesting the current status is rejected
3. TransitionRuleTable  - is (current -> target) an edge?
4. PreconditionValidator - business gates on the edge
5. Inside one transaction: reload, re-run 1-4 on the fresh snapshot,
   reject if it changed since the caller read it (ConcurrencyError),
   version-checked status write, append exactly one AuditRecord

A failure at any step leaves both the entity and its audit history untouched.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..domain.models import (
    ActorContext, AuditRecord, JobPost, LifecycleEntity, LifecycleStatus,
    IntendedChange, PreconditionResult
)
from ..domain.enums import EntityKind, PermissionAction
from ..domain.errors import (
    DomainError, SameStatusError, InvalidTransitionError, PreconditionError, NotFoundError,
    JobPostNotFoundError, ApplicationNotFoundError, ConcurrencyError
)
from ..repositories.job_post_repo import JobPostRepository
from ..repositories.application_repo import ApplicationRepository
from ..repositories.mongo_client import run_in_transaction
from .transition_rules import get_rule_table
from .precondition_validator import PreconditionValidator
from .permission_gate import PermissionGate
from .audit_trail import AuditTrail
from ..utils.idgen import generate_audit_record_id
from ..utils.time import utc_now, ensure_utc, format_iso
from ..utils.logger import get_logger

logger = get_logger(__name__)

KIND_LABELS: Dict[EntityKind, str] = {
    EntityKind.JOB_POST: "Job post",
    EntityKind.APPLICATION: "Application",
}

NOT_FOUND_ERRORS = {
    EntityKind.JOB_POST: (JobPostNotFoundError, "Job post not found", "job_post_id"),
    EntityKind.APPLICATION: (ApplicationNotFoundError, "Application not found", "application_id"),
}


class TransitionExecutor:
    """Orchestrates gate -> table -> preconditions -> mutate -> audit"""

    def __init__(
        self,
        job_post_repo: Optional[JobPostRepository] = None,
        application_repo: Optional[ApplicationRepository] = None,
        audit_trail: Optional[AuditTrail] = None,
        permission_gate: Optional[PermissionGate] = None,
        precondition_validator: Optional[PreconditionValidator] = None,
        transaction_runner: Callable[[Callable[[Any], Any]], Any] = run_in_transaction,
        clock: Callable[[], datetime] = utc_now
    ):
        self.job_post_repo = job_post_repo or JobPostRepository()
        self.application_repo = application_repo or ApplicationRepository()
        self.audit_trail = audit_trail or AuditTrail()
        self.permission_gate = permission_gate or PermissionGate()
        self.precondition_validator = precondition_validator or PreconditionValidator()
        self.transaction_runner = transaction_runner
        self.clock = clock

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_transition(
        self,
        entity: LifecycleEntity,
        target_status: LifecycleStatus,
        actor: Optional[ActorContext]
    ) -> None:
        """
        Raise the first failing check for moving entity to target_status

        Raises:
            AuthorizationError: actor may not request this change
            SameStatusError: entity already has target_status
            InvalidTransitionError: edge not in the transition table
            PreconditionError: edge allowed but business gate unmet
        """
        self.permission_gate.require(
            actor,
            entity,
            IntendedChange(action=PermissionAction.TRANSITION, target_status=target_status)
        )
        self._validate_rules(entity, target_status)

    def _validate_rules(self, entity: LifecycleEntity, target_status: LifecycleStatus) -> None:
        kind = entity.entity_kind
        current = entity.status
        details = {
            "entity_kind": kind.value,
            "entity_id": entity.entity_id,
            "from_status": current.value,
            "to_status": target_status.value,
        }

        if current == target_status:
            raise self._rejected(SameStatusError(
                f"{KIND_LABELS[kind]} is already in {current.value} status",
                details=details
            ))

        table = get_rule_table(kind)
        if not table.is_valid(current, target_status):
            raise self._rejected(InvalidTransitionError(
                f"Invalid state transition from {current.value} to {target_status.value}",
                details={**details, "allowed_targets": [s.value for s in table.targets_from(current)]}
            ))

        result = self.precondition_validator.can_transition(entity, target_status)
        if not result.allowed:
            if kind == EntityKind.JOB_POST:
                message = "Cannot publish job post: missing required fields"
            else:
                # Applications are ungated unless checks are passed to PreconditionValidator
                message = f"Cannot move {KIND_LABELS[kind].lower()} to {target_status.value}"
            raise self._rejected(PreconditionError(message, reasons=result.unmet_reasons, details=details))

    # =========================================================================
    # Execution
    # =========================================================================

    def transition_state(
        self,
        entity: LifecycleEntity,
        target_status: LifecycleStatus,
        actor: ActorContext,
        reason: Optional[str] = None
    ) -> LifecycleEntity:
        """
        Move entity to target_status and record one audit entry, atomically

        The caller's snapshot is validated first for a fast failure; the
        authoritative checks run again on the snapshot loaded inside the
        transaction. A snapshot that is no longer the stored version is a
        ConcurrencyError, so a stale request is never re-applied on top of
        a newer status.
        """
        self.validate_transition(entity, target_status, actor)

        kind = entity.entity_kind
        entity_id = entity.entity_id
        repo = self._repo_for(kind)

        def _apply(session):
            current = repo.get(entity_id, session=session)
            if current is None:
                raise self._not_found(kind, entity_id)

            self.validate_transition(current, target_status, actor)

            # The request was made against entity; any write since then is a conflict
            if current.version != entity.version:
                raise self._rejected(ConcurrencyError(
                    f"{KIND_LABELS[kind]} was modified by another request",
                    details={
                        "entity_kind": kind.value,
                        "entity_id": entity_id,
                        "expected_version": entity.version,
                        "current_version": current.version,
                        "current_status": current.status.value,
                    }
                ))

            updated = repo.update_status(
                entity_id,
                from_status=current.status,
                to_status=target_status,
                expected_version=entity.version,
                session=session
            )

            latest = self.audit_trail.latest_for(kind, entity_id, session=session)
            timestamp = self.clock()
            sequence = 1
            if latest is not None:
                timestamp = max(timestamp, ensure_utc(latest.timestamp))
                sequence = latest.sequence + 1

            record = AuditRecord(
                audit_record_id=generate_audit_record_id(),
                entity_kind=kind,
                entity_id=entity_id,
                from_status=current.status,
                to_status=target_status,
                actor_id=actor.actor_id,
                actor_email=actor.email,
                reason=reason,
                timestamp=timestamp,
                sequence=sequence
            )
            self.audit_trail.append(record, session=session)
            return updated, record

        updated, record = self.transaction_runner(_apply)

        logger.info(
            f"{KIND_LABELS[kind]} {entity_id} moved from {record.from_status.value} "
            f"to {record.to_status.value} at {format_iso(record.timestamp)}",
            extra={
                "entity_kind": kind.value,
                "entity_id": entity_id,
                "actor_id": actor.actor_id,
                "tenant_id": actor.tenant_id,
                "from_status": record.from_status.value,
                "to_status": record.to_status.value,
                "action": PermissionAction.TRANSITION.value,
            }
        )
        return updated

    # =========================================================================
    # Queries
    # =========================================================================

    def get_history(self, entity_kind: EntityKind, entity_id: str) -> List[AuditRecord]:
        """Audit records of an entity, newest first"""
        return self.audit_trail.history_for(entity_kind, entity_id)

    def can_be_published(self, job_post: JobPost) -> PreconditionResult:
        return self.precondition_validator.can_be_published(job_post)

    def available_transitions(self, entity: LifecycleEntity) -> List[LifecycleStatus]:
        """Statuses reachable from the entity's current status"""
        return get_rule_table(entity.entity_kind).targets_from(entity.status)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _repo_for(self, kind: EntityKind):
        if kind == EntityKind.JOB_POST:
            return self.job_post_repo
        return self.application_repo

    @staticmethod
    def _not_found(kind: EntityKind, entity_id: str) -> NotFoundError:
        error_cls, message, id_field = NOT_FOUND_ERRORS[kind]
        return error_cls(message, details={id_field: entity_id})

    @staticmethod
    def _rejected(error: DomainError) -> DomainError:
        logger.warning(
            f"Transition rejected: {error.message}",
            extra={**{k: v for k, v in error.details.items() if k != "reasons"}, "error_code": error.error_code}
        )
        return error
