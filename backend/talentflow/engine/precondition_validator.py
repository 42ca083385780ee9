"""Precondition Validator - Business gates on specific lifecycle edges"""
from typing import Callable, Dict, List, Optional

from ..domain.models import (
    JobPost, JobApplication, LifecycleEntity, LifecycleStatus, PreconditionResult
)
from ..domain.enums import EntityKind, JobPostStatus
from ..utils.logger import get_logger

logger = get_logger(__name__)

PreconditionCheck = Callable[[LifecycleEntity, LifecycleStatus], List[str]]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def job_post_publish_reasons(job_post: JobPost) -> List[str]:
    """Names of the fields a job post still needs before it can be OPEN"""
    reasons = []
    if _is_blank(job_post.title):
        reasons.append("Title is required")
    if _is_blank(job_post.description):
        reasons.append("Description is required")
    if _is_blank(job_post.job_type):
        reasons.append("Job type is required")
    if job_post.location is None:
        reasons.append("Location is required")
    if _is_blank(job_post.experience_level):
        reasons.append("Experience level is required")
    return reasons


def _job_post_checks(entity: JobPost, target: LifecycleStatus) -> List[str]:
    if target == JobPostStatus.OPEN:
        return job_post_publish_reasons(entity)
    # CLOSED, DRAFT and ARCHIVED are ungated; closing is allowed at any time
    return []


def _application_checks(entity: JobApplication, target: LifecycleStatus) -> List[str]:
    return []


class PreconditionValidator:
    """
    Kind-specific checks run after table membership and before any mutation

    Job posts: every edge into OPEN requires title, description, job type,
    location and experience level. Applications: no preconditions.
    """

    def __init__(self, checks: Optional[Dict[EntityKind, PreconditionCheck]] = None):
        self._checks: Dict[EntityKind, PreconditionCheck] = {
            EntityKind.JOB_POST: _job_post_checks,
            EntityKind.APPLICATION: _application_checks,
        }
        if checks:
            self._checks.update(checks)

    def can_transition(self, entity: LifecycleEntity, target: LifecycleStatus) -> PreconditionResult:
        """Evaluate the gate for moving entity to target"""
        check = self._checks.get(entity.entity_kind)
        reasons = check(entity, target) if check else []
        if reasons:
            logger.info(
                f"Preconditions unmet for {entity.entity_kind.value} {entity.entity_id} -> {target.value}: {reasons}",
                extra={
                    "entity_kind": entity.entity_kind.value,
                    "entity_id": entity.entity_id,
                    "to_status": target.value,
                }
            )
        return PreconditionResult.unmet(reasons)

    def can_be_published(self, job_post: JobPost) -> PreconditionResult:
        """Whether a job post has every field required to be OPEN"""
        return PreconditionResult.unmet(job_post_publish_reasons(job_post))
