"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import ClassVar, List, Optional, Union
from pydantic import BaseModel, Field, EmailStr, ConfigDict

from .enums import (
    EntityKind, JobPostStatus, ApplicationStatus, Role, PermissionAction
)
from ..utils.time import utc_now


LifecycleStatus = Union[JobPostStatus, ApplicationStatus]


# ============================================================================
# Identity
# ============================================================================

class ActorContext(BaseModel):
    """Acting principal, resolved once per request and passed explicitly"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    actor_id: str = Field(..., description="User ID (token subject)")
    email: Optional[EmailStr] = Field(None, description="User email")
    role: Role = Field(..., description="Principal role")
    tenant_id: Optional[str] = Field(None, description="Organization the principal belongs to")


class UserSnapshot(BaseModel):
    """Snapshot of user identity at a point in time"""
    model_config = ConfigDict(extra="forbid")

    actor_id: str
    email: Optional[EmailStr] = None

    @classmethod
    def of(cls, actor: ActorContext) -> "UserSnapshot":
        return cls(actor_id=actor.actor_id, email=actor.email)


# ============================================================================
# Job Post
# ============================================================================

class Location(BaseModel):
    """Structured job location"""
    model_config = ConfigDict(extra="forbid")

    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None
    region: Optional[str] = None


class Skill(BaseModel):
    """Required skill with optional keywords"""
    model_config = ConfigDict(extra="forbid")

    name: str
    level: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)


class JobPostFields(BaseModel):
    """Editable attributes of a job post"""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    company: Optional[str] = None
    job_type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[Location] = None
    remote: Optional[str] = None
    salary: Optional[str] = None
    experience_level: Optional[str] = None
    responsibilities: List[str] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)


class JobPost(JobPostFields):
    """Job posting with publication lifecycle"""
    entity_kind: ClassVar[EntityKind] = EntityKind.JOB_POST

    job_post_id: str
    tenant_id: str = Field(..., description="Owning organization")
    status: JobPostStatus = JobPostStatus.DRAFT
    version: int = Field(default=0, description="Optimistic concurrency counter")
    created_by: UserSnapshot
    date_posted: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def entity_id(self) -> str:
        return self.job_post_id


# ============================================================================
# Job Application
# ============================================================================

class JobApplication(BaseModel):
    """Candidate application with review pipeline"""
    model_config = ConfigDict(extra="ignore")
    entity_kind: ClassVar[EntityKind] = EntityKind.APPLICATION

    application_id: str
    job_post_id: str
    tenant_id: str = Field(..., description="Organization owning the targeted job post")
    candidate_id: str
    candidate_email: Optional[EmailStr] = None
    status: ApplicationStatus = ApplicationStatus.APPLIED
    version: int = 0
    viewed_by_employer: bool = False
    application_date: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def entity_id(self) -> str:
        return self.application_id


LifecycleEntity = Union[JobPost, JobApplication]


# ============================================================================
# Transitions & Audit
# ============================================================================

class TransitionEdge(BaseModel):
    """Allowed (from -> to) pair of a lifecycle, with a human-readable label"""
    model_config = ConfigDict(frozen=True)

    from_status: LifecycleStatus
    to_status: LifecycleStatus
    description: str


class AuditRecord(BaseModel):
    """One accepted status change (append-only)"""
    model_config = ConfigDict(extra="ignore", frozen=True)

    audit_record_id: str
    entity_kind: EntityKind
    entity_id: str
    from_status: LifecycleStatus
    to_status: LifecycleStatus
    actor_id: str
    actor_email: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime
    sequence: int = Field(default=0, description="Per-entity append order, breaks timestamp ties")


# ============================================================================
# Decisions
# ============================================================================

class PreconditionResult(BaseModel):
    """Outcome of business precondition checks for one edge"""
    allowed: bool
    unmet_reasons: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls) -> "PreconditionResult":
        return cls(allowed=True)

    @classmethod
    def unmet(cls, reasons: List[str]) -> "PreconditionResult":
        return cls(allowed=not reasons, unmet_reasons=list(reasons))


class IntendedChange(BaseModel):
    """What an actor wants to do to an entity"""
    model_config = ConfigDict(frozen=True)

    action: PermissionAction
    target_status: Optional[LifecycleStatus] = None


class PermissionDecision(BaseModel):
    """Allow/deny verdict with the reason for a denial"""
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "PermissionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "PermissionDecision":
        return cls(allowed=False, reason=reason)


# ============================================================================
# Bulk operations
# ============================================================================

class BulkTransitionError(BaseModel):
    """Why one application of a bulk request was not moved"""
    application_id: str
    error: str
    reason: str


class BulkTransitionResult(BaseModel):
    """Outcome of a bulk application status change"""
    target_status: ApplicationStatus
    total_requested: int
    success_count: int
    failure_count: int
    errors: List[BulkTransitionError] = Field(default_factory=list)
    processed_at: datetime = Field(default_factory=utc_now)
