"""
API Schemas

Request and response models for job post and application endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from ...domain.enums import ApplicationStatus, EntityKind, JobPostStatus
from ...domain.models import (
    AuditRecord, JobApplication, JobPost, JobPostFields, LifecycleStatus
)


# =============================================================================
# Job Post Schemas
# =============================================================================

class JobPostRequest(JobPostFields):
    """Create/update body; unknown fields are ignored"""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=20000)


class JobPostTransitionRequest(BaseModel):
    """Request to move a job post to another status"""
    target_status: JobPostStatus
    reason: Optional[str] = Field(None, max_length=2000)


class AvailableTransitionsResponse(BaseModel):
    job_post_id: str
    current_status: JobPostStatus
    available_transitions: List[JobPostStatus]


class PublishableResponse(BaseModel):
    """Whether a job post can be published, with the missing fields"""
    job_post_id: str
    can_publish: bool
    reasons: List[str] = Field(default_factory=list)


class JobPostListResponse(BaseModel):
    """One page of job posts"""
    items: List[JobPost]
    page: int
    page_size: int
    total: int


# =============================================================================
# Application Schemas
# =============================================================================

class ApplicationTransitionRequest(BaseModel):
    """Request to move an application through the pipeline"""
    target_status: ApplicationStatus
    reason: Optional[str] = Field(None, max_length=2000)


class ApplicationListResponse(BaseModel):
    """One page of applications"""
    items: List[JobApplication]
    page: int
    page_size: int
    total: int


class BulkTransitionRequest(BaseModel):
    """Move several applications to the same status"""
    application_ids: List[str] = Field(..., min_length=1)
    target_status: ApplicationStatus
    reason: Optional[str] = Field(None, max_length=2000)


# =============================================================================
# Audit Schemas
# =============================================================================

class AuditRecordResponse(BaseModel):
    """One entry of an entity's status history"""
    audit_record_id: str
    entity_kind: EntityKind
    entity_id: str
    from_status: LifecycleStatus
    to_status: LifecycleStatus
    actor_id: str
    actor_email: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_record(cls, record: AuditRecord) -> "AuditRecordResponse":
        return cls(**record.model_dump(exclude={"sequence"}))


class ApplicationDetailsResponse(BaseModel):
    """Application with its status history (newest first)"""
    application: JobApplication
    history: List[AuditRecordResponse]


__all__ = [
    "JobPostRequest",
    "JobPostTransitionRequest",
    "AvailableTransitionsResponse",
    "PublishableResponse",
    "JobPostListResponse",
    "ApplicationTransitionRequest",
    "ApplicationListResponse",
    "BulkTransitionRequest",
    "AuditRecordResponse",
    "ApplicationDetailsResponse",
]
