"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class EntityKind(str, Enum):
    """Kinds of entities governed by a lifecycle"""
    JOB_POST = "JOB_POST"
    APPLICATION = "APPLICATION"


class JobPostStatus(str, Enum):
    """Publication lifecycle of a job post"""
    DRAFT = "DRAFT"
    OPEN = "OPEN"  # Publicly visible
    CLOSED = "CLOSED"
    ARCHIVED = "ARCHIVED"  # Terminal


class ApplicationStatus(str, Enum):
    """Review pipeline of a candidate application"""
    APPLIED = "APPLIED"
    UNDER_REVIEW = "UNDER_REVIEW"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    OFFER_EXTENDED = "OFFER_EXTENDED"
    HIRED = "HIRED"  # Terminal
    REJECTED = "REJECTED"  # Terminal
    WITHDRAWN = "WITHDRAWN"  # Terminal


class Role(str, Enum):
    """Principal roles"""
    CANDIDATE = "CANDIDATE"
    HIRING_MANAGER = "HIRING_MANAGER"  # Owning role for job posts
    RECRUITER = "RECRUITER"  # Delegate of the hiring manager


class PermissionAction(str, Enum):
    """Changes an actor may request against an entity"""
    VIEW = "VIEW"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TRANSITION = "TRANSITION"
    VIEW_HISTORY = "VIEW_HISTORY"  # Audit trail and available transitions
    VIEW_APPLICATIONS = "VIEW_APPLICATIONS"  # Applications received by a job post
    BULK_TRANSITION = "BULK_TRANSITION"


# Roles allowed to manage tenant-owned entities
STAFF_ROLES = frozenset({Role.HIRING_MANAGER, Role.RECRUITER})
