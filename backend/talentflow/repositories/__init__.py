"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection, run_in_transaction
from .job_post_repo import JobPostRepository
from .application_repo import ApplicationRepository
from .audit_repo import AuditRepository

__all__ = [
    "get_database",
    "get_collection",
    "run_in_transaction",
    "JobPostRepository",
    "ApplicationRepository",
    "AuditRepository",
]
