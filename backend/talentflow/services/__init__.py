"""Service modules - Business logic layer"""
from .job_post_service import JobPostService
from .application_service import ApplicationService

__all__ = [
    "JobPostService",
    "ApplicationService",
]
