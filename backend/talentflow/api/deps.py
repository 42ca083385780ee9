"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Header

from ..domain.models import ActorContext
from ..domain.errors import AuthenticationError
from ..services.job_post_service import JobPostService
from ..services.application_service import ApplicationService
from ..utils.jwt import get_current_user as _jwt_get_current_user  # Internal use only
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def get_current_user_dep(
    authorization: Optional[str] = Header(None)
) -> ActorContext:
    """
    Dependency to get current user from Authorization header

    Raises:
        AuthenticationError: 401 if token is invalid or missing
    """
    if not authorization:
        raise AuthenticationError("Authorization header is missing")
    return _jwt_get_current_user(authorization)


def get_optional_user_dep(
    authorization: Optional[str] = Header(None)
) -> Optional[ActorContext]:
    """
    Dependency to optionally get current user

    Returns None if no token provided.
    Raises error if token is provided but invalid.
    """
    if not authorization:
        return None
    return _jwt_get_current_user(authorization)


def get_job_post_service() -> JobPostService:
    return JobPostService()


def get_application_service() -> ApplicationService:
    return ApplicationService()
