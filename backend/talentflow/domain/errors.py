"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Token missing, invalid, or expired"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class AuthorizationError(DomainError):
    """Role or tenant mismatch"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


# Validation Errors
class ValidationError(DomainError):
    """Input or transition validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class SameStatusError(ValidationError):
    """Transition requested to the status the entity already has"""
    error_code = "ALREADY_IN_STATUS"


class InvalidTransitionError(ValidationError):
    """Edge not present in the transition table"""
    error_code = "INVALID_TRANSITION"


class PreconditionError(DomainError):
    """Edge is allowed but a business precondition is unmet"""
    error_code = "PRECONDITION_FAILED"
    http_status = 400

    def __init__(self, message: str, reasons: List[str], details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={**(details or {}), "reasons": list(reasons)})
        self.reasons = list(reasons)


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class JobPostNotFoundError(NotFoundError):
    """Job post not found"""
    error_code = "JOB_POST_NOT_FOUND"


class ApplicationNotFoundError(NotFoundError):
    """Job application not found"""
    error_code = "APPLICATION_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict (e.g., concurrent modification)"""
    error_code = "CONFLICT"
    http_status = 409


class ConcurrencyError(ConflictError):
    """Optimistic concurrency conflict"""
    error_code = "CONCURRENCY_CONFLICT"
