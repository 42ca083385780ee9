"""JWT Token Validation - resolves the acting principal from a bearer token"""
import jwt
from typing import Any, Dict, Optional
from pydantic import ValidationError as PydanticValidationError

from ..config.settings import settings
from ..domain.enums import Role
from ..domain.errors import AuthenticationError
from ..domain.models import ActorContext
from .logger import get_logger

logger = get_logger(__name__)


class JWTValidator:
    """
    Shared-secret JWT validator

    Tokens are issued by the identity service. Expected claims:
    - sub: user id
    - email: user email (optional)
    - role: CANDIDATE, HIRING_MANAGER or RECRUITER
    - organization_id: tenant id (absent for candidates)
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.audience = audience or settings.jwt_audience or None

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate JWT token

        Args:
            token: Bearer token (with or without 'Bearer ' prefix)

        Returns:
            Decoded token claims

        Raises:
            AuthenticationError: If token is invalid
        """
        if not token:
            raise AuthenticationError("Token is missing")

        if token.startswith("Bearer "):
            token = token[7:]

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={
                    "verify_exp": True,
                    "verify_aud": bool(self.audience),
                    "require": ["sub"],
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthenticationError("Token has expired")
        except jwt.InvalidAudienceError as e:
            logger.warning(f"Invalid token audience: {e}")
            raise AuthenticationError("Invalid token audience")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthenticationError(f"Invalid token: {str(e)}")

    def get_actor_context(self, token: str) -> ActorContext:
        """
        Extract actor context from validated token

        Args:
            token: Bearer token

        Returns:
            ActorContext with user information
        """
        claims = self.validate_token(token)

        role_claim = claims.get("role")
        try:
            role = Role(str(role_claim).upper())
        except ValueError:
            raise AuthenticationError(
                "Token carries an unknown role",
                details={"role": role_claim}
            )

        tenant_id = claims.get("organization_id") or None
        try:
            return ActorContext(
                actor_id=str(claims["sub"]),
                email=claims.get("email") or None,
                role=role,
                tenant_id=str(tenant_id) if tenant_id else None
            )
        except PydanticValidationError as e:
            raise AuthenticationError("Token claims are malformed", details={"errors": e.errors(include_url=False, include_context=False)})


# Global validator instance
_jwt_validator: Optional[JWTValidator] = None


def get_jwt_validator() -> JWTValidator:
    """Get global JWT validator instance"""
    global _jwt_validator
    if _jwt_validator is None:
        _jwt_validator = JWTValidator()
    return _jwt_validator


def get_current_user(authorization: str) -> ActorContext:
    """
    Get current user from authorization header

    Args:
        authorization: Authorization header value

    Returns:
        ActorContext
    """
    if not authorization:
        raise AuthenticationError("Authorization header is missing")

    return get_jwt_validator().get_actor_context(authorization)
