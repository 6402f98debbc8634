"""Authentication helpers shared by routes."""

from fastapi import HTTPException, status

from quill.domain.model import Identity
from quill.domain.service import JWTService


def require_identity(
    jwt_service: JWTService, auth_token: str | None, action: str
) -> Identity:
    """Resolve the auth cookie to an identity or fail with 401.

    Args:
        jwt_service: JWT service for token verification
        auth_token: JWT token from cookie
        action: What the caller is trying to do, for the error message

    Raises:
        HTTPException: If the token is missing, invalid or expired
    """
    identity = jwt_service.get_identity_from_token(auth_token)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    return identity
