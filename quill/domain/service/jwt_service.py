"""JWT token domain service."""

import logfire

from quill.config import AuthSettings
from quill.domain.model.identity import Identity
from quill.domain.value import Role, UserId
from quill.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations.

    Tokens are minted by the identity provider; ``create_token`` exists for
    tooling and tests.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, identity: Identity) -> str:
        """Create JWT token for an identity.

        Args:
            identity: User ID and role to embed

        Returns:
            JWT token string
        """
        with logfire.span(
            "jwt_service.create_token",
            user_id=str(identity.user_id),
            role=identity.role.value,
        ):
            token = create_token(
                str(identity.user_id), identity.role.value, self.auth_settings
            )
            logfire.info("JWT token created", user_id=str(identity.user_id))
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info(
                    "JWT token verified", user_id=payload.user_id, role=payload.role
                )
                return payload
            except Exception as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise

    def get_identity_from_token(self, token: str | None) -> Identity | None:
        """Resolve a token to an identity without raising.

        Used by routes that authenticate optionally.

        Args:
            token: JWT token string (optional)

        Returns:
            Identity if token is valid, None if token is missing or invalid
        """
        if not token:
            return None

        try:
            payload = self.verify_token(token)
            return Identity(user_id=UserId(payload.user_id), role=Role(payload.role))
        except Exception as e:
            # Invalid or expired token, treat as anonymous
            logfire.debug(
                "JWT verification failed, treating as anonymous", error=str(e)
            )
            return None
