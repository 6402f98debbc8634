"""Unit tests for JWTService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from quill.config import AuthSettings
from quill.domain.model.identity import Identity
from quill.domain.service import JWTService
from quill.domain.value import Role, UserId
from quill.util.jwt import JWTError
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestJWTService:
    """Tests for token round trips and rejection."""

    @pytest.mark.asyncio
    async def test_token_resolves_to_same_identity(self, unit_env):
        # Arrange
        jwt_service = await unit_env.get(JWTService)
        identity = Identity(user_id=UserId(uuid4()), role=Role.MODERATOR)

        # Act
        token = jwt_service.create_token(identity)
        resolved = jwt_service.get_identity_from_token(token)

        # Assert
        assert resolved == identity
        assert resolved.is_privileged

    @pytest.mark.asyncio
    async def test_missing_token_is_anonymous(self, unit_env):
        jwt_service = await unit_env.get(JWTService)

        assert jwt_service.get_identity_from_token(None) is None
        assert jwt_service.get_identity_from_token("") is None

    @pytest.mark.asyncio
    async def test_garbage_token_is_anonymous(self, unit_env):
        jwt_service = await unit_env.get(JWTService)

        assert jwt_service.get_identity_from_token("not-a-jwt") is None

        with pytest.raises(JWTError, match="Invalid token"):
            jwt_service.verify_token("not-a-jwt")

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, unit_env):
        jwt_service = await unit_env.get(JWTService)
        settings = await unit_env.get(AuthSettings)
        token = jwt.encode(
            {
                "user_id": str(uuid4()),
                "role": "user",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(JWTError, match="expired"):
            jwt_service.verify_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        issuer = JWTService(AuthSettings(jwt_secret="a" * 40))
        verifier = JWTService(AuthSettings(jwt_secret="b" * 40))
        token = issuer.create_token(Identity(user_id=UserId(uuid4())))

        assert verifier.get_identity_from_token(token) is None

    def test_unknown_role_is_anonymous(self):
        settings = AuthSettings()
        jwt_service = JWTService(settings)
        token = jwt.encode(
            {
                "user_id": str(uuid4()),
                "role": "superuser",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        assert jwt_service.get_identity_from_token(token) is None
