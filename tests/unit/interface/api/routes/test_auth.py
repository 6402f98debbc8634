"""Unit tests for the route authentication helper."""

from uuid import uuid4

import pytest
from fastapi import HTTPException

from quill.config import AuthSettings
from quill.domain.model import Identity
from quill.domain.service import JWTService
from quill.domain.value import Role, UserId
from quill.interface.api.routes.auth import require_identity


class TestRequireIdentity:
    """Tests for require_identity function."""

    def test_valid_token_returns_identity(self):
        jwt_service = JWTService(AuthSettings())
        identity = Identity(user_id=UserId(uuid4()), role=Role.ADMIN)
        token = jwt_service.create_token(identity)

        assert require_identity(jwt_service, token, "delete comments") == identity

    @pytest.mark.parametrize("token", [None, "", "not-a-token"])
    def test_missing_or_bad_token_is_unauthorized(self, token):
        jwt_service = JWTService(AuthSettings())

        with pytest.raises(HTTPException) as exc_info:
            require_identity(jwt_service, token, "like comments")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Authentication required to like comments"
