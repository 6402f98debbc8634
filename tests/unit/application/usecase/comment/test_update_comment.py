"""Unit tests for UpdateCommentUseCase."""

from datetime import timedelta
from uuid import uuid4

import pytest

from quill.application.usecase.comment.update_comment import (
    UpdateCommentRequest,
    UpdateCommentUseCase,
)
from quill.domain.error import ForbiddenError, ValidationError
from quill.domain.repository import CommentRepository
from quill.domain.service import CommentService
from quill.domain.value import PostId, UserId
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestUpdateCommentUseCase:
    """Tests for UpdateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_update_comment_content_success(self, unit_env):
        """Updating comment content by author should succeed."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        use_case = UpdateCommentUseCase(comment_service=comment_service)

        author_id = UserId(uuid4())
        comment = await comment_repo.save(
            make_comment(PostId(uuid4()), author_id=author_id, content="Original")
        )

        request = UpdateCommentRequest(
            comment_id=str(comment.id),
            user_id=str(author_id),
            content="Updated comment",
        )

        # Act
        response = await use_case.execute(request)

        # Assert
        assert response.comment.content == "Updated comment"
        assert response.comment.is_edited is True
        assert response.comment.edited_at is not None

        stored = await comment_repo.find_by_id(comment.id)
        assert stored.content == "Updated comment"

    @pytest.mark.asyncio
    async def test_update_comment_not_author_fails(self, unit_env):
        """Non-author should not be able to update comment."""
        # Arrange
        use_case = await unit_env.get(UpdateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_comment(PostId(uuid4())))

        request = UpdateCommentRequest(
            comment_id=str(comment.id),
            user_id=str(uuid4()),
            content="Hijacked",
        )

        # Act & Assert
        with pytest.raises(ForbiddenError, match="your own comments"):
            await use_case.execute(request)

    @pytest.mark.asyncio
    async def test_update_comment_after_edit_window_fails(self, unit_env):
        use_case = await unit_env.get(UpdateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        author_id = UserId(uuid4())
        comment = await comment_repo.save(
            make_comment(
                PostId(uuid4()), author_id=author_id, age=timedelta(hours=1)
            )
        )

        with pytest.raises(ValidationError, match="edit window"):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id),
                    user_id=str(author_id),
                    content="Late fix",
                )
            )
