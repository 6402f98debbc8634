"""Unit tests for CreateCommentUseCase."""

from uuid import uuid4

import pytest

from quill.application.usecase.comment.create_comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
)
from quill.domain.error import ForbiddenError, NotFoundError
from quill.domain.repository import CommentRepository, PostRepository
from quill.domain.service import CommentService
from quill.domain.value import CommentId
from tests.conftest import make_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestCreateCommentUseCase:
    """Tests for CreateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_create_top_level_comment(self, unit_env):
        """Creating a top-level comment returns its public view."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        use_case = CreateCommentUseCase(comment_service=comment_service)

        post = await post_repo.save(make_post())
        author_id = str(uuid4())

        request = CreateCommentRequest(
            post_id=str(post.id),
            author_id=author_id,
            content="Great article!",
        )

        # Act
        response = await use_case.execute(request)

        # Assert
        view = response.comment
        assert view.content == "Great article!"
        assert str(view.author_id) == author_id
        assert view.level == 0
        assert view.parent_id is None
        assert view.is_liked_by_current_user is False

        stored = await comment_repo.find_by_id(CommentId(view.id))
        assert stored is not None
        assert (await post_repo.find_by_id(post.id)).comments_count == 1

    @pytest.mark.asyncio
    async def test_create_reply(self, unit_env):
        """Replying places the comment under its parent."""
        # Arrange
        use_case = await unit_env.get(CreateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        parent = await use_case.execute(
            CreateCommentRequest(
                post_id=str(post.id), author_id=str(uuid4()), content="Parent"
            )
        )

        # Act
        response = await use_case.execute(
            CreateCommentRequest(
                post_id=str(post.id),
                author_id=str(uuid4()),
                content="Reply",
                parent_id=str(parent.comment.id),
            )
        )

        # Assert
        assert response.comment.parent_id == parent.comment.id
        assert response.comment.level == 1
        assert response.comment.path.startswith(parent.comment.path + ".")

        stored_parent = await comment_repo.find_by_id(parent.comment.id)
        assert stored_parent.replies_count == 1

    @pytest.mark.asyncio
    async def test_create_on_unknown_post(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                CreateCommentRequest(
                    post_id=str(uuid4()), author_id=str(uuid4()), content="Hi"
                )
            )

    @pytest.mark.asyncio
    async def test_create_when_comments_disabled(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post(comments_enabled=False))

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                CreateCommentRequest(
                    post_id=str(post.id), author_id=str(uuid4()), content="Hi"
                )
            )
