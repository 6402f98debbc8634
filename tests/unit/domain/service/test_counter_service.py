"""Unit tests for CounterService."""

from uuid import uuid4

import pytest

from quill.domain.error import NotFoundError
from quill.domain.model.identity import Identity
from quill.domain.repository import CommentRepository, PostRepository
from quill.domain.service import CommentService, CounterService
from quill.domain.value import PostId, UserId
from tests.conftest import make_comment, make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestDetectDrift:
    """Tests for detect_drift method."""

    @pytest.mark.asyncio
    async def test_counters_consistent_after_normal_operations(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        counter_service = await unit_env.get(CounterService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        author = UserId(uuid4())

        first = await comment_service.create_comment(post.id, author, "One")
        await comment_service.create_comment(post.id, author, "Two")
        reply = await comment_service.create_comment(
            post.id, author, "Reply", parent_id=first.id
        )
        await comment_service.create_comment(
            post.id, author, "Nested", parent_id=reply.id
        )
        await comment_service.soft_delete(reply.id, Identity(user_id=author))

        # Act
        drift = await counter_service.detect_drift(post.id)

        # Assert
        assert not drift.has_drift
        assert drift.post_cached == 2
        assert drift.post_top_level_actual == 2

    @pytest.mark.asyncio
    async def test_reports_stale_counters(self, unit_env):
        counter_service = await unit_env.get(CounterService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post(comments_count=5))
        parent = await comment_repo.save(make_comment(post.id, replies_count=3))
        await comment_repo.save(make_comment(post.id, parent=parent))

        drift = await counter_service.detect_drift(post.id)

        assert drift.has_drift
        assert drift.post_drifted
        assert drift.post_cached == 5
        assert drift.post_top_level_actual == 1
        assert drift.replies_mismatches == {parent.id: (3, 1)}

    @pytest.mark.asyncio
    async def test_cascade_counting_diverges_from_top_level_count(self, unit_env):
        """Post counter drops by the cascade size, which can undercount."""
        comment_service = await unit_env.get(CommentService)
        counter_service = await unit_env.get(CounterService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        author = UserId(uuid4())

        a = await comment_service.create_comment(post.id, author, "A")
        await comment_service.create_comment(post.id, author, "B", parent_id=a.id)
        await comment_service.create_comment(post.id, author, "Other")
        await comment_service.soft_delete(a.id, Identity(user_id=author))

        drift = await counter_service.detect_drift(post.id)

        # 2 top-level - 2 cascaded = 0, floored, while one top-level remains
        assert drift.post_cached == 0
        assert drift.post_top_level_actual == 1
        assert drift.post_drifted

    @pytest.mark.asyncio
    async def test_missing_post_raises_not_found(self, unit_env):
        counter_service = await unit_env.get(CounterService)

        with pytest.raises(NotFoundError):
            await counter_service.detect_drift(PostId(uuid4()))
