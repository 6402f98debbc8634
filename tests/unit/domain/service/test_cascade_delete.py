"""Unit tests for cascading soft deletes."""

from uuid import uuid4

import pytest

from quill.domain.error import ConflictError, ForbiddenError, NotFoundError
from quill.domain.model.identity import Identity
from quill.domain.repository import CommentRepository, PostRepository
from quill.domain.service import CommentService
from quill.domain.value import CommentId, Role, UserId
from tests.conftest import make_post
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _seed_thread(unit_env):
    """Post with A (top-level) -> B (reply) -> C (reply to B)."""
    comment_service = await unit_env.get(CommentService)
    post_repo = await unit_env.get(PostRepository)
    post = await post_repo.save(make_post())
    author = UserId(uuid4())

    a = await comment_service.create_comment(post.id, author, "A")
    b = await comment_service.create_comment(
        post.id, UserId(uuid4()), "B", parent_id=a.id
    )
    c = await comment_service.create_comment(
        post.id, UserId(uuid4()), "C", parent_id=b.id
    )
    return post, author, a, b, c


class TestSoftDelete:
    """Tests for soft_delete method."""

    @pytest.mark.asyncio
    async def test_delete_top_level_cascades_to_reply(self, unit_env):
        """Deleting A with one reply B deletes both and empties the post."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        author = UserId(uuid4())
        a = await comment_service.create_comment(post.id, author, "A")
        b = await comment_service.create_comment(
            post.id, UserId(uuid4()), "B", parent_id=a.id
        )

        # Act
        deleted_count = await comment_service.soft_delete(
            a.id, Identity(user_id=author)
        )

        # Assert
        assert deleted_count == 2
        assert await comment_repo.find_by_id(a.id) is None
        assert await comment_repo.find_by_id(b.id) is None
        assert (await post_repo.find_by_id(post.id)).comments_count == 0

        swept = await comment_repo.find_by_id(b.id, include_deleted=True)
        assert swept.deleted_by == author

    @pytest.mark.asyncio
    async def test_whole_subtree_shares_deleter_and_time(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post, author, a, b, c = await _seed_thread(unit_env)

        deleted_count = await comment_service.soft_delete(
            a.id, Identity(user_id=author)
        )

        assert deleted_count == 3
        rows = await comment_repo.find_by_post(post.id, include_deleted=True)
        assert all(r.is_deleted for r in rows)
        assert {r.deleted_by for r in rows} == {author}
        assert len({r.deleted_at for r in rows}) == 1

    @pytest.mark.asyncio
    async def test_delete_reply_decrements_only_parent(self, unit_env):
        """Deleting B removes B and C; A loses one reply, the post is untouched."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post_repo = await unit_env.get(PostRepository)
        post, _, a, b, c = await _seed_thread(unit_env)

        deleted_count = await comment_service.soft_delete(
            b.id, Identity(user_id=b.author_id)
        )

        assert deleted_count == 2
        assert await comment_repo.find_by_id(c.id) is None
        assert (await comment_repo.find_by_id(a.id)).replies_count == 0
        assert (await post_repo.find_by_id(post.id)).comments_count == 1

    @pytest.mark.asyncio
    async def test_already_deleted_descendants_not_counted(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post, author, a, b, c = await _seed_thread(unit_env)

        await comment_service.soft_delete(c.id, Identity(user_id=c.author_id))
        deleted_count = await comment_service.soft_delete(
            a.id, Identity(user_id=author)
        )

        assert deleted_count == 2
        assert (await post_repo.find_by_id(post.id)).comments_count == 0

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        _, _, a, _, _ = await _seed_thread(unit_env)

        with pytest.raises(ForbiddenError):
            await comment_service.soft_delete(a.id, Identity(user_id=UserId(uuid4())))

        assert await comment_repo.find_by_id(a.id) is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.MODERATOR, Role.ADMIN])
    async def test_privileged_role_can_delete_any_comment(self, unit_env, role):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        _, _, a, _, _ = await _seed_thread(unit_env)
        moderator = Identity(user_id=UserId(uuid4()), role=role)

        deleted_count = await comment_service.soft_delete(a.id, moderator)

        assert deleted_count == 3
        deleted = await comment_repo.find_by_id(a.id, include_deleted=True)
        assert deleted.deleted_by == moderator.user_id

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post, author, a, _, _ = await _seed_thread(unit_env)
        await comment_service.soft_delete(a.id, Identity(user_id=author))

        with pytest.raises(NotFoundError):
            await comment_service.soft_delete(a.id, Identity(user_id=author))

        assert (await post_repo.find_by_id(post.id)).comments_count == 0

    @pytest.mark.asyncio
    async def test_missing_comment_is_not_found(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.soft_delete(
                CommentId(uuid4()), Identity(user_id=UserId(uuid4()))
            )


class TestRepairCascade:
    """Tests for repair_cascade method."""

    @pytest.mark.asyncio
    async def test_repair_marks_descendants_left_behind(self, unit_env):
        """A root deleted without its sweep gets its subtree finished."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post, author, a, b, c = await _seed_thread(unit_env)
        deleted_at = (await comment_repo.find_by_id(a.id)).created_at

        # Only the root was marked, as if the sweep crashed
        await comment_repo.mark_deleted(a.id, author, deleted_at)

        repaired = await comment_service.repair_cascade(a.id)

        assert repaired == 2
        for comment_id in (b.id, c.id):
            swept = await comment_repo.find_by_id(comment_id, include_deleted=True)
            assert swept.deleted_by == author
            assert swept.deleted_at == deleted_at

        # Nothing left to do the second time
        assert await comment_service.repair_cascade(a.id) == 0

    @pytest.mark.asyncio
    async def test_repair_live_comment_conflicts(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        _, _, a, _, _ = await _seed_thread(unit_env)

        with pytest.raises(ConflictError):
            await comment_service.repair_cascade(a.id)

    @pytest.mark.asyncio
    async def test_repair_missing_comment_not_found(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.repair_cascade(CommentId(uuid4()))
