"""In-memory comment repository for testing.

Each mutating method reads and replaces a comment without awaiting in
between, so under asyncio it is as atomic as the SQL UPDATE it stands in for.
"""

from datetime import datetime
from typing import Optional

from quill.domain.model.comment import Comment, CommentFlag
from quill.domain.repository.comment import CommentRepository, CommentStats
from quill.domain.value import (
    CommentId,
    CommentPath,
    CommentSortField,
    FlagReason,
    PostId,
    SortOrder,
    UserId,
)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    def _active(self, comment_id: CommentId) -> Optional[Comment]:
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            return None
        return comment

    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID."""
        if include_deleted:
            return self._comments.get(comment_id)
        return self._active(comment_id)

    async def find_by_post(
        self,
        post_id: PostId,
        include_deleted: bool = False,
    ) -> list[Comment]:
        """Find all comments for a post in tree order."""
        comments = [c for c in self._comments.values() if c.post_id == post_id]

        # Filter deleted
        if not include_deleted:
            comments = [c for c in comments if not c.is_deleted]

        # Sort by path (tree order)
        comments.sort(key=lambda c: c.path.root)

        return comments

    async def find_page(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        sort_by: CommentSortField = CommentSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Comment]:
        """Find one page of non-deleted comments sharing a parent."""
        comments = self._siblings(post_id, parent_id)

        comments.sort(
            key=lambda c: (getattr(c, sort_by.value), c.created_at, str(c.id)),
            reverse=sort_order == SortOrder.DESC,
        )

        # Paginate
        return comments[offset : offset + limit]

    async def count(
        self, post_id: PostId, parent_id: Optional[CommentId] = None
    ) -> int:
        """Count non-deleted comments sharing a parent."""
        return len(self._siblings(post_id, parent_id))

    def _siblings(
        self, post_id: PostId, parent_id: Optional[CommentId]
    ) -> list[Comment]:
        return [
            c
            for c in self._comments.values()
            if c.post_id == post_id and c.parent_id == parent_id and not c.is_deleted
        ]

    async def find_children(
        self,
        parent_id: CommentId,
        include_deleted: bool = False,
    ) -> list[Comment]:
        """Find direct children of a comment, oldest first."""
        comments = [c for c in self._comments.values() if c.parent_id == parent_id]

        # Filter deleted
        if not include_deleted:
            comments = [c for c in comments if not c.is_deleted]

        comments.sort(key=lambda c: (c.created_at, str(c.id)))

        return comments

    async def find_descendants(
        self, path: CommentPath, include_deleted: bool = True
    ) -> list[Comment]:
        """Find every comment whose path starts with path + '.'."""
        prefix = path.descendant_prefix
        comments = [
            c for c in self._comments.values() if c.path.root.startswith(prefix)
        ]

        if not include_deleted:
            comments = [c for c in comments if not c.is_deleted]

        comments.sort(key=lambda c: c.path.root)
        return comments

    async def find_by_author(
        self,
        author_id: UserId,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Comment]:
        """Find comments by a specific author, newest first."""
        comments = [
            c
            for c in self._comments.values()
            if c.author_id == author_id and not c.is_deleted
        ]

        comments.sort(key=lambda c: (c.created_at, str(c.id)), reverse=True)

        # Paginate
        return comments[offset : offset + limit]

    async def count_by_author(self, author_id: UserId) -> int:
        """Count non-deleted comments by an author."""
        return sum(
            1
            for c in self._comments.values()
            if c.author_id == author_id and not c.is_deleted
        )

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        self._comments[comment.id] = comment
        return comment

    async def update_content(
        self, comment_id: CommentId, content: str, edited_at: datetime
    ) -> Optional[Comment]:
        """Replace content of a non-deleted comment."""
        comment = self._active(comment_id)
        if comment is None:
            return None

        updated = comment.model_copy(
            update={
                "content": content,
                "is_edited": True,
                "edited_at": edited_at,
                "updated_at": edited_at,
            }
        )
        self._comments[comment_id] = updated
        return updated

    async def mark_deleted(
        self, comment_id: CommentId, deleted_by: UserId, deleted_at: datetime
    ) -> bool:
        """Soft-delete a comment if it is not already deleted."""
        comment = self._active(comment_id)
        if comment is None:
            return False

        self._comments[comment_id] = comment.model_copy(
            update={
                "deleted_at": deleted_at,
                "deleted_by": deleted_by,
                "updated_at": deleted_at,
            }
        )
        return True

    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> bool:
        """Add delta to replies_count, flooring at zero."""
        comment = self._active(comment_id)
        if comment is None:
            return False

        self._comments[comment_id] = comment.model_copy(
            update={"replies_count": max(0, comment.replies_count + delta)}
        )
        return True

    async def add_like(self, comment_id: CommentId, user_id: UserId) -> Optional[int]:
        """Add a liker if not already present."""
        comment = self._active(comment_id)
        if comment is None or comment.is_liked_by(user_id):
            return None

        updated = comment.model_copy(
            update={
                "liked_by": comment.liked_by | {user_id},
                "likes_count": comment.likes_count + 1,
            }
        )
        self._comments[comment_id] = updated
        return updated.likes_count

    async def remove_like(
        self, comment_id: CommentId, user_id: UserId
    ) -> Optional[int]:
        """Remove a liker if present."""
        comment = self._active(comment_id)
        if comment is None or not comment.is_liked_by(user_id):
            return None

        updated = comment.model_copy(
            update={
                "liked_by": comment.liked_by - {user_id},
                "likes_count": max(0, comment.likes_count - 1),
            }
        )
        self._comments[comment_id] = updated
        return updated.likes_count

    async def add_flag(
        self, comment_id: CommentId, flag: CommentFlag
    ) -> Optional[Comment]:
        """Append a flag unless the flagger already flagged the comment."""
        comment = self._active(comment_id)
        if comment is None or comment.is_flagged_by(flag.flagger_id):
            return None

        updated = comment.model_copy(update={"flags": (*comment.flags, flag)})
        self._comments[comment_id] = updated
        return updated

    async def mark_flagged(
        self, comment_id: CommentId, reason: FlagReason, threshold: int
    ) -> bool:
        """Flip is_flagged the first time the threshold is reached."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_flagged or comment.flag_count < threshold:
            return False

        self._comments[comment_id] = comment.model_copy(
            update={"is_flagged": True, "flag_reason": reason}
        )
        return True

    async def aggregate_stats(self, post_id: PostId) -> CommentStats:
        """Aggregate over the post's non-deleted comments."""
        comments = [
            c
            for c in self._comments.values()
            if c.post_id == post_id and not c.is_deleted
        ]
        top_level = sum(1 for c in comments if c.is_top_level)
        return CommentStats(
            total_comments=len(comments),
            total_likes=sum(c.likes_count for c in comments),
            top_level_comments=top_level,
            total_replies=len(comments) - top_level,
        )
