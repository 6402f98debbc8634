"""Comment repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from quill.domain.model.comment import Comment, CommentFlag
from quill.domain.value import (
    CommentId,
    CommentPath,
    CommentSortField,
    FlagReason,
    PostId,
    SortOrder,
    UserId,
)
from quill.domain.value.common import ValueObject


class CommentStats(ValueObject):
    """Aggregate over a post's non-deleted comments."""

    total_comments: int = Field(default=0, ge=0)
    total_likes: int = Field(default=0, ge=0)
    top_level_comments: int = Field(default=0, ge=0)
    total_replies: int = Field(default=0, ge=0)


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.

    Counter, like, flag and soft-delete mutations are single atomic
    operations against one comment. Callers must never read a counter,
    compute a new value and write it back.
    """

    @abstractmethod
    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier
            include_deleted: Whether a soft-deleted comment may be returned

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_post(
        self,
        post_id: PostId,
        include_deleted: bool = False,
    ) -> List[Comment]:
        """Find all comments for a post in tree order (ordered by path).

        Args:
            post_id: The post ID
            include_deleted: Whether to include soft-deleted comments

        Returns:
            List of comments in tree order
        """
        pass

    @abstractmethod
    async def find_page(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        sort_by: CommentSortField = CommentSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Comment]:
        """Find one page of non-deleted comments sharing a parent.

        Args:
            post_id: The post ID
            parent_id: Parent comment ID (None for top-level comments)
            sort_by: Field to sort on
            sort_order: Sort direction
            limit: Maximum number of comments to return
            offset: Number of comments to skip

        Returns:
            List of comments
        """
        pass

    @abstractmethod
    async def count(
        self, post_id: PostId, parent_id: Optional[CommentId] = None
    ) -> int:
        """Count non-deleted comments sharing a parent.

        Args:
            post_id: The post ID
            parent_id: Parent comment ID (None for top-level comments)

        Returns:
            Number of matching comments
        """
        pass

    @abstractmethod
    async def find_children(
        self,
        parent_id: CommentId,
        include_deleted: bool = False,
    ) -> List[Comment]:
        """Find direct replies to a comment, oldest first.

        Args:
            parent_id: The parent comment ID
            include_deleted: Whether to include soft-deleted comments

        Returns:
            List of child comments
        """
        pass

    @abstractmethod
    async def find_descendants(
        self, path: CommentPath, include_deleted: bool = True
    ) -> List[Comment]:
        """Find every comment below the given path with one prefix query.

        Args:
            path: Path of the subtree root (the root itself is excluded)
            include_deleted: Whether to include soft-deleted comments

        Returns:
            List of descendants in tree order
        """
        pass

    @abstractmethod
    async def find_by_author(
        self,
        author_id: UserId,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Comment]:
        """Find non-deleted comments by an author, newest first.

        Args:
            author_id: The author's user ID
            limit: Maximum number of comments to return
            offset: Number of comments to skip

        Returns:
            List of comments by the author
        """
        pass

    @abstractmethod
    async def count_by_author(self, author_id: UserId) -> int:
        """Count non-deleted comments by an author."""
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or replace).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def update_content(
        self, comment_id: CommentId, content: str, edited_at: datetime
    ) -> Optional[Comment]:
        """Replace the content of a non-deleted comment and mark it edited.

        Args:
            comment_id: Comment ID
            content: New content
            edited_at: Edit timestamp

        Returns:
            Updated comment, None if the comment doesn't exist or is deleted
        """
        pass

    @abstractmethod
    async def mark_deleted(
        self, comment_id: CommentId, deleted_by: UserId, deleted_at: datetime
    ) -> bool:
        """Soft-delete a comment if it is not already deleted.

        Args:
            comment_id: Comment ID
            deleted_by: Identity performing the delete
            deleted_at: Deletion timestamp

        Returns:
            True if this call marked the comment, False if it was missing or
            already deleted
        """
        pass

    @abstractmethod
    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> bool:
        """Atomically add delta to a non-deleted comment's replies_count.

        The counter never goes below zero.

        Args:
            comment_id: Comment ID
            delta: Amount to add (negative to decrement)

        Returns:
            True if applied, False if the comment is missing or deleted
        """
        pass

    @abstractmethod
    async def add_like(self, comment_id: CommentId, user_id: UserId) -> Optional[int]:
        """Atomically add a liker to a non-deleted comment.

        Returns:
            New likes_count, or None if the user already liked the comment or
            the comment is missing or deleted
        """
        pass

    @abstractmethod
    async def remove_like(
        self, comment_id: CommentId, user_id: UserId
    ) -> Optional[int]:
        """Atomically remove a liker from a non-deleted comment.

        Returns:
            New likes_count, or None if the user did not like the comment or
            the comment is missing or deleted
        """
        pass

    @abstractmethod
    async def add_flag(
        self, comment_id: CommentId, flag: CommentFlag
    ) -> Optional[Comment]:
        """Atomically append a flag unless the flagger already flagged it.

        Returns:
            Updated comment, or None if the flagger already flagged the
            comment or the comment is missing or deleted
        """
        pass

    @abstractmethod
    async def mark_flagged(
        self, comment_id: CommentId, reason: FlagReason, threshold: int
    ) -> bool:
        """Set is_flagged once the flag count reaches threshold.

        Only applies to comments that are not flagged yet, so the first
        triggering reason is kept.

        Returns:
            True if this call flipped the comment to flagged
        """
        pass

    @abstractmethod
    async def aggregate_stats(self, post_id: PostId) -> CommentStats:
        """Aggregate totals over a post's non-deleted comments.

        Computed from the comments themselves, not from cached counters.
        """
        pass
