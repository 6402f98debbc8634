"""Read-side comment service: listings, threads and statistics."""

import math
from datetime import datetime
from typing import Optional

import logfire

from quill.config import CommentSettings
from quill.domain.error import NotFoundError
from quill.domain.model.comment import Comment
from quill.domain.repository import CommentRepository, CommentStats
from quill.domain.value import (
    CommentId,
    CommentSortField,
    FlagReason,
    PostId,
    SortOrder,
    UserId,
)
from quill.domain.value.common import ValueObject

from .base import Service
from .post_service import PostService


class PaginationMeta(ValueObject):
    """Paging information returned with every listing."""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        """Derive page counts from a total and an already clamped page/limit."""
        total_pages = math.ceil(total / limit)
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class CommentView(ValueObject):
    """Public view of a comment.

    Liker IDs and individual flags are never exposed; only their counts.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    parent_id: Optional[CommentId]
    content: str
    level: int
    path: str
    likes_count: int
    replies_count: int
    is_edited: bool
    edited_at: Optional[datetime]
    flag_count: int
    is_flagged: bool
    flag_reason: Optional[FlagReason]
    created_at: datetime
    updated_at: datetime
    is_liked_by_current_user: Optional[bool] = None

    @classmethod
    def from_comment(
        cls, comment: Comment, viewer_id: UserId | None = None
    ) -> "CommentView":
        """Build a view, annotating the viewer's like when a viewer is known."""
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            parent_id=comment.parent_id,
            content=comment.content,
            level=comment.level,
            path=comment.path.root,
            likes_count=comment.likes_count,
            replies_count=comment.replies_count,
            is_edited=comment.is_edited,
            edited_at=comment.edited_at,
            flag_count=comment.flag_count,
            is_flagged=comment.is_flagged,
            flag_reason=comment.flag_reason,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_liked_by_current_user=(
                comment.is_liked_by(viewer_id) if viewer_id else None
            ),
        )


class CommentThread(ValueObject):
    """A comment with its direct, non-deleted replies (oldest first)."""

    comment: CommentView
    replies: list[CommentView]


class CommentQueryService(Service):
    """Domain service for reading comments."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize comment query service.

        Args:
            comment_repository: Comment repository
            post_service: Post domain service
            comment_settings: Paging limits
        """
        self.comment_repository = comment_repository
        self.post_service = post_service
        self.settings = comment_settings

    def clamp_paging(
        self, page: int | None, limit: int | None
    ) -> tuple[int, int]:
        """Clamp page to >= 1 and limit to [1, max_page_size]."""
        page = max(1, page or 1)
        if limit is None:
            limit = self.settings.default_page_size
        limit = min(max(1, limit), self.settings.max_page_size)
        return page, limit

    async def list_by_post(
        self,
        post_id: PostId,
        page: int | None = 1,
        limit: int | None = None,
        parent_id: CommentId | None = None,
        sort_by: CommentSortField = CommentSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        viewer_id: UserId | None = None,
    ) -> tuple[list[CommentView], PaginationMeta]:
        """List one page of comments under a post or a parent comment.

        Args:
            post_id: Post ID
            page: 1-based page number (clamped to >= 1)
            limit: Page size (clamped to [1, max_page_size])
            parent_id: List replies to this comment (None for top-level)
            sort_by: Sort key
            sort_order: Sort direction
            viewer_id: Current user, to annotate likes

        Returns:
            Comments on the page and pagination info

        Raises:
            NotFoundError: If the post doesn't exist
        """
        page, limit = self.clamp_paging(page, limit)

        with logfire.span(
            "comment_query_service.list_by_post",
            post_id=str(post_id),
            parent_id=str(parent_id) if parent_id else None,
            page=page,
            limit=limit,
            sort_by=sort_by.value,
            sort_order=sort_order.value,
        ):
            await self.post_service.require_post(post_id)

            comments = await self.comment_repository.find_page(
                post_id,
                parent_id=parent_id,
                sort_by=sort_by,
                sort_order=sort_order,
                limit=limit,
                offset=(page - 1) * limit,
            )
            total = await self.comment_repository.count(post_id, parent_id=parent_id)

            logfire.info(
                "Comments listed",
                post_id=str(post_id),
                count=len(comments),
                total=total,
            )
            return (
                [CommentView.from_comment(c, viewer_id) for c in comments],
                PaginationMeta.build(total, page, limit),
            )

    async def get_with_children(
        self, comment_id: CommentId, viewer_id: UserId | None = None
    ) -> CommentThread:
        """Get a comment with its direct replies.

        Args:
            comment_id: Comment ID
            viewer_id: Current user, to annotate likes

        Returns:
            The comment and its non-deleted children, oldest first

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
        """
        with logfire.span(
            "comment_query_service.get_with_children", comment_id=str(comment_id)
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            children = await self.comment_repository.find_children(comment_id)

            return CommentThread(
                comment=CommentView.from_comment(comment, viewer_id),
                replies=[CommentView.from_comment(c, viewer_id) for c in children],
            )

    async def list_by_author(
        self,
        author_id: UserId,
        page: int | None = 1,
        limit: int | None = None,
        viewer_id: UserId | None = None,
    ) -> tuple[list[CommentView], PaginationMeta]:
        """List an author's non-deleted comments, newest first.

        Args:
            author_id: Author user ID
            page: 1-based page number
            limit: Page size
            viewer_id: Current user, to annotate likes

        Returns:
            Comments on the page and pagination info
        """
        page, limit = self.clamp_paging(page, limit)

        with logfire.span(
            "comment_query_service.list_by_author",
            author_id=str(author_id),
            page=page,
            limit=limit,
        ):
            comments = await self.comment_repository.find_by_author(
                author_id, limit=limit, offset=(page - 1) * limit
            )
            total = await self.comment_repository.count_by_author(author_id)

            return (
                [CommentView.from_comment(c, viewer_id) for c in comments],
                PaginationMeta.build(total, page, limit),
            )

    async def stats(self, post_id: PostId) -> CommentStats:
        """Aggregate a post's non-deleted comments.

        Computed from the comments themselves, so it can be compared with the
        cached counters to spot drift.

        Raises:
            NotFoundError: If the post doesn't exist
        """
        with logfire.span("comment_query_service.stats", post_id=str(post_id)):
            await self.post_service.require_post(post_id)
            stats = await self.comment_repository.aggregate_stats(post_id)
            logfire.info(
                "Comment stats computed",
                post_id=str(post_id),
                total_comments=stats.total_comments,
            )
            return stats
