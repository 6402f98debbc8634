"""Counter reconciliation domain service.

Two cached counters exist for fast reads:

- ``Comment.replies_count`` counts direct, non-deleted replies.
- ``Post.comments_count`` goes up by one per top-level comment and down by
  the whole cascade when a top-level comment is deleted.

Both are adjusted only through atomic increments. ``detect_drift`` rebuilds
the expected values from a fresh scan so drift can be reported and repaired.
"""

from collections import Counter

import logfire
from pydantic import Field

from quill.domain.model.comment import Comment
from quill.domain.repository import CommentRepository
from quill.domain.value import CommentId, PostId
from quill.domain.value.common import ValueObject

from .base import Service
from .post_service import PostService


class CounterDrift(ValueObject):
    """Difference between cached counters and a fresh recount."""

    post_id: PostId
    post_cached: int
    post_top_level_actual: int
    # comment id -> (cached, actual)
    replies_mismatches: dict[CommentId, tuple[int, int]] = Field(default_factory=dict)

    @property
    def post_drifted(self) -> bool:
        """Whether the post counter differs from the live top-level count."""
        return self.post_cached != self.post_top_level_actual

    @property
    def has_drift(self) -> bool:
        """Whether any counter differs from its recount."""
        return self.post_drifted or bool(self.replies_mismatches)


class CounterService(Service):
    """Domain service keeping denormalized counters in step with the tree."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
    ) -> None:
        """Initialize counter service.

        Args:
            comment_repository: Comment repository
            post_service: Post domain service
        """
        self.comment_repository = comment_repository
        self.post_service = post_service

    async def on_comment_created(self, comment: Comment) -> bool:
        """Apply counter changes for a newly created comment.

        Top-level comments bump the post counter; replies bump only their
        immediate parent's replies_count.

        Returns:
            False if the reply's parent was already deleted, so nothing moved
        """
        with logfire.span(
            "counter_service.on_comment_created",
            comment_id=str(comment.id),
            top_level=comment.is_top_level,
        ):
            if comment.is_top_level:
                await self.post_service.increment_comments_count(comment.post_id, 1)
                return True
            return await self.comment_repository.increment_replies_count(
                comment.parent_id, 1
            )

    async def on_comment_deleted(self, comment: Comment, deleted_count: int) -> None:
        """Apply counter changes after a cascade delete rooted at comment.

        Args:
            comment: Root of the deleted subtree
            deleted_count: Number of comments the cascade marked deleted
        """
        with logfire.span(
            "counter_service.on_comment_deleted",
            comment_id=str(comment.id),
            top_level=comment.is_top_level,
            deleted_count=deleted_count,
        ):
            if comment.is_top_level:
                await self.post_service.increment_comments_count(
                    comment.post_id, -deleted_count
                )
            else:
                # Grandchildren never count towards a grandparent
                await self.comment_repository.increment_replies_count(
                    comment.parent_id, -1
                )

    async def detect_drift(self, post_id: PostId) -> CounterDrift:
        """Compare cached counters against a fresh scan of the post's comments.

        Drift is reported, never raised.

        Args:
            post_id: Post ID

        Returns:
            Cached and recounted values for every counter that differs

        Raises:
            NotFoundError: If the post doesn't exist
        """
        with logfire.span("counter_service.detect_drift", post_id=str(post_id)):
            post = await self.post_service.require_post(post_id)
            comments = await self.comment_repository.find_by_post(post_id)

            children = Counter(c.parent_id for c in comments if c.parent_id)
            mismatches = {
                c.id: (c.replies_count, children[c.id])
                for c in comments
                if c.replies_count != children[c.id]
            }

            drift = CounterDrift(
                post_id=post_id,
                post_cached=post.comments_count,
                post_top_level_actual=sum(1 for c in comments if c.is_top_level),
                replies_mismatches=mismatches,
            )

            if drift.has_drift:
                logfire.warn(
                    "Counter drift detected",
                    post_id=str(post_id),
                    post_cached=drift.post_cached,
                    post_top_level_actual=drift.post_top_level_actual,
                    replies_mismatches=len(mismatches),
                )
            else:
                logfire.info("Counters consistent", post_id=str(post_id))

            return drift
