"""Comment domain service.

Builds the reply tree, edits content and performs cascading soft deletes.
"""

from datetime import datetime, timedelta
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from quill.config import CommentSettings
from quill.domain.error import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from quill.domain.model.comment import CONTENT_MAX_LENGTH, Comment
from quill.domain.model.common import utc_now
from quill.domain.model.identity import Identity
from quill.domain.repository import CommentRepository
from quill.domain.value import CommentId, CommentPath, PostId, UserId

from .base import Service
from .counter_service import CounterService
from .post_service import PostService


def normalize_content(content: str) -> str:
    """Strip content and check its length.

    Raises:
        ValidationError: If content is empty or too long after stripping
    """
    stripped = content.strip()
    if not stripped:
        raise ValidationError("Comment content must not be empty")
    if len(stripped) > CONTENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment content must be at most {CONTENT_MAX_LENGTH} characters"
        )
    return stripped


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        counter_service: CounterService,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_service: Post domain service
            counter_service: Counter reconciliation service
            comment_settings: Threading rules
        """
        self.comment_repository = comment_repository
        self.post_service = post_service
        self.counter_service = counter_service
        self.settings = comment_settings

    async def create_comment(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a comment on a post or reply to another comment.

        All preconditions are checked before anything is written.

        Args:
            post_id: Post ID
            author_id: Author user ID
            content: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            Created comment

        Raises:
            NotFoundError: If the post or parent comment doesn't exist
            ForbiddenError: If comments are disabled on the post
            ConflictError: If the parent belongs to another post
            ValidationError: If the nesting limit is reached or content is invalid
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            post = await self.post_service.require_post(post_id)
            if not post.comments_enabled:
                logfire.warn(
                    "Comment on post with comments disabled", post_id=str(post_id)
                )
                raise ForbiddenError("Comments are disabled for this post")

            parent = None
            if parent_id:
                parent = await self.comment_repository.find_by_id(parent_id)
                if not parent:
                    logfire.error(
                        "Parent comment not found",
                        parent_id=str(parent_id),
                        post_id=str(post_id),
                    )
                    raise NotFoundError("Parent comment", str(parent_id))
                if parent.post_id != post_id:
                    logfire.error(
                        "Parent comment does not belong to post",
                        parent_id=str(parent_id),
                        parent_post_id=str(parent.post_id),
                        target_post_id=str(post_id),
                    )
                    raise ConflictError("Parent comment belongs to a different post")
                if parent.level >= self.settings.max_level:
                    logfire.warn(
                        "Maximum nesting level reached",
                        parent_id=str(parent_id),
                        parent_level=parent.level,
                    )
                    raise ValidationError("Maximum comment nesting level reached")

            text = normalize_content(content)

            comment_id = CommentId(uuid4())
            now = utc_now()
            try:
                comment = Comment(
                    id=comment_id,
                    post_id=post_id,
                    author_id=author_id,
                    parent_id=parent_id,
                    content=text,
                    level=parent.level + 1 if parent else 0,
                    path=(
                        parent.path.child(comment_id)
                        if parent
                        else CommentPath.for_top_level(comment_id)
                    ),
                    created_at=now,
                    updated_at=now,
                )
            except PydanticValidationError as e:
                raise ValidationError(str(e))

            saved = await self.comment_repository.save(comment)

            if parent:
                # A delete anywhere up the chain may have started while this
                # reply was saved; its root is marked before its sweep runs
                deleted = await self._deleted_ancestor(saved)
                if deleted is not None:
                    await self._orphaned_reply(saved, deleted)

            if not await self.counter_service.on_comment_created(saved):
                # The parent was deleted before its counter could move
                current = await self.comment_repository.find_by_id(
                    parent.id, include_deleted=True
                )
                await self._orphaned_reply(saved, current)

            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                post_id=str(post_id),
                level=saved.level,
            )
            return saved

    async def _deleted_ancestor(self, reply: Comment) -> Comment | None:
        """Nearest deleted ancestor of a reply, if any."""
        for ancestor_id in reversed(reply.path.ids[:-1]):
            ancestor = await self.comment_repository.find_by_id(
                ancestor_id, include_deleted=True
            )
            if ancestor is not None and ancestor.is_deleted:
                return ancestor
        return None

    async def _orphaned_reply(self, reply: Comment, ancestor: Comment | None) -> None:
        """Sweep a reply whose ancestor was deleted concurrently, then fail."""
        if ancestor and ancestor.is_deleted:
            deleted_by, deleted_at = ancestor.deleted_by, ancestor.deleted_at
        else:
            deleted_by, deleted_at = reply.author_id, utc_now()
        await self.comment_repository.mark_deleted(reply.id, deleted_by, deleted_at)
        logfire.warn(
            "Ancestor deleted while reply was created",
            comment_id=str(reply.id),
            parent_id=str(reply.parent_id),
            deleted_ancestor_id=str(ancestor.id) if ancestor else None,
        )
        raise NotFoundError("Parent comment", str(reply.parent_id))

    async def update_content(
        self, comment_id: CommentId, editor_id: UserId, content: str
    ) -> Comment:
        """Replace the content of a comment within its edit window.

        Args:
            comment_id: Comment ID
            editor_id: User attempting the edit
            content: New content

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
            ForbiddenError: If the editor isn't the author
            ValidationError: If the edit window has passed or content is invalid
        """
        with logfire.span(
            "comment_service.update_content",
            comment_id=str(comment_id),
            editor_id=str(editor_id),
            content_length=len(content),
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found for edit", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            if comment.author_id != editor_id:
                logfire.warn(
                    "Edit by non-author rejected",
                    comment_id=str(comment_id),
                    editor_id=str(editor_id),
                )
                raise ForbiddenError("You can only edit your own comments")

            now = utc_now()
            if not self._within_edit_window(comment, now):
                raise ValidationError("Comment edit window has expired")

            text = normalize_content(content)

            updated = await self.comment_repository.update_content(
                comment_id, text, now
            )
            if updated is None:
                # Deleted between the read and the write
                logfire.warn(
                    "Comment deleted before edit was applied",
                    comment_id=str(comment_id),
                )
                raise NotFoundError("Comment", str(comment_id))

            logfire.info(
                "Comment content updated",
                comment_id=str(comment_id),
                post_id=str(updated.post_id),
                content_length=len(updated.content),
            )
            return updated

    def _within_edit_window(self, comment: Comment, now: datetime) -> bool:
        window = timedelta(minutes=self.settings.edit_window_minutes)
        return now - comment.created_at <= window

    async def soft_delete(self, comment_id: CommentId, actor: Identity) -> int:
        """Soft-delete a comment and its whole subtree.

        The root is marked with a conditional write so that two concurrent
        deletes can't both succeed. Descendants are found with one prefix
        query on the materialized path and marked one by one; if that sweep
        fails part way, ``repair_cascade`` finishes it.

        Args:
            comment_id: Comment ID
            actor: Caller performing the delete

        Returns:
            Number of comments deleted (the comment itself plus descendants)

        Raises:
            NotFoundError: If the comment doesn't exist or is already deleted
            ForbiddenError: If the actor is neither the author nor privileged
        """
        with logfire.span(
            "comment_service.soft_delete",
            comment_id=str(comment_id),
            actor_id=str(actor.user_id),
            actor_role=actor.role.value,
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn(
                    "Comment not found for delete", comment_id=str(comment_id)
                )
                raise NotFoundError("Comment", str(comment_id))

            if comment.author_id != actor.user_id and not actor.is_privileged:
                logfire.warn(
                    "Delete by non-author rejected",
                    comment_id=str(comment_id),
                    actor_id=str(actor.user_id),
                )
                raise ForbiddenError("You can only delete your own comments")

            now = utc_now()
            marked = await self.comment_repository.mark_deleted(
                comment_id, actor.user_id, now
            )
            if not marked:
                # Lost a race with another delete
                raise NotFoundError("Comment", str(comment_id))

            swept = await self._sweep_descendants(comment, actor.user_id, now)
            deleted_count = 1 + swept

            await self.counter_service.on_comment_deleted(comment, deleted_count)

            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                post_id=str(comment.post_id),
                deleted_count=deleted_count,
            )
            return deleted_count

    async def repair_cascade(self, comment_id: CommentId) -> int:
        """Re-run the descendant sweep for an already-deleted comment.

        Safe to call any number of times: descendants that are already
        deleted are left alone.

        Args:
            comment_id: ID of a deleted comment

        Returns:
            Number of descendants newly marked deleted

        Raises:
            NotFoundError: If the comment doesn't exist
            ConflictError: If the comment is not deleted
        """
        with logfire.span("comment_service.repair_cascade", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(
                comment_id, include_deleted=True
            )
            if not comment:
                raise NotFoundError("Comment", str(comment_id))
            if not comment.is_deleted:
                raise ConflictError(
                    "Only deleted comments can have their cascade repaired"
                )

            swept = await self._sweep_descendants(
                comment, comment.deleted_by or comment.author_id, comment.deleted_at
            )
            logfire.info(
                "Cascade repaired", comment_id=str(comment_id), newly_deleted=swept
            )
            return swept

    async def _sweep_descendants(
        self, root: Comment, deleted_by: UserId, deleted_at: datetime
    ) -> int:
        descendants = await self.comment_repository.find_descendants(
            root.path, include_deleted=False
        )

        marked = 0
        for descendant in descendants:
            if await self.comment_repository.mark_deleted(
                descendant.id, deleted_by, deleted_at
            ):
                marked += 1

        logfire.debug(
            "Descendants swept",
            comment_id=str(root.id),
            found=len(descendants),
            marked=marked,
        )
        return marked
