"""Engagement domain service: likes and moderation flags."""

from typing import Optional

import logfire
from pydantic import ValidationError as PydanticValidationError

from quill.config import CommentSettings
from quill.domain.error import ConflictError, NotFoundError, ValidationError
from quill.domain.model.comment import CommentFlag
from quill.domain.model.common import utc_now
from quill.domain.repository import CommentRepository
from quill.domain.value import CommentId, FlagReason, UserId
from quill.domain.value.common import ValueObject

from .base import Service


class LikeResult(ValueObject):
    """Outcome of a like toggle."""

    liked: bool
    likes_count: int


class FlagResult(ValueObject):
    """Outcome of flagging a comment."""

    flag_count: int
    is_flagged: bool


class EngagementService(Service):
    """Domain service for reader interactions with comments."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize engagement service.

        Args:
            comment_repository: Comment repository
            comment_settings: Threading rules (flag threshold)
        """
        self.comment_repository = comment_repository
        self.settings = comment_settings

    async def toggle_like(self, comment_id: CommentId, user_id: UserId) -> LikeResult:
        """Like a comment, or unlike it if the user already likes it.

        Each call flips the user's state, so calling twice restores both the
        liked state and the count. The add and remove are conditional atomic
        writes: concurrent toggles by different users never lose a like.

        Args:
            comment_id: Comment ID
            user_id: User toggling the like

        Returns:
            Whether the user now likes the comment, and the new count

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
        """
        with logfire.span(
            "engagement_service.toggle_like",
            comment_id=str(comment_id),
            user_id=str(user_id),
        ):
            likes_count = await self.comment_repository.add_like(comment_id, user_id)
            if likes_count is not None:
                logfire.info(
                    "Comment liked", comment_id=str(comment_id), likes_count=likes_count
                )
                return LikeResult(liked=True, likes_count=likes_count)

            likes_count = await self.comment_repository.remove_like(comment_id, user_id)
            if likes_count is not None:
                logfire.info(
                    "Comment unliked",
                    comment_id=str(comment_id),
                    likes_count=likes_count,
                )
                return LikeResult(liked=False, likes_count=likes_count)

            # Neither write applied: the comment is missing or deleted
            logfire.warn("Like on missing comment", comment_id=str(comment_id))
            raise NotFoundError("Comment", str(comment_id))

    async def flag_comment(
        self,
        comment_id: CommentId,
        user_id: UserId,
        reason: FlagReason,
        details: Optional[str] = None,
    ) -> FlagResult:
        """Flag a comment for moderation.

        Each reader may flag a comment once. When the number of distinct
        flaggers reaches the threshold, the comment is marked flagged with the
        reason of the flag that tipped it over. It stays flagged.

        Args:
            comment_id: Comment ID
            user_id: User flagging the comment
            reason: Flag reason
            details: Optional free-text explanation

        Returns:
            Current flag count and flagged state

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
            ConflictError: If the user already flagged this comment
            ValidationError: If details are too long
        """
        with logfire.span(
            "engagement_service.flag_comment",
            comment_id=str(comment_id),
            user_id=str(user_id),
            reason=reason.value,
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Flag on missing comment", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            try:
                flag = CommentFlag(
                    flagger_id=user_id,
                    reason=reason,
                    details=details,
                    created_at=utc_now(),
                )
            except PydanticValidationError as e:
                raise ValidationError(str(e))

            updated = await self.comment_repository.add_flag(comment_id, flag)
            if updated is None:
                current = await self.comment_repository.find_by_id(comment_id)
                if current is None:
                    raise NotFoundError("Comment", str(comment_id))
                logfire.warn(
                    "Duplicate flag attempt",
                    comment_id=str(comment_id),
                    user_id=str(user_id),
                )
                raise ConflictError("You have already flagged this comment")

            is_flagged = updated.is_flagged
            if not is_flagged and updated.flag_count >= self.settings.flag_threshold:
                flipped = await self.comment_repository.mark_flagged(
                    comment_id, reason, self.settings.flag_threshold
                )
                # A concurrent flag may have flipped it first
                is_flagged = True
                if flipped:
                    logfire.warn(
                        "Comment flagged for moderation",
                        comment_id=str(comment_id),
                        flag_count=updated.flag_count,
                        reason=reason.value,
                    )

            logfire.info(
                "Comment flag recorded",
                comment_id=str(comment_id),
                flag_count=updated.flag_count,
                is_flagged=is_flagged,
            )
            return FlagResult(flag_count=updated.flag_count, is_flagged=is_flagged)
