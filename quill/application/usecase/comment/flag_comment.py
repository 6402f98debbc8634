"""Flag comment use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from quill.application.usecase.base import BaseUseCase
from quill.domain.model.comment import FLAG_DETAILS_MAX_LENGTH
from quill.domain.service import EngagementService
from quill.domain.value import CommentId, FlagReason, UserId


class FlagCommentRequest(BaseModel):
    """Flag comment request."""

    comment_id: str  # UUID string
    user_id: str  # User ID from authenticated user
    reason: FlagReason
    details: str | None = Field(default=None, max_length=FLAG_DETAILS_MAX_LENGTH)


class FlagCommentResponse(BaseModel):
    """Flag comment response."""

    comment_id: str
    flag_count: int
    is_flagged: bool


class FlagCommentUseCase(BaseUseCase[FlagCommentRequest, FlagCommentResponse]):
    """Use case for flagging a comment for moderation."""

    def __init__(self, engagement_service: EngagementService) -> None:
        """Initialize flag comment use case.

        Args:
            engagement_service: Engagement domain service
        """
        self.engagement_service = engagement_service

    async def execute(self, request: FlagCommentRequest) -> FlagCommentResponse:
        """Execute flag comment flow.

        Args:
            request: Flag comment request

        Returns:
            Flag count and whether the comment is now flagged

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
            ConflictError: If the user already flagged the comment
        """
        result = await self.engagement_service.flag_comment(
            CommentId(UUID(request.comment_id)),
            UserId(UUID(request.user_id)),
            request.reason,
            request.details,
        )

        return FlagCommentResponse(
            comment_id=request.comment_id,
            flag_count=result.flag_count,
            is_flagged=result.is_flagged,
        )
