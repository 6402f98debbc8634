"""Toggle like use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import EngagementService
from quill.domain.value import CommentId, UserId


class ToggleLikeRequest(BaseModel):
    """Toggle like request."""

    comment_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class ToggleLikeResponse(BaseModel):
    """Toggle like response."""

    comment_id: str
    liked: bool
    likes_count: int


class ToggleLikeUseCase(BaseUseCase[ToggleLikeRequest, ToggleLikeResponse]):
    """Use case for liking or unliking a comment."""

    def __init__(self, engagement_service: EngagementService) -> None:
        """Initialize toggle like use case.

        Args:
            engagement_service: Engagement domain service
        """
        self.engagement_service = engagement_service

    async def execute(self, request: ToggleLikeRequest) -> ToggleLikeResponse:
        """Execute toggle like flow.

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
        """
        result = await self.engagement_service.toggle_like(
            CommentId(UUID(request.comment_id)), UserId(UUID(request.user_id))
        )

        return ToggleLikeResponse(
            comment_id=request.comment_id,
            liked=result.liked,
            likes_count=result.likes_count,
        )
