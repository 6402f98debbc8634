"""Get comment stats use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import CommentQueryService
from quill.domain.value import PostId


class GetCommentStatsRequest(BaseModel):
    """Get comment stats request."""

    post_id: str  # UUID string


class GetCommentStatsResponse(BaseModel):
    """Get comment stats response."""

    post_id: str
    total_comments: int
    total_likes: int
    top_level_comments: int
    total_replies: int


class GetCommentStatsUseCase(
    BaseUseCase[GetCommentStatsRequest, GetCommentStatsResponse]
):
    """Use case for aggregate comment statistics on a post."""

    def __init__(self, comment_query_service: CommentQueryService) -> None:
        """Initialize get comment stats use case.

        Args:
            comment_query_service: Comment read service
        """
        self.comment_query_service = comment_query_service

    async def execute(self, request: GetCommentStatsRequest) -> GetCommentStatsResponse:
        """Execute get comment stats flow.

        Raises:
            NotFoundError: If the post doesn't exist
        """
        stats = await self.comment_query_service.stats(PostId(UUID(request.post_id)))

        return GetCommentStatsResponse(
            post_id=request.post_id,
            **stats.model_dump(),
        )
