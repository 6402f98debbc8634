"""List user comments use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import CommentQueryService, CommentView, PaginationMeta
from quill.domain.value import UserId


class ListUserCommentsRequest(BaseModel):
    """List user comments request."""

    user_id: str  # UUID string
    page: int = 1
    limit: int | None = None


class ListUserCommentsResponse(BaseModel):
    """List user comments response."""

    user_id: str
    comments: list[CommentView]
    pagination: PaginationMeta


class ListUserCommentsUseCase(
    BaseUseCase[ListUserCommentsRequest, ListUserCommentsResponse]
):
    """Use case for listing a user's own comments, newest first."""

    def __init__(self, comment_query_service: CommentQueryService) -> None:
        """Initialize list user comments use case.

        Args:
            comment_query_service: Comment read service
        """
        self.comment_query_service = comment_query_service

    async def execute(
        self, request: ListUserCommentsRequest
    ) -> ListUserCommentsResponse:
        """Execute list user comments flow."""
        # The caller is listing their own comments
        user_id = UserId(UUID(request.user_id))
        comments, pagination = await self.comment_query_service.list_by_author(
            user_id, page=request.page, limit=request.limit, viewer_id=user_id
        )

        return ListUserCommentsResponse(
            user_id=request.user_id,
            comments=comments,
            pagination=pagination,
        )
