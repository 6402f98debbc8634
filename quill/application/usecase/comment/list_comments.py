"""List comments use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import (
    CommentQueryService,
    CommentView,
    JWTService,
    PaginationMeta,
)
from quill.domain.value import CommentId, CommentSortField, PostId, SortOrder


class ListCommentsRequest(BaseModel):
    """List comments request."""

    post_id: str  # UUID string
    page: int = 1
    limit: int | None = None  # Defaults to the configured page size
    parent_id: str | None = None  # List replies to this comment instead
    sort_by: CommentSortField = CommentSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    auth_token: str | None = None  # JWT token for authentication (optional)


class ListCommentsResponse(BaseModel):
    """List comments response."""

    post_id: str
    comments: list[CommentView]
    pagination: PaginationMeta


class ListCommentsUseCase(BaseUseCase[ListCommentsRequest, ListCommentsResponse]):
    """Use case for paging through a post's comments."""

    def __init__(
        self,
        comment_query_service: CommentQueryService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize list comments use case.

        Args:
            comment_query_service: Comment read service
            jwt_service: JWT service for decoding auth tokens
        """
        self.comment_query_service = comment_query_service
        self.jwt_service = jwt_service

    async def execute(self, request: ListCommentsRequest) -> ListCommentsResponse:
        """Execute list comments flow.

        If authenticated, each comment says whether the viewer likes it.

        Args:
            request: List comments request

        Returns:
            One page of comments with pagination info

        Raises:
            NotFoundError: If the post doesn't exist
        """
        identity = self.jwt_service.get_identity_from_token(request.auth_token)

        comments, pagination = await self.comment_query_service.list_by_post(
            post_id=PostId(UUID(request.post_id)),
            page=request.page,
            limit=request.limit,
            parent_id=CommentId(UUID(request.parent_id)) if request.parent_id else None,
            sort_by=request.sort_by,
            sort_order=request.sort_order,
            viewer_id=identity.user_id if identity else None,
        )

        return ListCommentsResponse(
            post_id=request.post_id,
            comments=comments,
            pagination=pagination,
        )
