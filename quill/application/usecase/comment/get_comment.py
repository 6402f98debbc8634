"""Get comment with replies use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import CommentQueryService, CommentView, JWTService
from quill.domain.value import CommentId


class GetCommentRequest(BaseModel):
    """Get comment request."""

    comment_id: str  # UUID string
    auth_token: str | None = None  # JWT token for authentication (optional)


class GetCommentResponse(BaseModel):
    """Get comment response."""

    comment: CommentView
    replies: list[CommentView]


class GetCommentUseCase(BaseUseCase[GetCommentRequest, GetCommentResponse]):
    """Use case for fetching a comment and its direct replies."""

    def __init__(
        self,
        comment_query_service: CommentQueryService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize get comment use case.

        Args:
            comment_query_service: Comment read service
            jwt_service: JWT service for decoding auth tokens
        """
        self.comment_query_service = comment_query_service
        self.jwt_service = jwt_service

    async def execute(self, request: GetCommentRequest) -> GetCommentResponse:
        """Execute get comment flow.

        Args:
            request: Get comment request

        Returns:
            The comment and its non-deleted replies, oldest first

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
        """
        identity = self.jwt_service.get_identity_from_token(request.auth_token)

        thread = await self.comment_query_service.get_with_children(
            CommentId(UUID(request.comment_id)),
            viewer_id=identity.user_id if identity else None,
        )

        return GetCommentResponse(comment=thread.comment, replies=thread.replies)
