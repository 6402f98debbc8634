"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.model import Identity
from quill.domain.service import CommentService
from quill.domain.value import CommentId, Role, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user ID
    role: Role = Role.USER  # Moderators and admins may delete any comment


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment_id: str
    deleted_count: int


class DeleteCommentUseCase(BaseUseCase[DeleteCommentRequest, DeleteCommentResponse]):
    """Use case for soft-deleting a comment and its replies."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Args:
            request: Delete comment request

        Returns:
            Number of comments removed (the comment plus its descendants)

        Raises:
            NotFoundError: If the comment doesn't exist or is already deleted
            ForbiddenError: If the user is neither author nor moderator
        """
        actor = Identity(user_id=UserId(UUID(request.user_id)), role=request.role)
        deleted_count = await self.comment_service.soft_delete(
            CommentId(UUID(request.comment_id)), actor
        )

        return DeleteCommentResponse(
            comment_id=request.comment_id, deleted_count=deleted_count
        )
