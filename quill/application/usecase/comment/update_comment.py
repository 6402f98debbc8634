"""Update comment use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import CommentService, CommentView
from quill.domain.value import CommentId, UserId


class UpdateCommentRequest(BaseModel):
    """Update comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user ID (must be author)
    content: str  # New content (required, cannot be empty)


class UpdateCommentResponse(BaseModel):
    """Update comment response."""

    comment: CommentView


class UpdateCommentUseCase(BaseUseCase[UpdateCommentRequest, UpdateCommentResponse]):
    """Use case for editing a comment's content."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize update comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Args:
            request: Update comment request with comment ID, user ID and content

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment doesn't exist or is deleted
            ForbiddenError: If the user isn't the author
            ValidationError: If the edit window has expired or content is invalid
        """
        user_id = UserId(UUID(request.user_id))
        updated = await self.comment_service.update_content(
            CommentId(UUID(request.comment_id)), user_id, request.content
        )

        return UpdateCommentResponse(comment=CommentView.from_comment(updated, user_id))
