"""Create comment use case."""

from uuid import UUID

from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import CommentService, CommentView
from quill.domain.value import CommentId, PostId, UserId


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: str  # UUID string
    author_id: str  # User ID from authenticated user
    content: str
    parent_id: str | None = None  # Parent comment ID for replies


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: CommentView


class CreateCommentUseCase(BaseUseCase[CreateCommentRequest, CreateCommentResponse]):
    """Use case for creating a comment on a post or replying to another comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The comment service checks the post and parent, places the comment in
        the tree and updates the counters.

        Args:
            request: Create comment request

        Returns:
            Created comment

        Raises:
            NotFoundError: If the post or parent comment doesn't exist
            ForbiddenError: If comments are disabled on the post
            ConflictError: If the parent belongs to another post
            ValidationError: If nesting is too deep or content is invalid
        """
        author_id = UserId(UUID(request.author_id))
        comment = await self.comment_service.create_comment(
            post_id=PostId(UUID(request.post_id)),
            author_id=author_id,
            content=request.content,
            parent_id=CommentId(UUID(request.parent_id)) if request.parent_id else None,
        )

        return CreateCommentResponse(
            comment=CommentView.from_comment(comment, author_id)
        )
