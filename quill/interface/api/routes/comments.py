"""Comment routes.

Domain errors raised by the use cases are turned into responses by the
handlers in ``quill.interface.error``.
"""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status
from pydantic import BaseModel, Field

from quill.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    FlagCommentRequest,
    FlagCommentResponse,
    FlagCommentUseCase,
    GetCommentRequest,
    GetCommentResponse,
    GetCommentStatsRequest,
    GetCommentStatsResponse,
    GetCommentStatsUseCase,
    GetCommentUseCase,
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
    ToggleLikeRequest,
    ToggleLikeResponse,
    ToggleLikeUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from quill.domain.model.comment import CONTENT_MAX_LENGTH, FLAG_DETAILS_MAX_LENGTH
from quill.domain.service import JWTService
from quill.domain.value import CommentSortField, FlagReason, SortOrder
from quill.interface.api.routes.auth import require_identity

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    parent_id: UUID | None = None  # Parent comment ID for replies


class UpdateCommentAPIRequest(BaseModel):
    """API request for editing a comment."""

    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)


class FlagCommentAPIRequest(BaseModel):
    """API request for flagging a comment."""

    reason: FlagReason
    details: str | None = Field(default=None, max_length=FLAG_DETAILS_MAX_LENGTH)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateCommentResponse:
    """Create a comment on a post or reply to another comment.

    Requires authentication.

    Args:
        post_id: Post UUID
        request: Comment content and optional parent
        create_comment_use_case: Create comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Created comment
    """
    identity = require_identity(jwt_service, auth_token, "create comments")

    use_case_request = CreateCommentRequest(
        post_id=str(post_id),
        author_id=str(identity.user_id),
        content=request.content,
        parent_id=str(request.parent_id) if request.parent_id else None,
    )
    return await create_comment_use_case.execute(use_case_request)


@router.get("/posts/{post_id}/comments", response_model=ListCommentsResponse)
async def list_comments(
    post_id: UUID,
    list_comments_use_case: FromDishka[ListCommentsUseCase],
    page: int = 1,
    limit: int | None = None,
    parent_id: UUID | None = None,
    sort_by: CommentSortField = CommentSortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    auth_token: str | None = Cookie(default=None),
) -> ListCommentsResponse:
    """List one page of a post's comments.

    Without ``parent_id`` the top-level comments are listed; with it, the
    direct replies to that comment. Page and limit are clamped, never
    rejected. If authenticated, each comment says whether the caller likes it.
    """
    request = ListCommentsRequest(
        post_id=str(post_id),
        page=page,
        limit=limit,
        parent_id=str(parent_id) if parent_id else None,
        sort_by=sort_by,
        sort_order=sort_order,
        auth_token=auth_token,
    )
    return await list_comments_use_case.execute(request)


@router.get(
    "/posts/{post_id}/comments/stats", response_model=GetCommentStatsResponse
)
async def get_comment_stats(
    post_id: UUID,
    get_comment_stats_use_case: FromDishka[GetCommentStatsUseCase],
) -> GetCommentStatsResponse:
    """Aggregate statistics over a post's comments."""
    request = GetCommentStatsRequest(post_id=str(post_id))
    return await get_comment_stats_use_case.execute(request)


@router.get("/comments/{comment_id}", response_model=GetCommentResponse)
async def get_comment(
    comment_id: UUID,
    get_comment_use_case: FromDishka[GetCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> GetCommentResponse:
    """Get a comment with its direct replies, oldest first."""
    request = GetCommentRequest(comment_id=str(comment_id), auth_token=auth_token)
    return await get_comment_use_case.execute(request)


@router.put("/comments/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    comment_id: UUID,
    request: UpdateCommentAPIRequest,
    update_comment_use_case: FromDishka[UpdateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateCommentResponse:
    """Edit a comment's content.

    Only the author can edit, and only within the edit window.

    Args:
        comment_id: Comment UUID
        request: New content
        update_comment_use_case: Update comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Updated comment
    """
    identity = require_identity(jwt_service, auth_token, "edit comments")

    use_case_request = UpdateCommentRequest(
        comment_id=str(comment_id),
        user_id=str(identity.user_id),
        content=request.content,
    )
    return await update_comment_use_case.execute(use_case_request)


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteCommentResponse:
    """Soft-delete a comment and all of its replies.

    Authors can delete their own comments; moderators and admins can delete
    any comment.
    """
    identity = require_identity(jwt_service, auth_token, "delete comments")

    request = DeleteCommentRequest(
        comment_id=str(comment_id),
        user_id=str(identity.user_id),
        role=identity.role,
    )
    return await delete_comment_use_case.execute(request)


@router.post("/comments/{comment_id}/like", response_model=ToggleLikeResponse)
async def toggle_like(
    comment_id: UUID,
    toggle_like_use_case: FromDishka[ToggleLikeUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ToggleLikeResponse:
    """Like a comment, or remove the caller's like if already liked."""
    identity = require_identity(jwt_service, auth_token, "like comments")

    request = ToggleLikeRequest(
        comment_id=str(comment_id), user_id=str(identity.user_id)
    )
    return await toggle_like_use_case.execute(request)


@router.post("/comments/{comment_id}/flag", response_model=FlagCommentResponse)
async def flag_comment(
    comment_id: UUID,
    request: FlagCommentAPIRequest,
    flag_comment_use_case: FromDishka[FlagCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> FlagCommentResponse:
    """Flag a comment for moderation (once per user)."""
    identity = require_identity(jwt_service, auth_token, "flag comments")

    use_case_request = FlagCommentRequest(
        comment_id=str(comment_id),
        user_id=str(identity.user_id),
        reason=request.reason,
        details=request.details,
    )
    return await flag_comment_use_case.execute(use_case_request)
