"""User routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie

from quill.application.usecase.comment import (
    ListUserCommentsRequest,
    ListUserCommentsResponse,
    ListUserCommentsUseCase,
)
from quill.domain.service import JWTService
from quill.interface.api.routes.auth import require_identity

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


@router.get("/me/comments", response_model=ListUserCommentsResponse)
async def list_my_comments(
    list_user_comments_use_case: FromDishka[ListUserCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    page: int = 1,
    limit: int | None = None,
    auth_token: str | None = Cookie(default=None),
) -> ListUserCommentsResponse:
    """List the caller's own comments, newest first.

    Requires authentication.

    Args:
        list_user_comments_use_case: Use case from DI
        jwt_service: JWT service for token verification (injected)
        page: 1-based page number
        limit: Page size
        auth_token: JWT token from cookie

    Returns:
        One page of the caller's comments
    """
    identity = require_identity(jwt_service, auth_token, "list your comments")

    request = ListUserCommentsRequest(
        user_id=str(identity.user_id), page=page, limit=limit
    )
    return await list_user_comments_use_case.execute(request)
