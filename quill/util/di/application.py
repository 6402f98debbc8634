"""Application layer DI providers."""

from dishka import Scope, provide

from quill.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    FlagCommentUseCase,
    GetCommentStatsUseCase,
    GetCommentUseCase,
    ListCommentsUseCase,
    ListUserCommentsUseCase,
    ToggleLikeUseCase,
    UpdateCommentUseCase,
)
from quill.domain.service import (
    CommentQueryService,
    CommentService,
    EngagementService,
    JWTService,
)
from quill.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Write use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    # Engagement use cases
    @provide(scope=Scope.REQUEST)
    def get_toggle_like_use_case(
        self, engagement_service: EngagementService
    ) -> ToggleLikeUseCase:
        """Provide toggle like use case."""
        return ToggleLikeUseCase(engagement_service=engagement_service)

    @provide(scope=Scope.REQUEST)
    def get_flag_comment_use_case(
        self, engagement_service: EngagementService
    ) -> FlagCommentUseCase:
        """Provide flag comment use case."""
        return FlagCommentUseCase(engagement_service=engagement_service)

    # Read use cases
    @provide(scope=Scope.REQUEST)
    def get_list_comments_use_case(
        self, comment_query_service: CommentQueryService, jwt_service: JWTService
    ) -> ListCommentsUseCase:
        """Provide list comments use case."""
        return ListCommentsUseCase(
            comment_query_service=comment_query_service, jwt_service=jwt_service
        )

    @provide(scope=Scope.REQUEST)
    def get_get_comment_use_case(
        self, comment_query_service: CommentQueryService, jwt_service: JWTService
    ) -> GetCommentUseCase:
        """Provide get comment use case."""
        return GetCommentUseCase(
            comment_query_service=comment_query_service, jwt_service=jwt_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_user_comments_use_case(
        self, comment_query_service: CommentQueryService
    ) -> ListUserCommentsUseCase:
        """Provide list user comments use case."""
        return ListUserCommentsUseCase(comment_query_service=comment_query_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comment_stats_use_case(
        self, comment_query_service: CommentQueryService
    ) -> GetCommentStatsUseCase:
        """Provide get comment stats use case."""
        return GetCommentStatsUseCase(comment_query_service=comment_query_service)
