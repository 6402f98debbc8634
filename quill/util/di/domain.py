"""Domain layer DI providers."""

from dishka import Scope, provide

from quill.config import AuthSettings, CommentSettings
from quill.domain.repository import CommentRepository, PostRepository
from quill.domain.service import (
    CommentQueryService,
    CommentService,
    CounterService,
    EngagementService,
    JWTService,
    PostService,
)
from quill.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_post_service(self, post_repository: PostRepository) -> PostService:
        """Provide post domain service."""
        return PostService(post_repository=post_repository)

    @provide
    def get_counter_service(
        self, comment_repository: CommentRepository, post_service: PostService
    ) -> CounterService:
        """Provide counter reconciliation service."""
        return CounterService(
            comment_repository=comment_repository, post_service=post_service
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        counter_service: CounterService,
        comment_settings: CommentSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_service=post_service,
            counter_service=counter_service,
            comment_settings=comment_settings,
        )

    @provide
    def get_engagement_service(
        self, comment_repository: CommentRepository, comment_settings: CommentSettings
    ) -> EngagementService:
        """Provide engagement domain service."""
        return EngagementService(
            comment_repository=comment_repository, comment_settings=comment_settings
        )

    @provide
    def get_comment_query_service(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        comment_settings: CommentSettings,
    ) -> CommentQueryService:
        """Provide comment read service."""
        return CommentQueryService(
            comment_repository=comment_repository,
            post_service=post_service,
            comment_settings=comment_settings,
        )
