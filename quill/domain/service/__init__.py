"""Domain services."""

from .base import Service
from .comment_query_service import (
    CommentQueryService,
    CommentThread,
    CommentView,
    PaginationMeta,
)
from .comment_service import CommentService
from .counter_service import CounterDrift, CounterService
from .engagement_service import EngagementService, FlagResult, LikeResult
from .jwt_service import JWTService
from .post_service import PostService

__all__ = [
    "CommentQueryService",
    "CommentService",
    "CommentThread",
    "CommentView",
    "CounterDrift",
    "CounterService",
    "EngagementService",
    "FlagResult",
    "JWTService",
    "LikeResult",
    "PaginationMeta",
    "PostService",
    "Service",
]
