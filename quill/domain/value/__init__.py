"""Domain value objects for Quill."""

from quill.domain.value.identifiers import CommentId, PostId, UserId
from quill.domain.value.types import (
    CommentPath,
    CommentSortField,
    FlagReason,
    Role,
    SortOrder,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    # Types
    "CommentPath",
    "CommentSortField",
    "FlagReason",
    "Role",
    "SortOrder",
]
