"""Repository interfaces for Quill domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from quill.domain.repository.comment import CommentRepository, CommentStats
from quill.domain.repository.post import PostRepository

__all__ = [
    "CommentRepository",
    "CommentStats",
    "PostRepository",
]
