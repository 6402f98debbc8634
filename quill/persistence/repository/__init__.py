"""PostgreSQL repository implementations."""

from quill.persistence.repository.comment import PostgresCommentRepository
from quill.persistence.repository.post import PostgresPostRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresPostRepository",
]
