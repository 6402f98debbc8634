"""Domain model entities for Quill."""

from quill.domain.model.comment import Comment, CommentFlag
from quill.domain.model.identity import Identity
from quill.domain.model.post import Post

__all__ = [
    "Comment",
    "CommentFlag",
    "Identity",
    "Post",
]
