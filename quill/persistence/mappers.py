"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from quill.domain.model import Comment, CommentFlag, Post
from quill.domain.value import CommentId, CommentPath, FlagReason, PostId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value is not None else None


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(_uuid(row["id"])),
        author_id=UserId(_uuid(row["author_id"])),
        title=row["title"],
        comments_enabled=row["comments_enabled"],
        comments_count=row["comments_count"],
        created_at=row["created_at"],
        deleted_at=row.get("deleted_at"),
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict."""
    return post.model_dump()


def flag_to_dict(flag: CommentFlag) -> Dict[str, Any]:
    """Convert a flag to its JSONB representation."""
    return {
        "flagger_id": str(flag.flagger_id),
        "reason": flag.reason.value,
        "details": flag.details,
        "created_at": flag.created_at.isoformat(),
    }


def dict_to_flag(data: Dict[str, Any]) -> CommentFlag:
    """Convert a JSONB flag entry to a CommentFlag."""
    return CommentFlag(
        flagger_id=UserId(_uuid(data["flagger_id"])),
        reason=FlagReason(data["reason"]),
        details=data.get("details"),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    parent_id = _optional_uuid(row.get("parent_id"))
    deleted_by = _optional_uuid(row.get("deleted_by"))
    flag_reason = row.get("flag_reason")

    return Comment(
        id=CommentId(_uuid(row["id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        parent_id=CommentId(parent_id) if parent_id else None,
        content=row["content"],
        level=row["level"],
        path=CommentPath(row["path"]),
        liked_by=frozenset(UserId(_uuid(u)) for u in row.get("liked_by") or []),
        likes_count=row["likes_count"],
        replies_count=row["replies_count"],
        is_edited=row["is_edited"],
        edited_at=row.get("edited_at"),
        flags=tuple(dict_to_flag(f) for f in row.get("flags") or []),
        is_flagged=row["is_flagged"],
        flag_reason=FlagReason(flag_reason) if flag_reason else None,
        deleted_at=row.get("deleted_at"),
        deleted_by=UserId(deleted_by) if deleted_by else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "parent_id": comment.parent_id,
        "author_id": comment.author_id,
        "content": comment.content,
        "level": comment.level,
        "path": comment.path.root,
        "liked_by": list(comment.liked_by),
        "likes_count": comment.likes_count,
        "replies_count": comment.replies_count,
        "is_edited": comment.is_edited,
        "edited_at": comment.edited_at,
        "flags": [flag_to_dict(f) for f in comment.flags],
        "is_flagged": comment.is_flagged,
        "flag_reason": comment.flag_reason.value if comment.flag_reason else None,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "deleted_at": comment.deleted_at,
        "deleted_by": comment.deleted_by,
    }
