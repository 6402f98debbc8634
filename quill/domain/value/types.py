"""Domain value objects for Quill.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum
from uuid import UUID

from pydantic import field_validator

from quill.domain.value.common import RootValueObject
from quill.domain.value.identifiers import CommentId

PATH_SEPARATOR = "."


class Role(str, Enum):
    """Role carried by an authenticated identity."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @property
    def is_privileged(self) -> bool:
        """Privileged roles may delete any comment."""
        return self in (Role.MODERATOR, Role.ADMIN)


class FlagReason(str, Enum):
    """Reasons a reader can give when flagging a comment."""

    SPAM = "spam"
    OFFENSIVE = "offensive"
    HARASSMENT = "harassment"
    MISINFORMATION = "misinformation"
    OTHER = "other"


class CommentSortField(str, Enum):
    """Sort keys for comment listings."""

    CREATED_AT = "created_at"
    LIKES_COUNT = "likes_count"
    REPLIES_COUNT = "replies_count"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class CommentPath(RootValueObject[str]):
    """Materialized ancestry of a comment.

    Dot-separated comment IDs from the thread root down to the comment
    itself, e.g. ``<root-id>.<child-id>.<grandchild-id>``. Every descendant
    of a comment has a path starting with ``path + "."``, so a subtree can be
    found with a single prefix query.
    """

    @field_validator("root")
    @classmethod
    def validate_path_format(cls, v: str) -> str:
        """Validate every segment is a comment UUID."""
        if not v:
            raise ValueError("Comment path must not be empty")
        for segment in v.split(PATH_SEPARATOR):
            try:
                UUID(segment)
            except ValueError:
                raise ValueError(f"Invalid comment path segment: {segment!r}")
        return v

    @classmethod
    def for_top_level(cls, comment_id: CommentId) -> "CommentPath":
        """Path of a comment attached directly to a post."""
        return cls(str(comment_id))

    def child(self, comment_id: CommentId) -> "CommentPath":
        """Path of a direct reply with the given ID."""
        return CommentPath(f"{self.root}{PATH_SEPARATOR}{comment_id}")

    @property
    def descendant_prefix(self) -> str:
        """Prefix shared by the paths of all descendants (and nothing else)."""
        return f"{self.root}{PATH_SEPARATOR}"

    def is_ancestor_of(self, other: "CommentPath") -> bool:
        """Whether ``other`` lies strictly inside this comment's subtree."""
        return other.root.startswith(self.descendant_prefix)

    @property
    def ids(self) -> list[CommentId]:
        """Comment IDs from the thread root down to this comment."""
        return [CommentId(UUID(s)) for s in self.root.split(PATH_SEPARATOR)]

    @property
    def depth(self) -> int:
        """Nesting level encoded by the path (0 for top-level)."""
        return self.root.count(PATH_SEPARATOR)
