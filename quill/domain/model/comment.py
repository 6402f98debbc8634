"""Comment entity.

Comments form a reply tree under a post. Each comment records its nesting
level and a materialized path (the chain of ancestor IDs) so that a whole
subtree can be located with a single prefix query.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from quill.domain.model.common import DomainModel, utc_now
from quill.domain.value import CommentId, CommentPath, FlagReason, PostId, UserId

CONTENT_MAX_LENGTH = 2000
MAX_LEVEL = 5
FLAG_DETAILS_MAX_LENGTH = 500


class CommentFlag(DomainModel):
    """A single reader's moderation flag on a comment."""

    flagger_id: UserId
    reason: FlagReason
    details: Optional[str] = Field(default=None, max_length=FLAG_DETAILS_MAX_LENGTH)
    created_at: datetime = Field(default_factory=utc_now)


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through:
    - parent_id: Direct parent comment (None for top-level)
    - level: Nesting level (0 for top-level, parent level + 1 for replies)
    - path: Ancestor chain from the thread root down to this comment

    Denormalized counters:
    - likes_count mirrors the size of liked_by
    - replies_count counts direct, non-deleted replies

    Moderation: one flag per distinct flagger. Once enough readers flag the
    comment, is_flagged is set and stays set.

    Soft-deleted comments keep their place in the tree (their path still
    anchors the subtree) but are hidden from normal reads.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    parent_id: Optional[CommentId] = None
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    level: int = Field(default=0, ge=0, le=MAX_LEVEL)
    path: CommentPath
    liked_by: frozenset[UserId] = frozenset()
    likes_count: int = Field(default=0, ge=0)
    replies_count: int = Field(default=0, ge=0)
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    flags: tuple[CommentFlag, ...] = ()
    is_flagged: bool = False
    flag_reason: Optional[FlagReason] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UserId] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v: object) -> object:
        """Trim surrounding whitespace before length checks."""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_thread_position(self) -> "Comment":
        """Path, level and parent must describe the same position."""
        ids = self.path.ids
        if ids[-1] != self.id:
            raise ValueError("Comment path must end with the comment's own ID")
        if self.path.depth != self.level:
            raise ValueError(
                f"Comment level {self.level} does not match "
                f"path depth {self.path.depth}"
            )
        if self.parent_id is None and self.level != 0:
            raise ValueError("Top-level comments must have level 0")
        if self.parent_id is not None and (len(ids) < 2 or ids[-2] != self.parent_id):
            raise ValueError("Comment path must pass through its parent")
        return self

    @model_validator(mode="after")
    def validate_likes_mirror(self) -> "Comment":
        """likes_count must equal the number of distinct likers."""
        if self.likes_count != len(self.liked_by):
            raise ValueError("likes_count must equal the number of likers")
        return self

    @property
    def is_deleted(self) -> bool:
        """Whether the comment has been soft-deleted."""
        return self.deleted_at is not None

    @property
    def is_top_level(self) -> bool:
        """Whether the comment is attached directly to the post."""
        return self.parent_id is None

    @property
    def flag_count(self) -> int:
        """Number of distinct readers who flagged the comment."""
        return len(self.flags)

    def is_liked_by(self, user_id: UserId) -> bool:
        """Whether the given user currently likes the comment."""
        return user_id in self.liked_by

    def is_flagged_by(self, user_id: UserId) -> bool:
        """Whether the given user has already flagged the comment."""
        return any(flag.flagger_id == user_id for flag in self.flags)
