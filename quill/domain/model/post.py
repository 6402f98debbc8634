"""Post entity.

Posts are owned by the publishing side of the platform. The comment engine
only needs to know whether a post accepts comments, and it keeps the post's
denormalized comment counter up to date.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from quill.domain.model.common import DomainModel, utc_now
from quill.domain.value import PostId, UserId


class Post(DomainModel):
    """Post as seen by the comment engine."""

    id: PostId
    author_id: UserId
    title: str = Field(min_length=1, max_length=200)
    comments_enabled: bool = True
    # Top-level comment volume; adjusted only through atomic increments
    comments_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = None
