"""Test configuration and fixtures."""

from datetime import timedelta
from uuid import uuid4

import logfire

from quill.domain.model import Comment, Post
from quill.domain.model.common import utc_now
from quill.domain.value import CommentId, CommentPath, PostId, UserId

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


def make_post(
    post_id: PostId | None = None,
    comments_enabled: bool = True,
    comments_count: int = 0,
    title: str = "Test Post",
) -> Post:
    """Helper to build a post accepting comments by default."""
    return Post(
        id=post_id or PostId(uuid4()),
        author_id=UserId(uuid4()),
        title=title,
        comments_enabled=comments_enabled,
        comments_count=comments_count,
    )


def make_comment(
    post_id: PostId,
    parent: Comment | None = None,
    author_id: UserId | None = None,
    content: str = "Test comment",
    age: timedelta = timedelta(0),
    **overrides,
) -> Comment:
    """Helper to build a comment positioned under parent (or top-level).

    Args:
        post_id: Post the comment belongs to
        parent: Parent comment, None for top-level
        author_id: Author (random if omitted)
        content: Comment text
        age: How long ago the comment was created
        **overrides: Any other Comment fields
    """
    comment_id = CommentId(uuid4())
    created_at = utc_now() - age
    fields = dict(
        id=comment_id,
        post_id=post_id,
        author_id=author_id or UserId(uuid4()),
        parent_id=parent.id if parent else None,
        content=content,
        level=parent.level + 1 if parent else 0,
        path=(
            parent.path.child(comment_id)
            if parent
            else CommentPath.for_top_level(comment_id)
        ),
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    return Comment(**fields)
