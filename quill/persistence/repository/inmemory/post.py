"""In-memory post repository for testing."""

from typing import Optional

from quill.domain.model.post import Post
from quill.domain.repository.post import PostRepository
from quill.domain.value import PostId


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self) -> None:
        self._posts: dict[PostId, Post] = {}

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._posts.get(post_id)

    async def save(self, post: Post) -> Post:
        """Save or update a post."""
        self._posts[post.id] = post
        return post

    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Add delta to comments_count, flooring at zero."""
        post = self._posts.get(post_id)
        if post:
            # Create updated post (since posts are immutable)
            self._posts[post_id] = post.model_copy(
                update={"comments_count": max(0, post.comments_count + delta)}
            )
