"""Post domain service."""

import logfire

from quill.domain.error import NotFoundError
from quill.domain.model.post import Post
from quill.domain.repository import PostRepository
from quill.domain.value import PostId

from .base import Service


class PostService(Service):
    """Domain service for the post collaborator."""

    def __init__(self, post_repository: PostRepository) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
        """
        self.post_repository = post_repository

    async def get_post_by_id(self, post_id: PostId) -> Post | None:
        """Get a post by ID, hiding deleted posts.

        Args:
            post_id: Post ID

        Returns:
            Post if found and not deleted, None otherwise
        """
        with logfire.span("post_service.get_post_by_id", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)

            if post and post.deleted_at is None:
                logfire.info("Post found", post_id=str(post_id), title=post.title)
                return post

            logfire.warn("Post not found", post_id=str(post_id))
            return None

    async def require_post(self, post_id: PostId) -> Post:
        """Get a post by ID.

        Raises:
            NotFoundError: If the post is missing or deleted
        """
        post = await self.get_post_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", str(post_id))
        return post

    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Atomically adjust a post's comment counter.

        Uses SQL-level increment to avoid lost updates.

        Args:
            post_id: Post ID
            delta: Amount to add (negative to decrement)
        """
        with logfire.span(
            "post_service.increment_comments_count", post_id=str(post_id), delta=delta
        ):
            await self.post_repository.increment_comments_count(post_id, delta)
            logfire.info(
                "Post comments count adjusted", post_id=str(post_id), delta=delta
            )
