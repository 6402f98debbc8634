"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from quill.domain.model.post import Post
from quill.domain.value import PostId


class PostRepository(ABC):
    """Repository for the Post collaborator.

    Posts are managed by the publishing side; the comment engine needs
    lookups and the atomic comment counter.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a post (create or update).

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Atomically add delta to comments_count (never below zero).

        Args:
            post_id: Post ID
            delta: Amount to add (negative to decrement)
        """
        pass
