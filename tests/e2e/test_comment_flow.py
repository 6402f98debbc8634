"""End-to-end tests for the comment endpoints."""

import asyncio
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from quill.config import AuthSettings
from quill.domain.model.identity import Identity
from quill.domain.repository import PostRepository
from quill.domain.service import JWTService
from quill.domain.value import Role, UserId
from quill.interface.api.app import create_app
from tests.conftest import make_post
from tests.di import build_test_container


@pytest.fixture
def container():
    """Test container shared by the app and the test for seeding."""
    return build_test_container()


@pytest.fixture
def client(container):
    """Create test client with test container."""
    return TestClient(create_app(container))


@pytest.fixture
def seed_post(container):
    """Store a post directly in the in-memory repository."""

    def _seed(**kwargs):
        post_repo = asyncio.run(container.get(PostRepository))
        return asyncio.run(post_repo.save(make_post(**kwargs)))

    return _seed


@pytest.fixture
def auth_cookie(container):
    """Mint tokens for fresh users, signed with the app's auth settings."""
    jwt_service = JWTService(asyncio.run(container.get(AuthSettings)))

    def _mint(role: Role = Role.USER) -> tuple[UserId, dict[str, str]]:
        user_id = UserId(uuid4())
        token = jwt_service.create_token(Identity(user_id=user_id, role=role))
        return user_id, {"auth_token": token}

    return _mint


class TestCommentEndpoints:
    """End-to-end tests for the comment API.

    Note: These tests focus on the HTTP API interface layer.
    More detailed business logic tests are in unit tests.
    """

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_thread_lifecycle(self, client, seed_post, auth_cookie):
        """Create, reply, like, list and cascade delete through the API."""
        # Arrange
        post = seed_post()
        author_id, author = auth_cookie()
        _, reader = auth_cookie()

        # Act - top-level comment and a reply
        created = client.post(
            f"/posts/{post.id}/comments",
            json={"content": "  First!  "},
            cookies=author,
        )
        assert created.status_code == 201
        parent = created.json()["comment"]
        assert parent["content"] == "First!"
        assert parent["author_id"] == str(author_id)
        assert parent["level"] == 0

        reply = client.post(
            f"/posts/{post.id}/comments",
            json={"content": "Reply", "parent_id": parent["id"]},
            cookies=reader,
        )
        assert reply.status_code == 201
        assert reply.json()["comment"]["level"] == 1

        liked = client.post(f"/comments/{parent['id']}/like", cookies=reader)
        assert liked.json() == {
            "comment_id": parent["id"],
            "liked": True,
            "likes_count": 1,
        }

        listing = client.get(f"/posts/{post.id}/comments", cookies=reader)
        assert listing.status_code == 200
        body = listing.json()
        assert body["pagination"]["total"] == 1
        assert body["comments"][0]["replies_count"] == 1
        assert body["comments"][0]["is_liked_by_current_user"] is True

        thread = client.get(f"/comments/{parent['id']}")
        assert [r["content"] for r in thread.json()["replies"]] == ["Reply"]

        # Act - cascade delete by the author
        deleted = client.delete(f"/comments/{parent['id']}", cookies=author)

        # Assert
        assert deleted.status_code == 200
        assert deleted.json()["deleted_count"] == 2
        gone = client.get(f"/comments/{reply.json()['comment']['id']}")
        assert gone.status_code == 404
        assert gone.json()["kind"] == "not_found"

        stats = client.get(f"/posts/{post.id}/comments/stats").json()
        assert stats["total_comments"] == 0

    def test_create_without_auth_fails(self, client, seed_post):
        """Should return 401 when not authenticated."""
        post = seed_post()

        response = client.post(
            f"/posts/{post.id}/comments", json={"content": "Anonymous"}
        )

        assert response.status_code == 401
        assert "Authentication required" in response.json()["detail"]

    def test_create_on_unknown_post_is_404(self, client, auth_cookie):
        _, cookies = auth_cookie()

        response = client.post(
            f"/posts/{uuid4()}/comments", json={"content": "Hi"}, cookies=cookies
        )

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_create_on_closed_post_is_403(self, client, seed_post, auth_cookie):
        post = seed_post(comments_enabled=False)
        _, cookies = auth_cookie()

        response = client.post(
            f"/posts/{post.id}/comments", json={"content": "Hi"}, cookies=cookies
        )

        assert response.status_code == 403
        assert response.json()["kind"] == "forbidden"

    def test_content_too_long_is_422(self, client, seed_post, auth_cookie):
        post = seed_post()
        _, cookies = auth_cookie()

        response = client.post(
            f"/posts/{post.id}/comments",
            json={"content": "x" * 2001},
            cookies=cookies,
        )

        assert response.status_code == 422

    def test_other_user_cannot_delete(self, client, seed_post, auth_cookie):
        post = seed_post()
        _, author = auth_cookie()
        _, stranger = auth_cookie()
        comment = client.post(
            f"/posts/{post.id}/comments", json={"content": "Mine"}, cookies=author
        ).json()["comment"]

        response = client.delete(f"/comments/{comment['id']}", cookies=stranger)

        assert response.status_code == 403

    def test_moderator_can_delete(self, client, seed_post, auth_cookie):
        post = seed_post()
        _, author = auth_cookie()
        _, moderator = auth_cookie(Role.MODERATOR)
        comment = client.post(
            f"/posts/{post.id}/comments", json={"content": "Spam"}, cookies=author
        ).json()["comment"]

        response = client.delete(f"/comments/{comment['id']}", cookies=moderator)

        assert response.status_code == 200
        assert response.json()["deleted_count"] == 1

    def test_duplicate_flag_is_409(self, client, seed_post, auth_cookie):
        post = seed_post()
        _, author = auth_cookie()
        _, reader = auth_cookie()
        comment = client.post(
            f"/posts/{post.id}/comments", json={"content": "Hmm"}, cookies=author
        ).json()["comment"]

        first = client.post(
            f"/comments/{comment['id']}/flag",
            json={"reason": "spam"},
            cookies=reader,
        )
        second = client.post(
            f"/comments/{comment['id']}/flag",
            json={"reason": "spam"},
            cookies=reader,
        )

        assert first.status_code == 200
        assert first.json()["flag_count"] == 1
        assert second.status_code == 409
        assert second.json()["kind"] == "conflict"

    def test_my_comments(self, client, seed_post, auth_cookie):
        post = seed_post()
        user_id, cookies = auth_cookie()
        client.post(
            f"/posts/{post.id}/comments", json={"content": "One"}, cookies=cookies
        )

        response = client.get("/users/me/comments", cookies=cookies)

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == str(user_id)
        assert [c["content"] for c in body["comments"]] == ["One"]
