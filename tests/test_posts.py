"""
Tests for posts endpoints.
"""
import pytest

from eco3.models import Comment, Like, Post


class TestPostsEndpoints:
    """Test posts endpoints."""

    def test_create_post(self, client, test_user):
        response = client.post(
            "/api/posts",
            json={
                "user_id": str(test_user.id),
                "title": "Meatless Monday",
                "content": "Swapped beef for lentils.",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Meatless Monday"
        assert data["user_id"] == str(test_user.id)
        assert data["image_url"].startswith("https://picsum.photos/800/600")
        assert data["created_at"].endswith("Z")

    def test_create_post_for_missing_user(self, client, db):
        response = client.post("/api/posts", json={"user_id": 999, "title": "Orphan"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "USER_NOT_FOUND"
        assert db.query(Post).count() == 0

    def test_create_post_blank_title(self, client, test_user):
        response = client.post("/api/posts", json={"user_id": test_user.id, "title": "   "})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_create_post_bad_image_url(self, client, test_user):
        response = client.post(
            "/api/posts",
            json={"user_id": test_user.id, "title": "Pic", "image_url": "not a url"},
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("image_url", [
        "javascript://alert(1)",
        "foo://bar",
        "http://exa mple.com/x",
    ])
    def test_create_post_rejects_non_http_urls(self, client, db, test_user, image_url):
        response = client.post(
            "/api/posts",
            json={"user_id": test_user.id, "title": "Pic", "image_url": image_url},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert db.query(Post).count() == 0

    def test_create_post_keeps_image_url_as_sent(self, client, test_user):
        image_url = "https://images.example.com/garden/compost.jpg"
        response = client.post(
            "/api/posts",
            json={"user_id": test_user.id, "title": "Compost", "image_url": image_url},
        )
        assert response.status_code == 201
        assert response.json()["image_url"] == image_url

    def test_get_posts_empty(self, client):
        response = client.get("/api/posts")
        assert response.status_code == 200
        assert response.json() == []

    def test_search_posts(self, client, test_post):
        assert len(client.get("/api/posts", params={"query": "bike"}).json()) == 1
        assert client.get("/api/posts", params={"query": "flight"}).json() == []

    def test_filter_by_user(self, client, test_post, other_user):
        assert len(client.get("/api/posts", params={"user_id": test_post.user_id}).json()) == 1
        assert client.get("/api/posts", params={"user_id": other_user.id}).json() == []

    def test_get_post(self, client, test_post):
        response = client.get(f"/api/posts/{test_post.id}")
        assert response.status_code == 200
        assert response.json()["title"] == "Bike to work week"

    def test_get_missing_post(self, client):
        response = client.get("/api/posts/999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "POST_NOT_FOUND"

    def test_non_numeric_id(self, client):
        response = client.get("/api/posts/abc")
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_id_beyond_integer_range(self, client, test_user):
        too_big = 10 ** 20
        for path in (f"/api/posts/{too_big}", f"/api/posts?user_id={too_big}"):
            response = client.get(path)
            assert response.status_code == 400
            assert response.json()["error_code"] == "VALIDATION_ERROR"

        response = client.post("/api/posts", json={"user_id": too_big, "title": "Huge"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestPostsUpdate:
    def test_partial_update(self, client, test_post):
        response = client.put(f"/api/posts/{test_post.id}", json={"title": "Bike to work month"})
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Bike to work month"
        assert data["content"] == "Logged 40 km by bike instead of car."

    def test_null_clears_content(self, client, test_post):
        response = client.put(f"/api/posts/{test_post.id}", json={"content": None})
        assert response.status_code == 200
        assert response.json()["content"] is None

    def test_null_title_rejected(self, client, test_post):
        response = client.put(f"/api/posts/{test_post.id}", json={"title": None})
        assert response.status_code == 400

    def test_reassign_to_missing_user(self, client, test_post):
        response = client.put(f"/api/posts/{test_post.id}", json={"user_id": 999})
        assert response.status_code == 400
        assert response.json()["error_code"] == "USER_NOT_FOUND"

    def test_update_missing_post(self, client):
        response = client.put("/api/posts/999", json={"title": "Nothing"})
        assert response.status_code == 404

    def test_empty_update(self, client, test_post):
        response = client.put(f"/api/posts/{test_post.id}", json={})
        assert response.status_code == 400
        assert response.json()["error_code"] == "NO_UPDATE_FIELDS"


class TestPostsDelete:
    def test_delete_post_cascades(self, client, db, test_post, other_user, make_comment, make_like):
        make_comment(other_user, test_post)
        make_like(other_user, test_post)

        response = client.delete(f"/api/posts/{test_post.id}")
        assert response.status_code == 204

        assert db.query(Post).count() == 0
        assert db.query(Comment).count() == 0
        assert db.query(Like).count() == 0

    def test_delete_missing_post(self, client):
        response = client.delete("/api/posts/999")
        assert response.status_code == 404
