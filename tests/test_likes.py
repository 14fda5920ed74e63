"""
Tests for likes endpoints.
"""
from eco3.models import Like


class TestLikesEndpoints:
    def test_create_like(self, client, other_user, test_post):
        response = client.post("/api/likes", json={"user_id": other_user.id, "post_id": test_post.id})
        assert response.status_code == 201
        assert response.json()["user_id"] == str(other_user.id)

    def test_duplicate_like(self, client, db, other_user, test_post, make_like):
        make_like(other_user, test_post)
        response = client.post("/api/likes", json={"user_id": other_user.id, "post_id": test_post.id})
        assert response.status_code == 400
        assert response.json()["error_code"] == "LIKE_ALREADY_EXISTS"
        assert db.query(Like).count() == 1

    def test_like_missing_post(self, client, other_user):
        response = client.post("/api/likes", json={"user_id": other_user.id, "post_id": 999})
        assert response.status_code == 400
        assert response.json()["error_code"] == "POST_NOT_FOUND"

    def test_like_id_beyond_integer_range(self, client, db, test_post):
        response = client.post("/api/likes", json={"user_id": 10 ** 20, "post_id": test_post.id})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert db.query(Like).count() == 0

        response = client.delete(f"/api/likes/{10 ** 20}/{test_post.id}")
        assert response.status_code == 400

    def test_list_likes(self, client, test_user, other_user, test_post, make_like):
        make_like(test_user, test_post)
        make_like(other_user, test_post)

        assert len(client.get("/api/likes", params={"post_id": test_post.id}).json()) == 2
        assert len(client.get("/api/likes", params={"user_id": other_user.id}).json()) == 1

    def test_unlike(self, client, db, other_user, test_post, make_like):
        make_like(other_user, test_post)
        response = client.delete(f"/api/likes/{other_user.id}/{test_post.id}")
        assert response.status_code == 204
        assert db.query(Like).count() == 0

    def test_unlike_missing(self, client, other_user, test_post):
        response = client.delete(f"/api/likes/{other_user.id}/{test_post.id}")
        assert response.status_code == 404
        assert response.json()["error_code"] == "LIKE_NOT_FOUND"
