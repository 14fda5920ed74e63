"""
Tests for the derived notification feed.
"""


class TestNotifications:
    def test_requires_token(self, client):
        response = client.get("/api/notifications")
        assert response.status_code == 401

    def test_empty_feed(self, client, test_user, auth_headers):
        response = client.get("/api/notifications", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_comments_and_likes_from_others(
        self, client, test_user, other_user, test_post, make_comment, make_like, auth_headers
    ):
        comment = make_comment(other_user, test_post)
        make_like(other_user, test_post)

        response = client.get("/api/notifications", headers=auth_headers)
        assert response.status_code == 200
        items = {item["id"]: item for item in response.json()}

        assert set(items) == {f"comment-{comment.id}", f"like-{other_user.id}-{test_post.id}"}
        assert items[f"comment-{comment.id}"]["content"] == 'otheruser commented on "Bike to work week"'
        assert items[f"like-{other_user.id}-{test_post.id}"]["content"] == 'otheruser liked "Bike to work week"'
        assert all(item["is_read"] is False for item in items.values())

    def test_own_activity_is_not_notified(self, client, test_user, test_post, make_comment, make_like, auth_headers):
        make_comment(test_user, test_post)
        make_like(test_user, test_post)

        response = client.get("/api/notifications", headers=auth_headers)
        assert response.json() == []

    def test_limit(self, client, test_user, other_user, test_post, make_comment, auth_headers):
        for i in range(3):
            make_comment(other_user, test_post, f"comment {i}")

        response = client.get("/api/notifications", headers=auth_headers, params={"limit": 2})
        assert len(response.json()) == 2
