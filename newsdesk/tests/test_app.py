import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from newsdesk.app import create_app
from newsdesk.dependencies import (
    get_db_client,
    get_storage_client,
    get_token_verifier,
    reset_clients,
)
from newsdesk.errors import TransportFailure
from newsdesk.identity import Role


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        reset_clients()
        self.client = TestClient(create_app())
        self.db = get_db_client()
        self.storage = get_storage_client()
        self.verifier = get_token_verifier()

    def tearDown(self):
        reset_clients()

    def _headers(self, user_id, email=None, name="", admin=False):
        token = self.verifier.issue(user_id, email or f"{user_id}@example.com", name)
        headers = {"Authorization": f"Bearer {token}"}
        if admin:
            self.client.get("/api/me", headers=headers)
            self.db.add_role(user_id, Role.ADMIN)
        return headers

    def _create(self, headers, title, content="Body text", **extra):
        data = {"title": title, "content": content}
        data.update({k: v for k, v in extra.items() if k != "files"})
        return self.client.post(
            "/api/posts", data=data, files=extra.get("files"), headers=headers
        )

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_create_post_with_tags_and_image(self):
        headers = self._headers("author", name="Ann Reporter")
        response = self._create(
            headers,
            "Belfast Storm Warning",
            tags="Weather, Local News",
            files={"image": ("storm.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        )
        self.assertEqual(response.status_code, 201, response.text)
        payload = response.json()
        self.assertEqual(payload["status"], "succeeded")
        post = payload["post"]
        self.assertEqual(post["slug"], "belfast-storm-warning")
        self.assertEqual(post["author_name"], "Ann Reporter")
        self.assertEqual([t["slug"] for t in post["tags"]], ["weather", "local-news"])
        self.assertTrue(post["featured_image"].endswith(".jpg"))
        self.assertEqual(len(self.storage.stored_objects), 1)
        self.assertTrue(next(iter(self.storage.stored_objects)).startswith("author/"))

        listing = self.client.get("/api/posts").json()["posts"]
        self.assertEqual([p["slug"] for p in listing], ["belfast-storm-warning"])

        detail = self.client.get("/api/posts/belfast-storm-warning")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["content"], "Body text")

    def test_create_requires_sign_in(self):
        response = self.client.post("/api/posts", data={"title": "T", "content": "C"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "AuthenticationRequired")

    def test_invalid_token(self):
        response = self.client.get("/api/me", headers={"Authorization": "Bearer nope"})
        self.assertEqual(response.status_code, 401)

    def test_validation_failure_is_422_and_writes_nothing(self):
        headers = self._headers("author")
        response = self._create(headers, "x" * 201)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"], "ValidationFailure")
        self.assertEqual(self.db.list_posts(published_only=False), [])

    def test_duplicate_slug_is_conflict(self):
        headers = self._headers("author")
        self.assertEqual(self._create(headers, "Council Vote").status_code, 201)
        response = self._create(headers, "Council vote!")
        self.assertEqual(response.status_code, 409)
        self.assertFalse(response.json()["retryable"])

    def test_transport_failure_is_503_and_retryable(self):
        headers = self._headers("author")
        with patch.object(self.db, "insert_post", side_effect=TransportFailure("timed out")):
            response = self._create(headers, "Council Vote")
        self.assertEqual(response.status_code, 503)
        self.assertTrue(response.json()["retryable"])

    def test_missing_post_and_tag_are_404(self):
        self.assertEqual(self.client.get("/api/posts/missing").status_code, 404)
        self.assertEqual(self.client.get("/api/tags/missing/posts").status_code, 404)

    def test_tag_with_no_posts_is_empty(self):
        self.db.insert_tag("Sport", "sport")
        response = self.client.get("/api/tags/sport/posts")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["tag"]["name"], "Sport")
        self.assertEqual(response.json()["posts"], [])

    def test_unpublished_post_visibility(self):
        author = self._headers("author")
        admin = self._headers("editor", admin=True)
        stranger = self._headers("stranger")
        post_id = self._create(author, "Embargoed Story").json()["post"]["id"]

        hidden = self.client.patch(
            f"/api/posts/{post_id}", json={"published": False}, headers=author
        )
        self.assertEqual(hidden.status_code, 200)
        self.assertFalse(hidden.json()["published"])

        self.assertEqual(self.client.get("/api/posts/embargoed-story").status_code, 404)
        self.assertEqual(
            self.client.get("/api/posts/embargoed-story", headers=stranger).status_code, 404
        )
        self.assertEqual(
            self.client.get("/api/posts/embargoed-story", headers=author).status_code, 200
        )
        self.assertEqual(
            self.client.get("/api/posts/embargoed-story", headers=admin).status_code, 200
        )
        self.assertEqual(self.client.get("/api/posts").json()["posts"], [])

    def test_delete_post_permissions(self):
        author = self._headers("author")
        stranger = self._headers("stranger")
        admin = self._headers("editor", admin=True)
        post_id = self._create(author, "Council Vote", tags="Politics").json()["post"]["id"]

        self.assertEqual(
            self.client.delete(f"/api/posts/{post_id}", headers=stranger).status_code, 403
        )
        self.assertEqual(
            self.client.delete(f"/api/posts/{post_id}", headers=admin).status_code, 200
        )
        self.assertEqual(
            self.client.delete(f"/api/posts/{post_id}", headers=admin).status_code, 404
        )
        tag_posts = self.client.get("/api/tags/politics/posts").json()["posts"]
        self.assertEqual(tag_posts, [])

    def test_admin_overview_and_tag_delete(self):
        author = self._headers("author", name="Ann")
        admin = self._headers("editor", name="Ed", admin=True)
        self._create(author, "Council Vote", tags="Politics")

        self.assertEqual(self.client.get("/api/admin/overview", headers=author).status_code, 403)
        overview = self.client.get("/api/admin/overview", headers=admin)
        self.assertEqual(overview.status_code, 200)
        body = overview.json()
        self.assertEqual([p["slug"] for p in body["posts"]], ["council-vote"])
        self.assertEqual({u["id"] for u in body["users"]}, {"author", "editor"})

        tags = self.client.get("/api/tags").json()["tags"]
        self.assertEqual([t["slug"] for t in tags], ["politics"])
        self.assertEqual(
            self.client.delete(f"/api/tags/{tags[0]['id']}", headers=author).status_code, 403
        )
        self.assertEqual(
            self.client.delete(f"/api/tags/{tags[0]['id']}", headers=admin).status_code, 200
        )
        self.assertEqual(self.client.get("/api/tags").json()["tags"], [])

    def test_me_reports_roles(self):
        headers = self._headers("editor", name="Ed", admin=True)
        response = self.client.get("/api/me", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["roles"], ["admin", "user"])


if __name__ == "__main__":
    unittest.main()
