import unittest

from newsdesk.db import PostgresDbClient
from newsdesk.errors import BackendRejection, ConflictError, RecordNotFound
from newsdesk.identity import Role
from newsdesk.publishing import TagConflictPolicy, TagResolver


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")
        self.profile, created = self.db.ensure_profile("user-1", "a@example.com", "Ann")
        self.assertTrue(created)

    def _post(self, slug="first", published=True):
        return self.db.insert_post(
            title=slug.title(),
            slug=slug,
            content="Body",
            author_id="user-1",
            excerpt="Body",
            published=published,
        )

    def test_ensure_profile_is_idempotent(self):
        again, created = self.db.ensure_profile("user-1", "other@example.com", "Other")
        self.assertFalse(created)
        self.assertEqual(again.email, "a@example.com")
        self.assertEqual(len(self.db.list_profiles()), 1)

    def test_roles(self):
        self.db.add_role("user-1", Role.USER)
        self.db.add_role("user-1", Role.ADMIN)
        self.db.add_role("user-1", Role.ADMIN)
        self.assertEqual(self.db.get_roles("user-1"), {Role.USER, Role.ADMIN})
        self.db.remove_role("user-1", Role.ADMIN)
        self.assertEqual(self.db.get_roles("user-1"), {Role.USER})
        with self.assertRaises(RecordNotFound):
            self.db.add_role("nobody", Role.USER)

    def test_post_slug_is_unique(self):
        self._post("same")
        with self.assertRaises(ConflictError):
            self._post("same")

    def test_get_post_by_slug_published_filter(self):
        self._post("hidden", published=False)
        self.assertIsNotNone(self.db.get_post_by_slug("hidden"))
        self.assertIsNone(self.db.get_post_by_slug("hidden", published_only=True))
        self.assertIsNone(self.db.get_post_by_slug("missing"))

    def test_list_posts(self):
        visible = self._post("visible")
        self._post("hidden", published=False)
        self.assertEqual([p.id for p in self.db.list_posts()], [visible.id])
        self.assertEqual(len(self.db.list_posts(published_only=False)), 2)

    def test_update_post(self):
        post = self._post()
        updated = self.db.update_post(post.id, title="Renamed", published=False)
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.slug, "first")
        self.assertFalse(updated.published)
        with self.assertRaises(BackendRejection):
            self.db.update_post(post.id, slug="other")
        with self.assertRaises(RecordNotFound):
            self.db.update_post("missing", title="x")

    def test_tag_name_and_slug_unique(self):
        tag = self.db.insert_tag("Politics", "politics")
        self.assertEqual(self.db.find_tag_by_slug("politics").id, tag.id)
        with self.assertRaises(ConflictError):
            self.db.insert_tag("POLITICS", "politics")
        with self.assertRaises(ConflictError):
            self.db.insert_tag("Politics", "politics-2")
        self.assertIsNone(self.db.find_tag_by_slug("sport"))

    def test_links_are_unique_and_joined(self):
        post = self._post()
        politics = self.db.insert_tag("Politics", "politics")
        weather = self.db.insert_tag("Weather", "weather")
        self.db.insert_post_tag(post.id, politics.id)
        self.db.insert_post_tag(post.id, weather.id)
        with self.assertRaises(ConflictError):
            self.db.insert_post_tag(post.id, politics.id)

        self.assertEqual(self.db.post_ids_for_tag(politics.id), [post.id])
        tags = self.db.tags_for_posts([post.id])
        self.assertEqual({t.slug for t in tags[post.id]}, {"politics", "weather"})

    def test_deleting_post_or_tag_cascades_links(self):
        post = self._post()
        politics = self.db.insert_tag("Politics", "politics")
        weather = self.db.insert_tag("Weather", "weather")
        self.db.insert_post_tag(post.id, politics.id)
        self.db.insert_post_tag(post.id, weather.id)

        self.assertTrue(self.db.delete_tag(weather.id))
        self.assertEqual([t.slug for t in self.db.tags_for_posts([post.id])[post.id]], ["politics"])

        self.assertTrue(self.db.delete_post(post.id))
        self.assertEqual(self.db.post_ids_for_tag(politics.id), [])
        self.assertFalse(self.db.delete_post(post.id))

    def test_link_to_deleted_tag_is_rejected(self):
        post = self._post()
        tag = self.db.insert_tag("Weather", "weather")
        self.assertTrue(self.db.delete_tag(tag.id))
        with self.assertRaises(BackendRejection) as ctx:
            self.db.insert_post_tag(post.id, tag.id)
        self.assertNotIsInstance(ctx.exception, ConflictError)

    def test_retry_policy_surfaces_link_to_deleted_tag(self):
        post = self._post()
        tag = self.db.insert_tag("Weather", "weather")
        self.db.delete_tag(tag.id)
        resolver = TagResolver(self.db, TagConflictPolicy.RETRY)
        with self.assertRaises(BackendRejection):
            resolver.link(post, tag)
        self.assertEqual(self.db.tags_for_posts([post.id])[post.id], [])

    def test_post_without_author_profile_is_rejected(self):
        with self.assertRaises(BackendRejection) as ctx:
            self.db.insert_post(
                title="Orphan", slug="orphan", content="Body", author_id="nobody"
            )
        self.assertNotIsInstance(ctx.exception, ConflictError)

    def test_profiles_lookup(self):
        self.db.ensure_profile("user-2", "b@example.com", "Bea")
        found = self.db.get_profiles(["user-1", "user-2", "missing"])
        self.assertEqual(set(found), {"user-1", "user-2"})
        self.assertEqual(found["user-2"].full_name, "Bea")


if __name__ == "__main__":
    unittest.main()
