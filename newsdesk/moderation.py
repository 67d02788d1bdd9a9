"""
Administrator and owner operations: the admin overview, post edits and
deletions, and tag removal.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Optional

from newsdesk.db import DbClient, PostRecord, ProfileRecord, TagRecord
from newsdesk.errors import RecordNotFound, TransportFailure
from newsdesk.identity import Identity, Role
from newsdesk.policies import (
    require_admin,
    require_identity,
    require_post_owner_or_admin,
)
from newsdesk.publishing import validate_edit
from newsdesk.reads import PostReader, PostView

logger = logging.getLogger(__name__)


@dataclass
class ProfileView:
    profile: ProfileRecord
    roles: set[Role] = field(default_factory=set)


@dataclass
class AdminOverview:
    posts: list[PostView]
    profiles: list[ProfileView]


class Moderator:
    def __init__(self, db: DbClient, timeout_seconds: Optional[float] = None):
        self.db = db
        self.reader = PostReader(db)
        self.timeout_seconds = timeout_seconds

    def overview(self, identity: Optional[Identity]) -> AdminOverview:
        """All posts and all profiles, newest first.

        The two reads are independent and run concurrently; the first
        failure propagates. A read that outlives ``timeout_seconds`` is
        abandoned and reported as a ``TransportFailure``.
        """
        require_admin(identity)
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=2)
        try:
            posts_future = executor.submit(self._all_posts)
            profiles_future = executor.submit(self._all_profiles)
            posts = posts_future.result(timeout=self.timeout_seconds)
            profiles = profiles_future.result(timeout=self.timeout_seconds)
        except concurrent.futures.TimeoutError as exc:
            logger.error("Admin overview timed out after %ss", self.timeout_seconds)
            raise TransportFailure("Admin overview timed out", cause=exc) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return AdminOverview(posts=posts, profiles=profiles)

    def _all_posts(self) -> list[PostView]:
        return self.reader.hydrate(self.db.list_posts(published_only=False))

    def _all_profiles(self) -> list[ProfileView]:
        return [
            ProfileView(profile=profile, roles=self.db.get_roles(profile.id))
            for profile in self.db.list_profiles()
        ]

    def update_post(
        self, identity: Optional[Identity], post_id: str, **changes
    ) -> PostRecord:
        """Change title, content, excerpt, image or published flag.

        The slug and the author never change.
        """
        require_identity(identity)
        post = self._get_post(post_id)
        require_post_owner_or_admin(identity, post)
        changes = validate_edit({k: v for k, v in changes.items() if v is not None})
        if not changes:
            return post
        updated = self.db.update_post(post_id, **changes)
        logger.info("Post %s updated by %s: %s", post_id, identity.user_id, sorted(changes))
        return updated

    def delete_post(self, identity: Optional[Identity], post_id: str) -> None:
        require_identity(identity)
        post = self._get_post(post_id)
        require_post_owner_or_admin(identity, post)
        if not self.db.delete_post(post_id):
            raise RecordNotFound(f"Post {post_id} does not exist")
        logger.info("Post %s deleted by %s", post_id, identity.user_id)

    def delete_tag(self, identity: Optional[Identity], tag_id: str) -> None:
        admin = require_admin(identity)
        if not self.db.delete_tag(tag_id):
            raise RecordNotFound(f"Tag {tag_id} does not exist")
        logger.info("Tag %s deleted by %s", tag_id, admin.user_id)

    def list_tags(self) -> list[TagRecord]:
        return self.db.list_tags()

    def _get_post(self, post_id: str) -> PostRecord:
        post = self.db.get_post(post_id)
        if post is None:
            raise RecordNotFound(f"Post {post_id} does not exist")
        return post
