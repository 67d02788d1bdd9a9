"""
Read paths: the home listing, a single post, and posts under a tag.

An unknown slug is a ``None`` result, never an exception. Backend and
transport failures propagate as errors so callers can tell the two apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from newsdesk.db import DbClient, PostRecord, TagRecord
from newsdesk.identity import Identity
from newsdesk.policies import can_view_post


@dataclass
class PostView:
    post: PostRecord
    author_name: Optional[str] = None
    tags: list[TagRecord] = field(default_factory=list)


@dataclass
class TagListing:
    tag: TagRecord
    posts: list[PostView] = field(default_factory=list)


class PostReader:
    def __init__(self, db: DbClient):
        self.db = db

    def list_posts(self, viewer: Optional[Identity] = None) -> list[PostView]:
        """Published posts, most recent first."""
        return self.hydrate(self.db.list_posts(published_only=True))

    def get_post(
        self, slug: str, viewer: Optional[Identity] = None
    ) -> Optional[PostView]:
        post = self.db.get_post_by_slug(slug)
        if post is None or not can_view_post(viewer, post):
            return None
        return self.hydrate([post])[0]

    def posts_for_tag(
        self, slug: str, viewer: Optional[Identity] = None
    ) -> Optional[TagListing]:
        tag = self.db.find_tag_by_slug(slug)
        if tag is None:
            return None
        post_ids = self.db.post_ids_for_tag(tag.id)
        posts = [
            post
            for post in self.db.list_posts_by_ids(post_ids, published_only=False)
            if can_view_post(viewer, post)
        ]
        return TagListing(tag=tag, posts=self.hydrate(posts))

    def hydrate(self, posts: Iterable[PostRecord]) -> list[PostView]:
        posts = list(posts)
        if not posts:
            return []
        authors = self.db.get_profiles(p.author_id for p in posts)
        tags = self.db.tags_for_posts(p.id for p in posts)
        views = []
        for post in posts:
            author = authors.get(post.author_id)
            views.append(
                PostView(
                    post=post,
                    author_name=author.full_name if author else None,
                    tags=tags.get(post.id, []),
                )
            )
        return views
