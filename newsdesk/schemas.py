"""
Pydantic schemas for the newsdesk API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from newsdesk.db import PostRecord, ProfileRecord, TagRecord
from newsdesk.moderation import AdminOverview, ProfileView
from newsdesk.reads import PostView


class TagResponse(BaseModel):
    id: str
    name: str
    slug: str

    @classmethod
    def from_record(cls, tag: TagRecord) -> "TagResponse":
        return cls(id=tag.id, name=tag.name, slug=tag.slug)


class PostSummary(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    author_id: str
    author_name: Optional[str] = None
    published: bool
    created_at: datetime
    updated_at: datetime
    tags: list[TagResponse] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: PostView) -> "PostSummary":
        return cls(
            **_post_fields(view.post),
            author_name=view.author_name,
            tags=[TagResponse.from_record(t) for t in view.tags],
        )


class PostDetail(PostSummary):
    content: str

    @classmethod
    def from_view(cls, view: PostView) -> "PostDetail":
        return cls(
            **_post_fields(view.post),
            content=view.post.content,
            author_name=view.author_name,
            tags=[TagResponse.from_record(t) for t in view.tags],
        )


def _post_fields(post: PostRecord) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "featured_image": post.featured_image,
        "author_id": post.author_id,
        "published": post.published,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


class ListPostsResponse(BaseModel):
    posts: list[PostSummary]


class TagPostsResponse(BaseModel):
    tag: TagResponse
    posts: list[PostSummary]


class ListTagsResponse(BaseModel):
    tags: list[TagResponse]


class CreatePostResponse(BaseModel):
    status: Literal["succeeded"] = "succeeded"
    post: PostDetail
    image_url: Optional[str] = None


class UpdatePostRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, max_length=50000)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    published: Optional[bool] = None


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    roles: list[str]
    created_at: datetime

    @classmethod
    def build(cls, profile: ProfileRecord, roles) -> "ProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            roles=sorted(role.value for role in roles),
            created_at=profile.created_at,
        )

    @classmethod
    def from_view(cls, view: ProfileView) -> "ProfileResponse":
        return cls.build(view.profile, view.roles)


class AdminOverviewResponse(BaseModel):
    posts: list[PostSummary]
    users: list[ProfileResponse]

    @classmethod
    def from_overview(cls, overview: AdminOverview) -> "AdminOverviewResponse":
        return cls(
            posts=[PostSummary.from_view(v) for v in overview.posts],
            users=[ProfileResponse.from_view(v) for v in overview.profiles],
        )


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"
