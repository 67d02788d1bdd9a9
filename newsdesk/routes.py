"""
HTTP routes for the newsdesk API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from newsdesk.db import DbClient
from newsdesk.dependencies import (
    get_current_identity,
    get_db_client,
    get_moderator,
    get_post_creator,
    get_post_reader,
    require_current_identity,
)
from newsdesk.identity import Identity
from newsdesk.moderation import Moderator
from newsdesk.publishing import ImageUpload, PostCreator, validate_draft
from newsdesk.reads import PostReader, PostView
from newsdesk.schemas import (
    AdminOverviewResponse,
    CreatePostResponse,
    ListPostsResponse,
    ListTagsResponse,
    PostDetail,
    PostSummary,
    ProfileResponse,
    StatusResponse,
    TagPostsResponse,
    TagResponse,
    UpdatePostRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=StatusResponse)
def health():
    return StatusResponse()


@router.get("/posts", response_model=ListPostsResponse)
def list_posts(
    viewer: Optional[Identity] = Depends(get_current_identity),
    reader: PostReader = Depends(get_post_reader),
):
    views = reader.list_posts(viewer)
    return ListPostsResponse(posts=[PostSummary.from_view(v) for v in views])


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    viewer: Optional[Identity] = Depends(get_current_identity),
    reader: PostReader = Depends(get_post_reader),
):
    view = reader.get_post(slug, viewer)
    if view is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostDetail.from_view(view)


@router.post("/posts", response_model=CreatePostResponse, status_code=201)
async def create_post(
    title: str = Form(...),
    content: str = Form(...),
    excerpt: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    identity: Identity = Depends(require_current_identity),
    creator: PostCreator = Depends(get_post_creator),
):
    """
    Create a post for the signed-in author, optionally with a featured image
    and comma-separated tags.
    """
    draft = validate_draft(title, content, excerpt, tags)
    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(
            filename=image.filename,
            data=await image.read(),
            content_type=image.content_type or "application/octet-stream",
        )

    outcome = creator.create(identity, draft, upload).raise_for_error()
    view = PostView(post=outcome.post, author_name=identity.full_name, tags=outcome.tags)
    return CreatePostResponse(post=PostDetail.from_view(view), image_url=outcome.image_url)


@router.patch("/posts/{post_id}", response_model=PostDetail)
def update_post(
    post_id: str,
    payload: UpdatePostRequest,
    identity: Identity = Depends(require_current_identity),
    moderator: Moderator = Depends(get_moderator),
    reader: PostReader = Depends(get_post_reader),
):
    post = moderator.update_post(identity, post_id, **payload.model_dump(exclude_none=True))
    return PostDetail.from_view(reader.hydrate([post])[0])


@router.delete("/posts/{post_id}", response_model=StatusResponse)
def delete_post(
    post_id: str,
    identity: Identity = Depends(require_current_identity),
    moderator: Moderator = Depends(get_moderator),
):
    moderator.delete_post(identity, post_id)
    return StatusResponse()


@router.get("/tags", response_model=ListTagsResponse)
def list_tags(moderator: Moderator = Depends(get_moderator)):
    return ListTagsResponse(
        tags=[TagResponse.from_record(t) for t in moderator.list_tags()]
    )


@router.get("/tags/{slug}/posts", response_model=TagPostsResponse)
def list_tag_posts(
    slug: str,
    viewer: Optional[Identity] = Depends(get_current_identity),
    reader: PostReader = Depends(get_post_reader),
):
    listing = reader.posts_for_tag(slug, viewer)
    if listing is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    return TagPostsResponse(
        tag=TagResponse.from_record(listing.tag),
        posts=[PostSummary.from_view(v) for v in listing.posts],
    )


@router.delete("/tags/{tag_id}", response_model=StatusResponse)
def delete_tag(
    tag_id: str,
    identity: Identity = Depends(require_current_identity),
    moderator: Moderator = Depends(get_moderator),
):
    moderator.delete_tag(identity, tag_id)
    return StatusResponse()


@router.get("/admin/overview", response_model=AdminOverviewResponse)
def admin_overview(
    identity: Identity = Depends(require_current_identity),
    moderator: Moderator = Depends(get_moderator),
):
    return AdminOverviewResponse.from_overview(moderator.overview(identity))


@router.get("/me", response_model=ProfileResponse)
def me(
    identity: Identity = Depends(require_current_identity),
    db: DbClient = Depends(get_db_client),
):
    profile = db.get_profile(identity.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse.build(profile, identity.roles)
