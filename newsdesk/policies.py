"""
Row-level rules for posts, tags, links and images.

These mirror the backend's policies and are enforced here as well, at the
service boundary. A client-side admin check is only an affordance.
"""

from __future__ import annotations

from typing import Optional

from newsdesk.db import PostRecord
from newsdesk.errors import AuthenticationRequired, PermissionDenied
from newsdesk.identity import Identity


def can_view_post(viewer: Optional[Identity], post: PostRecord) -> bool:
    if post.published:
        return True
    if viewer is None:
        return False
    return viewer.user_id == post.author_id or viewer.is_admin


def can_modify_post(viewer: Optional[Identity], post: PostRecord) -> bool:
    if viewer is None:
        return False
    return viewer.user_id == post.author_id or viewer.is_admin


def require_identity(viewer: Optional[Identity]) -> Identity:
    if viewer is None:
        raise AuthenticationRequired("Sign in required")
    return viewer


def require_admin(viewer: Optional[Identity]) -> Identity:
    viewer = require_identity(viewer)
    if not viewer.is_admin:
        raise PermissionDenied("Administrator role required")
    return viewer


def require_post_owner_or_admin(viewer: Optional[Identity], post: PostRecord) -> Identity:
    viewer = require_identity(viewer)
    if not can_modify_post(viewer, post):
        raise PermissionDenied("Only the author or an administrator may change this post")
    return viewer


def image_path_allowed(viewer: Identity, path: str) -> bool:
    """Images live under a folder named after the uploader's id."""
    return path.split("/", 1)[0] == viewer.user_id
