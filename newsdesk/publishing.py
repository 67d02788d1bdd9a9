"""
Post creation: draft validation, tag find-or-create, linking, and the
orchestration that sequences them.

Creation runs as a linear state machine::

    IDLE -> UPLOADING_IMAGE (optional) -> INSERTING_POST -> LINKING_TAGS -> SUCCEEDED

Any backend or transport failure moves it to FAILED, carrying the first error.
Completed steps are not rolled back: an uploaded image or an inserted post
stays in place if a later step fails.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from newsdesk.db import DbClient, PostRecord, TagRecord
from newsdesk.errors import ConflictError, NewsdeskError, ValidationFailure
from newsdesk.identity import Identity
from newsdesk.policies import image_path_allowed, require_identity
from newsdesk.slugs import slugify
from newsdesk.storage import StorageClient

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_LENGTH = 200


class TagConflictPolicy(str, Enum):
    """What to do when inserting a tag hits the unique slug constraint.

    RETRY treats the conflict as "the tag exists now" and looks it up again.
    FAIL_FAST aborts the whole creation with the conflict.
    """

    RETRY = "retry"
    FAIL_FAST = "fail_fast"


class CreationStage(str, Enum):
    IDLE = "idle"
    UPLOADING_IMAGE = "uploading_image"
    INSERTING_POST = "inserting_post"
    LINKING_TAGS = "linking_tags"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PostDraft(BaseModel):
    """Author input for a new post, trimmed and size-checked."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=50000)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[str] = Field(default=None, max_length=200)


class PostEdit(BaseModel):
    """Text changes to an existing post, held to the draft limits."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=50000)
    excerpt: Optional[str] = Field(default=None, max_length=500)


_FIELD_LABELS = {
    "title": "Title",
    "content": "Content",
    "excerpt": "Excerpt",
    "tags": "Tags",
}


def validate_draft(
    title: Optional[str],
    content: Optional[str],
    excerpt: Optional[str] = None,
    tags: Optional[str] = None,
) -> PostDraft:
    """Build a ``PostDraft`` or raise ``ValidationFailure`` with the first problem."""
    try:
        draft = PostDraft(
            title=title if title is not None else "",
            content=content if content is not None else "",
            excerpt=excerpt,
            tags=tags,
        )
    except ValidationError as exc:
        raise _first_problem(exc) from exc
    if not slugify(draft.title):
        raise ValidationFailure("Title: must contain at least one letter or number")
    return draft


def validate_edit(changes: dict) -> dict:
    """Trim and size-check the text fields of a post update.

    Fields other than title, content and excerpt pass through untouched.
    """
    text = {k: v for k, v in changes.items() if k in PostEdit.model_fields}
    try:
        edit = PostEdit(**text)
    except ValidationError as exc:
        raise _first_problem(exc) from exc
    cleaned = dict(changes)
    cleaned.update({key: getattr(edit, key) for key in text})
    return cleaned


def _first_problem(exc: ValidationError) -> ValidationFailure:
    first = exc.errors()[0]
    name = str(first["loc"][0]) if first.get("loc") else "input"
    label = _FIELD_LABELS.get(name, name)
    return ValidationFailure(f"{label}: {first['msg']}", cause=exc)


@dataclass
class ImageUpload:
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        ext = re.sub(r"[^A-Za-z0-9]", "", self.filename.rsplit(".", 1)[-1])
        return ext.lower() or "bin"


def validate_image(image: ImageUpload) -> None:
    if not image.data:
        raise ValidationFailure("Featured image: file is empty")
    if not image.content_type.startswith("image/"):
        raise ValidationFailure("Featured image: must be an image file")


def parse_tag_names(raw: Optional[str]) -> list[str]:
    """Split a comma-separated tag string into distinct names.

    Entries are trimmed and empty ones dropped. Names that produce no slug are
    dropped too, and names sharing a slug collapse onto the first one seen,
    so ``"Politics, politics"`` yields ``["Politics"]``.
    """
    if not raw:
        return []
    names: list[str] = []
    seen: set[str] = set()
    for part in raw.split(","):
        name = part.strip()
        slug = slugify(name)
        if not name or not slug or slug in seen:
            continue
        seen.add(slug)
        names.append(name)
    return names


class TagResolver:
    """Find-or-create for the shared tag vocabulary."""

    def __init__(
        self,
        db: DbClient,
        policy: TagConflictPolicy = TagConflictPolicy.RETRY,
        max_attempts: int = 3,
    ):
        self.db = db
        self.policy = TagConflictPolicy(policy)
        self.max_attempts = max(1, max_attempts)

    def resolve(self, name: str) -> TagRecord:
        """Return the tag whose slug matches ``name``, creating it if needed.

        An existing tag keeps its original display name, whatever casing
        ``name`` uses.
        """
        slug = slugify(name)
        if not slug:
            raise ValidationFailure(f'Tag "{name}" has no usable characters')
        conflict: Optional[ConflictError] = None
        for attempt in range(1, self.max_attempts + 1):
            existing = self.db.find_tag_by_slug(slug)
            if existing:
                return existing
            try:
                tag = self.db.insert_tag(name, slug)
            except ConflictError as exc:
                if self.policy is TagConflictPolicy.FAIL_FAST:
                    raise
                conflict = exc
                logger.info(
                    "Tag %s was created concurrently, re-resolving (attempt %d/%d)",
                    slug,
                    attempt,
                    self.max_attempts,
                )
                continue
            logger.info("Created tag %s (%s)", tag.slug, tag.id)
            return tag
        raise ConflictError(
            f'Tag "{slug}" could not be resolved after {self.max_attempts} attempts',
            cause=conflict,
        )

    def link(self, post: PostRecord, tag: TagRecord) -> None:
        try:
            self.db.insert_post_tag(post.id, tag.id)
        except ConflictError:
            if self.policy is TagConflictPolicy.FAIL_FAST:
                raise
            logger.info("Post %s already linked to tag %s", post.id, tag.slug)


@dataclass
class CreationOutcome:
    stage: CreationStage = CreationStage.IDLE
    post: Optional[PostRecord] = None
    tags: list[TagRecord] = field(default_factory=list)
    image_url: Optional[str] = None
    error: Optional[NewsdeskError] = None
    failed_at: Optional[CreationStage] = None

    @property
    def succeeded(self) -> bool:
        return self.stage is CreationStage.SUCCEEDED

    def raise_for_error(self) -> "CreationOutcome":
        if self.error is not None:
            raise self.error
        return self


class PostCreator:
    """Sequences image upload, post insert and tag linking for one author."""

    def __init__(
        self,
        db: DbClient,
        storage: StorageClient,
        *,
        tag_policy: TagConflictPolicy = TagConflictPolicy.RETRY,
        tag_attempts: int = 3,
        excerpt_length: int = DEFAULT_EXCERPT_LENGTH,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.storage = storage
        self.resolver = TagResolver(db, policy=tag_policy, max_attempts=tag_attempts)
        self.excerpt_length = excerpt_length
        self._clock = clock

    def image_path(self, author: Identity, image: ImageUpload) -> str:
        millis = int(self._clock() * 1000)
        return f"{author.user_id}/{millis}.{image.extension}"

    def create(
        self,
        identity: Optional[Identity],
        draft: PostDraft,
        image: Optional[ImageUpload] = None,
    ) -> CreationOutcome:
        """Run the creation workflow.

        Authentication and image validation happen before any backend call
        and raise directly. Backend and transport failures are captured in
        the returned outcome; nothing is retried or undone.
        """
        author = require_identity(identity)
        if image is not None:
            validate_image(image)
        tag_names = parse_tag_names(draft.tags)

        outcome = CreationOutcome()
        try:
            if image is not None:
                self._advance(outcome, CreationStage.UPLOADING_IMAGE)
                outcome.image_url = self._upload_image(author, image)

            self._advance(outcome, CreationStage.INSERTING_POST)
            outcome.post = self.db.insert_post(
                title=draft.title,
                slug=slugify(draft.title),
                content=draft.content,
                excerpt=draft.excerpt or draft.content[: self.excerpt_length],
                featured_image=outcome.image_url,
                author_id=author.user_id,
            )

            self._advance(outcome, CreationStage.LINKING_TAGS)
            for name in tag_names:
                tag = self.resolver.resolve(name)
                self.resolver.link(outcome.post, tag)
                outcome.tags.append(tag)
        except NewsdeskError as exc:
            outcome.failed_at = outcome.stage
            outcome.error = exc
            outcome.stage = CreationStage.FAILED
            logger.warning(
                "Post creation by %s failed while %s: %s",
                author.user_id,
                outcome.failed_at.value,
                exc,
            )
            return outcome

        self._advance(outcome, CreationStage.SUCCEEDED)
        return outcome

    def _upload_image(self, author: Identity, image: ImageUpload) -> str:
        path = self.image_path(author, image)
        if not image_path_allowed(author, path):
            raise ValidationFailure(f"Image path {path} is outside the author's folder")
        self.storage.upload_bytes(path, image.data, content_type=image.content_type)
        return self.storage.public_url(path)

    def _advance(self, outcome: CreationOutcome, stage: CreationStage) -> None:
        logger.debug("Post creation: %s -> %s", outcome.stage.value, stage.value)
        outcome.stage = stage
