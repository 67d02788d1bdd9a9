"""
Table access for profiles, roles, posts, tags and post-tag links.

Two implementations share the ``DbClient`` protocol: an in-memory client for
development and tests, and a SQLAlchemy client for Postgres (or SQLite in
tests). Both enforce the same unique constraints and cascades so callers can
rely on the backend, not on client-side coordination, for uniqueness.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, Iterable, Iterator, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    event,
    exc as sa_exc,
    select,
)
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from newsdesk.errors import (
    BackendRejection,
    ConflictError,
    RecordNotFound,
    TransportFailure,
)
from newsdesk.identity import Role

logger = logging.getLogger(__name__)

POST_MUTABLE_FIELDS = frozenset(
    {"title", "content", "excerpt", "featured_image", "published"}
)


class DbClient(Protocol):
    """Interface for table access."""

    def ensure_profile(
        self, user_id: str, email: str, full_name: str = ""
    ) -> tuple["ProfileRecord", bool]:
        ...

    def get_profile(self, user_id: str) -> Optional["ProfileRecord"]:
        ...

    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, "ProfileRecord"]:
        ...

    def list_profiles(self) -> list["ProfileRecord"]:
        ...

    def get_roles(self, user_id: str) -> set[Role]:
        ...

    def add_role(self, user_id: str, role: Role) -> None:
        ...

    def remove_role(self, user_id: str, role: Role) -> None:
        ...

    def insert_post(
        self,
        *,
        title: str,
        slug: str,
        content: str,
        author_id: str,
        excerpt: Optional[str] = None,
        featured_image: Optional[str] = None,
        published: bool = True,
    ) -> "PostRecord":
        ...

    def get_post(self, post_id: str) -> Optional["PostRecord"]:
        ...

    def get_post_by_slug(
        self, slug: str, *, published_only: bool = False
    ) -> Optional["PostRecord"]:
        ...

    def list_posts(self, *, published_only: bool = True) -> list["PostRecord"]:
        ...

    def list_posts_by_ids(
        self, post_ids: Iterable[str], *, published_only: bool = True
    ) -> list["PostRecord"]:
        ...

    def update_post(self, post_id: str, **changes) -> "PostRecord":
        ...

    def delete_post(self, post_id: str) -> bool:
        ...

    def find_tag_by_slug(self, slug: str) -> Optional["TagRecord"]:
        ...

    def insert_tag(self, name: str, slug: str) -> "TagRecord":
        ...

    def list_tags(self) -> list["TagRecord"]:
        ...

    def delete_tag(self, tag_id: str) -> bool:
        ...

    def insert_post_tag(self, post_id: str, tag_id: str) -> "PostTagRecord":
        ...

    def post_ids_for_tag(self, tag_id: str) -> list[str]:
        ...

    def tags_for_posts(
        self, post_ids: Iterable[str]
    ) -> Dict[str, list["TagRecord"]]:
        ...


@dataclass
class ProfileRecord:
    id: str
    email: str
    full_name: str = ""
    avatar_url: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class PostRecord:
    id: str
    title: str
    slug: str
    content: str
    author_id: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    published: bool = True
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class TagRecord:
    id: str
    name: str
    slug: str
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class PostTagRecord:
    id: str
    post_id: str
    tag_id: str
    created_at: float = field(default_factory=lambda: time.time())


def _check_post_changes(changes: dict) -> None:
    unknown = set(changes) - POST_MUTABLE_FIELDS
    if unknown:
        raise BackendRejection(
            f"Post fields cannot be changed: {', '.join(sorted(unknown))}"
        )


class InMemoryDbClient:
    """Simple in-memory database for development and tests.

    A single lock guards every read and write. It stands in for the
    database's constraint checks so concurrent callers observe the same
    unique-key conflicts they would against Postgres.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.RLock()
        self._seq = 0
        self.profiles: Dict[str, ProfileRecord] = {}
        self.roles: Dict[str, set[Role]] = {}
        self.posts: Dict[str, PostRecord] = {}
        self.tags: Dict[str, TagRecord] = {}
        self.post_tags: Dict[str, PostTagRecord] = {}
        self._order: Dict[str, int] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.profiles.clear()
            self.roles.clear()
            self.posts.clear()
            self.tags.clear()
            self.post_tags.clear()
            self._order.clear()

    def _stamp(self, key: str) -> float:
        self._seq += 1
        self._order[key] = self._seq
        return self._clock()

    def _newest_first(self, posts: Iterable[PostRecord]) -> list[PostRecord]:
        return sorted(
            posts,
            key=lambda p: (p.created_at, self._order.get(p.id, 0)),
            reverse=True,
        )

    # Profiles and roles

    def ensure_profile(
        self, user_id: str, email: str, full_name: str = ""
    ) -> tuple[ProfileRecord, bool]:
        with self._lock:
            existing = self.profiles.get(user_id)
            if existing:
                return existing, False
            now = self._stamp(user_id)
            record = ProfileRecord(
                id=user_id,
                email=email,
                full_name=full_name,
                created_at=now,
                updated_at=now,
            )
            self.profiles[user_id] = record
            return record, True

    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        with self._lock:
            return self.profiles.get(user_id)

    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, ProfileRecord]:
        wanted = set(user_ids)
        with self._lock:
            return {uid: self.profiles[uid] for uid in wanted if uid in self.profiles}

    def list_profiles(self) -> list[ProfileRecord]:
        with self._lock:
            return sorted(
                self.profiles.values(),
                key=lambda p: (p.created_at, self._order.get(p.id, 0)),
                reverse=True,
            )

    def get_roles(self, user_id: str) -> set[Role]:
        with self._lock:
            return set(self.roles.get(user_id, set()))

    def add_role(self, user_id: str, role: Role) -> None:
        with self._lock:
            if user_id not in self.profiles:
                raise RecordNotFound(f"Profile {user_id} does not exist")
            self.roles.setdefault(user_id, set()).add(Role(role))

    def remove_role(self, user_id: str, role: Role) -> None:
        with self._lock:
            self.roles.get(user_id, set()).discard(Role(role))

    # Posts

    def insert_post(
        self,
        *,
        title: str,
        slug: str,
        content: str,
        author_id: str,
        excerpt: Optional[str] = None,
        featured_image: Optional[str] = None,
        published: bool = True,
    ) -> PostRecord:
        with self._lock:
            if any(p.slug == slug for p in self.posts.values()):
                raise ConflictError(f'A post with slug "{slug}" already exists')
            if author_id not in self.profiles:
                raise BackendRejection(f"Author {author_id} has no profile")
            post_id = uuid.uuid4().hex
            now = self._stamp(post_id)
            record = PostRecord(
                id=post_id,
                title=title,
                slug=slug,
                content=content,
                author_id=author_id,
                excerpt=excerpt,
                featured_image=featured_image,
                published=published,
                created_at=now,
                updated_at=now,
            )
            self.posts[post_id] = record
            return record

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        with self._lock:
            return self.posts.get(post_id)

    def get_post_by_slug(
        self, slug: str, *, published_only: bool = False
    ) -> Optional[PostRecord]:
        with self._lock:
            for post in self.posts.values():
                if post.slug == slug and (post.published or not published_only):
                    return post
        return None

    def list_posts(self, *, published_only: bool = True) -> list[PostRecord]:
        with self._lock:
            return self._newest_first(
                p for p in self.posts.values() if p.published or not published_only
            )

    def list_posts_by_ids(
        self, post_ids: Iterable[str], *, published_only: bool = True
    ) -> list[PostRecord]:
        wanted = set(post_ids)
        with self._lock:
            return self._newest_first(
                p
                for p in self.posts.values()
                if p.id in wanted and (p.published or not published_only)
            )

    def update_post(self, post_id: str, **changes) -> PostRecord:
        _check_post_changes(changes)
        with self._lock:
            post = self.posts.get(post_id)
            if not post:
                raise RecordNotFound(f"Post {post_id} does not exist")
            for key, value in changes.items():
                setattr(post, key, value)
            post.updated_at = self._clock()
            return post

    def delete_post(self, post_id: str) -> bool:
        with self._lock:
            if self.posts.pop(post_id, None) is None:
                return False
            for link_id in [
                k for k, link in self.post_tags.items() if link.post_id == post_id
            ]:
                del self.post_tags[link_id]
            return True

    # Tags and links

    def find_tag_by_slug(self, slug: str) -> Optional[TagRecord]:
        with self._lock:
            for tag in self.tags.values():
                if tag.slug == slug:
                    return tag
        return None

    def insert_tag(self, name: str, slug: str) -> TagRecord:
        with self._lock:
            for tag in self.tags.values():
                if tag.slug == slug or tag.name == name:
                    raise ConflictError(f'A tag "{name}" ({slug}) already exists')
            tag_id = uuid.uuid4().hex
            record = TagRecord(
                id=tag_id, name=name, slug=slug, created_at=self._stamp(tag_id)
            )
            self.tags[tag_id] = record
            return record

    def list_tags(self) -> list[TagRecord]:
        with self._lock:
            return sorted(self.tags.values(), key=lambda t: t.name.lower())

    def delete_tag(self, tag_id: str) -> bool:
        with self._lock:
            if self.tags.pop(tag_id, None) is None:
                return False
            for link_id in [
                k for k, link in self.post_tags.items() if link.tag_id == tag_id
            ]:
                del self.post_tags[link_id]
            return True

    def insert_post_tag(self, post_id: str, tag_id: str) -> PostTagRecord:
        with self._lock:
            if post_id not in self.posts:
                raise BackendRejection(f"Post {post_id} does not exist")
            if tag_id not in self.tags:
                raise BackendRejection(f"Tag {tag_id} does not exist")
            for link in self.post_tags.values():
                if link.post_id == post_id and link.tag_id == tag_id:
                    raise ConflictError(
                        f"Post {post_id} is already linked to tag {tag_id}"
                    )
            link_id = uuid.uuid4().hex
            record = PostTagRecord(
                id=link_id,
                post_id=post_id,
                tag_id=tag_id,
                created_at=self._stamp(link_id),
            )
            self.post_tags[link_id] = record
            return record

    def post_ids_for_tag(self, tag_id: str) -> list[str]:
        with self._lock:
            return [
                link.post_id
                for link in self.post_tags.values()
                if link.tag_id == tag_id
            ]

    def tags_for_posts(self, post_ids: Iterable[str]) -> Dict[str, list[TagRecord]]:
        wanted = set(post_ids)
        result: Dict[str, list[TagRecord]] = {pid: [] for pid in wanted}
        with self._lock:
            for link in self.post_tags.values():
                if link.post_id in wanted and link.tag_id in self.tags:
                    result[link.post_id].append(self.tags[link.tag_id])
        return result


_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: sa_exc.IntegrityError) -> bool:
    """True for duplicate-key errors; foreign-key and NOT NULL failures are not."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == _UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


@contextlib.contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Map SQLAlchemy failures onto the newsdesk error taxonomy."""
    try:
        yield
    except sa_exc.IntegrityError as exc:
        logger.warning("Constraint violation during %s: %s", action, exc.orig)
        if _is_unique_violation(exc):
            raise ConflictError(f"Duplicate value during {action}", cause=exc) from exc
        raise BackendRejection(f"Constraint violation during {action}", cause=exc) from exc
    except (sa_exc.OperationalError, sa_exc.TimeoutError, sa_exc.InterfaceError) as exc:
        logger.error("Database unreachable during %s: %s", action, exc)
        raise TransportFailure(f"Database unavailable during {action}", cause=exc) from exc


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, *, timeout_seconds: float = 10.0):
        if not database_url:
            raise ValueError("database_url is required for PostgresDbClient")
        url = make_url(database_url)
        engine_kwargs: dict = {
            "future": True,
            "pool_pre_ping": True,
            "pool_recycle": 1800,
        }
        if url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": timeout_seconds,
            }
            if url.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_timeout"] = timeout_seconds
            engine_kwargs["connect_args"] = {"connect_timeout": int(timeout_seconds)}
        self.engine = create_engine(database_url, **engine_kwargs)
        if url.get_backend_name() == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        with _translate_errors("schema setup"):
            Base.metadata.create_all(self.engine)

    # Profiles and roles

    def ensure_profile(
        self, user_id: str, email: str, full_name: str = ""
    ) -> tuple[ProfileRecord, bool]:
        now = time.time()
        with _translate_errors("profile provisioning"), self.Session() as session:
            row = session.get(ProfileRow, user_id)
            if row:
                return _to_profile(row), False
            row = ProfileRow(
                id=user_id,
                email=email,
                full_name=full_name,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            return _to_profile(row), True

    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        with _translate_errors("profile lookup"), self.Session() as session:
            row = session.get(ProfileRow, user_id)
            return _to_profile(row) if row else None

    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, ProfileRecord]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        with _translate_errors("profile lookup"), self.Session() as session:
            rows = session.execute(
                select(ProfileRow).where(ProfileRow.id.in_(ids))
            ).scalars()
            return {row.id: _to_profile(row) for row in rows}

    def list_profiles(self) -> list[ProfileRecord]:
        with _translate_errors("profile listing"), self.Session() as session:
            rows = session.execute(
                select(ProfileRow).order_by(ProfileRow.created_at.desc())
            ).scalars()
            return [_to_profile(row) for row in rows]

    def get_roles(self, user_id: str) -> set[Role]:
        with _translate_errors("role lookup"), self.Session() as session:
            rows = session.execute(
                select(UserRoleRow.role).where(UserRoleRow.user_id == user_id)
            ).scalars()
            return {Role(role) for role in rows}

    def add_role(self, user_id: str, role: Role) -> None:
        role = Role(role)
        with _translate_errors("role assignment"), self.Session() as session:
            if session.get(ProfileRow, user_id) is None:
                raise RecordNotFound(f"Profile {user_id} does not exist")
            exists = session.execute(
                select(UserRoleRow.id).where(
                    UserRoleRow.user_id == user_id, UserRoleRow.role == role.value
                )
            ).first()
            if exists:
                return
            session.add(
                UserRoleRow(
                    id=uuid.uuid4().hex,
                    user_id=user_id,
                    role=role.value,
                    created_at=time.time(),
                )
            )
            session.commit()

    def remove_role(self, user_id: str, role: Role) -> None:
        with _translate_errors("role removal"), self.Session() as session:
            session.execute(
                delete(UserRoleRow).where(
                    UserRoleRow.user_id == user_id,
                    UserRoleRow.role == Role(role).value,
                )
            )
            session.commit()

    # Posts

    def insert_post(
        self,
        *,
        title: str,
        slug: str,
        content: str,
        author_id: str,
        excerpt: Optional[str] = None,
        featured_image: Optional[str] = None,
        published: bool = True,
    ) -> PostRecord:
        now = time.time()
        with _translate_errors("post insert"), self.Session() as session:
            row = PostRow(
                id=uuid.uuid4().hex,
                title=title,
                slug=slug,
                content=content,
                excerpt=excerpt,
                featured_image=featured_image,
                author_id=author_id,
                published=published,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            return _to_post(row)

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        with _translate_errors("post lookup"), self.Session() as session:
            row = session.get(PostRow, post_id)
            return _to_post(row) if row else None

    def get_post_by_slug(
        self, slug: str, *, published_only: bool = False
    ) -> Optional[PostRecord]:
        stmt = select(PostRow).where(PostRow.slug == slug)
        if published_only:
            stmt = stmt.where(PostRow.published.is_(True))
        with _translate_errors("post lookup"), self.Session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _to_post(row) if row else None

    def list_posts(self, *, published_only: bool = True) -> list[PostRecord]:
        stmt = select(PostRow).order_by(PostRow.created_at.desc())
        if published_only:
            stmt = stmt.where(PostRow.published.is_(True))
        with _translate_errors("post listing"), self.Session() as session:
            return [_to_post(row) for row in session.execute(stmt).scalars()]

    def list_posts_by_ids(
        self, post_ids: Iterable[str], *, published_only: bool = True
    ) -> list[PostRecord]:
        ids = list(set(post_ids))
        if not ids:
            return []
        stmt = (
            select(PostRow)
            .where(PostRow.id.in_(ids))
            .order_by(PostRow.created_at.desc())
        )
        if published_only:
            stmt = stmt.where(PostRow.published.is_(True))
        with _translate_errors("post listing"), self.Session() as session:
            return [_to_post(row) for row in session.execute(stmt).scalars()]

    def update_post(self, post_id: str, **changes) -> PostRecord:
        _check_post_changes(changes)
        with _translate_errors("post update"), self.Session() as session:
            row = session.get(PostRow, post_id)
            if not row:
                raise RecordNotFound(f"Post {post_id} does not exist")
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = time.time()
            session.commit()
            return _to_post(row)

    def delete_post(self, post_id: str) -> bool:
        with _translate_errors("post delete"), self.Session() as session:
            result = session.execute(delete(PostRow).where(PostRow.id == post_id))
            session.commit()
            return result.rowcount > 0

    # Tags and links

    def find_tag_by_slug(self, slug: str) -> Optional[TagRecord]:
        with _translate_errors("tag lookup"), self.Session() as session:
            row = session.execute(
                select(TagRow).where(TagRow.slug == slug)
            ).scalar_one_or_none()
            return _to_tag(row) if row else None

    def insert_tag(self, name: str, slug: str) -> TagRecord:
        with _translate_errors("tag insert"), self.Session() as session:
            row = TagRow(id=uuid.uuid4().hex, name=name, slug=slug, created_at=time.time())
            session.add(row)
            session.commit()
            return _to_tag(row)

    def list_tags(self) -> list[TagRecord]:
        with _translate_errors("tag listing"), self.Session() as session:
            rows = session.execute(select(TagRow).order_by(TagRow.name)).scalars()
            return [_to_tag(row) for row in rows]

    def delete_tag(self, tag_id: str) -> bool:
        with _translate_errors("tag delete"), self.Session() as session:
            result = session.execute(delete(TagRow).where(TagRow.id == tag_id))
            session.commit()
            return result.rowcount > 0

    def insert_post_tag(self, post_id: str, tag_id: str) -> PostTagRecord:
        with _translate_errors("post tag link"), self.Session() as session:
            row = PostTagRow(
                id=uuid.uuid4().hex,
                post_id=post_id,
                tag_id=tag_id,
                created_at=time.time(),
            )
            session.add(row)
            session.commit()
            return PostTagRecord(
                id=row.id,
                post_id=row.post_id,
                tag_id=row.tag_id,
                created_at=row.created_at,
            )

    def post_ids_for_tag(self, tag_id: str) -> list[str]:
        with _translate_errors("post tag lookup"), self.Session() as session:
            return list(
                session.execute(
                    select(PostTagRow.post_id).where(PostTagRow.tag_id == tag_id)
                ).scalars()
            )

    def tags_for_posts(self, post_ids: Iterable[str]) -> Dict[str, list[TagRecord]]:
        ids = list(set(post_ids))
        result: Dict[str, list[TagRecord]] = {pid: [] for pid in ids}
        if not ids:
            return result
        stmt = (
            select(PostTagRow.post_id, TagRow)
            .join(TagRow, TagRow.id == PostTagRow.tag_id)
            .where(PostTagRow.post_id.in_(ids))
            .order_by(PostTagRow.created_at)
        )
        with _translate_errors("post tag lookup"), self.Session() as session:
            for post_id, tag in session.execute(stmt):
                result[post_id].append(_to_tag(tag))
        return result


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _to_profile(row: "ProfileRow") -> ProfileRecord:
    return ProfileRecord(
        id=row.id,
        email=row.email,
        full_name=row.full_name or "",
        avatar_url=row.avatar_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_post(row: "PostRow") -> PostRecord:
    return PostRecord(
        id=row.id,
        title=row.title,
        slug=row.slug,
        content=row.content,
        author_id=row.author_id,
        excerpt=row.excerpt,
        featured_image=row.featured_image,
        published=row.published,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_tag(row: "TagRow") -> TagRecord:
    return TagRecord(id=row.id, name=row.name, slug=row.slug, created_at=row.created_at)


Base = declarative_base()


class ProfileRow(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class UserRoleRow(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role"),)

    id = Column(String, primary_key=True)
    user_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(String, nullable=False, default=Role.USER.value)
    created_at = Column(Float, nullable=False)


class PostRow(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    featured_image = Column(String, nullable=True)
    author_id = Column(
        String,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    published = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(Float, nullable=False, index=True)
    updated_at = Column(Float, nullable=False)


class TagRow(Base):
    __tablename__ = "tags"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    slug = Column(String, nullable=False, unique=True)
    created_at = Column(Float, nullable=False)


class PostTagRow(Base):
    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "tag_id"),)

    id = Column(String, primary_key=True)
    post_id = Column(
        String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    tag_id = Column(
        String, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(Float, nullable=False)
