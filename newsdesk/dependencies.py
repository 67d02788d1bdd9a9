"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header

from newsdesk.auth import TokenVerifier, provision_identity
from newsdesk.config import get_settings
from newsdesk.db import DbClient, InMemoryDbClient, PostgresDbClient
from newsdesk.errors import AuthenticationRequired
from newsdesk.identity import Identity
from newsdesk.moderation import Moderator
from newsdesk.publishing import PostCreator, TagConflictPolicy
from newsdesk.reads import PostReader
from newsdesk.storage import InMemoryStorageClient, S3StorageClient, StorageClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None
_token_verifier: TokenVerifier | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(
            settings.database_url, timeout_seconds=settings.request_timeout_seconds
        )
    logger.info("DB client: %s", _db_client.__class__.__name__)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.storage_endpoint:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region or "",
            endpoint=settings.storage_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.storage_public_base_url,
            timeout_seconds=settings.request_timeout_seconds,
        )
    logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client


def get_token_verifier() -> TokenVerifier:
    global _token_verifier
    if _token_verifier:
        return _token_verifier

    settings = get_settings()
    secret = settings.auth_jwt_secret
    if not secret:
        logger.warning("No auth secret configured; using an ephemeral development secret")
        secret = secrets.token_urlsafe(32)
    _token_verifier = TokenVerifier(secret, audience=settings.auth_jwt_audience)
    return _token_verifier


def reset_clients() -> None:
    """Drop the cached singletons (tests swap settings between cases)."""
    global _db_client, _storage_client, _token_verifier
    _db_client = None
    _storage_client = None
    _token_verifier = None


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    db: DbClient = Depends(get_db_client),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Identity]:
    """The caller's identity, or ``None`` for anonymous readers."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationRequired("Authorization header must be a bearer token")
    claims = verifier.verify(token.strip())
    return provision_identity(db, claims, get_settings().admin_emails)


def require_current_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    if identity is None:
        raise AuthenticationRequired("Sign in required")
    return identity


def get_post_reader(db: DbClient = Depends(get_db_client)) -> PostReader:
    return PostReader(db)


def get_post_creator(
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
) -> PostCreator:
    settings = get_settings()
    return PostCreator(
        db,
        storage,
        tag_policy=TagConflictPolicy(settings.tag_conflict_policy),
        tag_attempts=settings.tag_conflict_retries,
        excerpt_length=settings.excerpt_length,
    )


def get_moderator(db: DbClient = Depends(get_db_client)) -> Moderator:
    return Moderator(db, timeout_seconds=get_settings().request_timeout_seconds)
