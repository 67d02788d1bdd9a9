"""
Configuration and settings for the newsdesk service.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEWSDESK_",
        extra="ignore",
    )

    api_prefix: str = Field(default="/api")
    site_name: str = Field(default="Daily Belfast News")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible object storage for featured images
    storage_bucket: str = Field(default="post-images")
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_public_base_url: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Auth provider (HS256 access tokens)
    auth_jwt_secret: Optional[str] = Field(default=None)
    auth_jwt_audience: str = Field(default="authenticated")
    admin_emails: list[str] = Field(default_factory=list)

    # Publishing
    tag_conflict_policy: Literal["retry", "fail_fast"] = Field(default="retry")
    tag_conflict_retries: int = Field(default=3, ge=1)
    excerpt_length: int = Field(default=200, ge=1)

    # Applied to every backend round trip
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
