"""
Storage abstraction for S3-compatible object stores and in-memory testing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore import exceptions as botocore_exceptions
from botocore.config import Config

from newsdesk.errors import BackendRejection, ConflictError, TransportFailure

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """Defines the operations the service needs from object storage."""

    def upload_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage/v1/object/public/post-images"
    stored_objects: dict = field(default_factory=dict)
    content_types: dict = field(default_factory=dict)

    def upload_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> None:
        if path in self.stored_objects:
            raise ConflictError(f"Object {path} already exists")
        self.stored_objects[path] = bytes(data)
        self.content_types[path] = content_type

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"


_TRANSPORT_ERRORS = (
    botocore_exceptions.EndpointConnectionError,
    botocore_exceptions.ConnectTimeoutError,
    botocore_exceptions.ReadTimeoutError,
    botocore_exceptions.ConnectionClosedError,
)


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client for the public featured-image bucket.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_base_url: Optional[str] = None
    timeout_seconds: float = 10.0

    def __post_init__(self):
        config = Config(
            signature_version="s3v4",
            connect_timeout=self.timeout_seconds,
            read_timeout=self.timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def upload_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except _TRANSPORT_ERRORS as exc:
            logger.error("Upload of %s failed in transport: %s", path, exc)
            raise TransportFailure(f"Storage unavailable uploading {path}", cause=exc) from exc
        except botocore_exceptions.ClientError as exc:
            logger.error("Upload of %s rejected: %s", path, exc)
            raise BackendRejection(f"Storage rejected upload of {path}", cause=exc) from exc

    def public_url(self, path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{path}"
        base = (self.endpoint or f"https://s3.{self.region}.amazonaws.com").rstrip("/")
        return f"{base}/{self.bucket}/{path}"
