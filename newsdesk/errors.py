"""
Error taxonomy shared by the backends, the publishing workflow and the API.

Validation failures are raised before any backend call. Backend rejections
wrap the underlying cause (constraint violation, policy denial, missing row).
Transport failures are retryable at the caller's discretion; nothing in this
package retries them.
"""

from __future__ import annotations

from typing import Optional


class NewsdeskError(Exception):
    """Base class for every error surfaced by newsdesk."""

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationFailure(NewsdeskError):
    status_code = 422


class AuthenticationRequired(NewsdeskError):
    status_code = 401


class BackendRejection(NewsdeskError):
    status_code = 400


class ConflictError(BackendRejection):
    """A unique constraint rejected the write."""

    status_code = 409


class PermissionDenied(BackendRejection):
    status_code = 403


class RecordNotFound(BackendRejection):
    """A mutation targeted a row that does not exist.

    Read paths never raise this; they return ``None`` instead.
    """

    status_code = 404


class TransportFailure(NewsdeskError):
    """Network or timeout failure talking to a backend."""

    status_code = 503
    retryable = True
