"""Exception hierarchy, HTTP error mapping and error classification for drivehelper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class DriveHelperError(Exception):
    """
    Base exception for drivehelper.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class LocalPreconditionError(DriveHelperError):
    """Raised when a local check fails before any request is sent."""


class LocalWriteError(DriveHelperError):
    """Raised when fetched content cannot be written to the local filesystem."""


class AuthError(DriveHelperError):
    """Raised when credentials are missing, invalid or rejected (HTTP 401)."""


class PermissionError(DriveHelperError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(DriveHelperError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(DriveHelperError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class ConflictError(DriveHelperError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class DuplicateFolderError(ConflictError):
    """Raised when more than one folder matches an app folder title."""


class RateLimitError(DriveHelperError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(DriveHelperError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(DriveHelperError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(DriveHelperError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class FolderResolutionTimeout(DriveHelperError):
    """Raised when a freshly created folder never shows up in listings."""


class ErrorKind(str, Enum):
    """Coarse failure category carried by Result."""

    LOCAL_PRECONDITION_FAILED = "local_precondition_failed"
    LOCAL_WRITE_FAILED = "local_write_failed"
    NETWORK_ERROR = "network_error"
    REMOTE_REJECTED = "remote_rejected"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to drivehelper exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveHelperError:
    """
    Map an HTTP error to a drivehelper exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionError, or QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)


def classify_error(exc: BaseException) -> ErrorKind:
    """Return the ErrorKind a failed Result reports for `exc`."""
    if isinstance(exc, LocalPreconditionError):
        return ErrorKind.LOCAL_PRECONDITION_FAILED
    if isinstance(exc, LocalWriteError):
        return ErrorKind.LOCAL_WRITE_FAILED
    if isinstance(exc, NetworkError):
        return ErrorKind.NETWORK_ERROR
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ConflictError):
        return ErrorKind.CONFLICT
    if isinstance(exc, FolderResolutionTimeout):
        return ErrorKind.TIMEOUT
    return ErrorKind.REMOTE_REJECTED
