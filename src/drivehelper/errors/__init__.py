"""Public error exports for drivehelper."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    DriveHelperError,
    DuplicateFolderError,
    ErrorKind,
    FolderResolutionTimeout,
    HttpErrorInfo,
    InvalidArgumentError,
    LocalPreconditionError,
    LocalWriteError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    classify_error,
    map_http_error,
)

__all__ = [
    "DriveHelperError",
    "LocalPreconditionError",
    "LocalWriteError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "DuplicateFolderError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "FolderResolutionTimeout",
    "ErrorKind",
    "HttpErrorInfo",
    "classify_error",
    "map_http_error",
]
