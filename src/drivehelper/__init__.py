"""drivehelper public API."""

from __future__ import annotations

import logging

from drivehelper.config import HelperConfig, RetryPolicy
from drivehelper.errors import (
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
from drivehelper.helper import (
    can_upload,
    create_directory,
    download_file,
    get_about,
    get_app_folder_id,
    list_files,
    print_about,
    share,
    update_file,
    upload_file,
)
from drivehelper.models import AboutInfo, FileResource, Permission, QuotaInfo, Result
from drivehelper.session import DriveSession

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Operations
    "download_file",
    "upload_file",
    "update_file",
    "create_directory",
    "list_files",
    "share",
    "get_app_folder_id",
    "get_about",
    "print_about",
    "can_upload",
    # Session / config
    "DriveSession",
    "HelperConfig",
    "RetryPolicy",
    # Models
    "FileResource",
    "Permission",
    "QuotaInfo",
    "AboutInfo",
    "Result",
    # Errors
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
