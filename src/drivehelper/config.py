"""Configuration for drivehelper operations."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from itertools import islice
from typing import Iterator, Mapping, Optional

from drivehelper.errors import InvalidArgumentError
from drivehelper.util.mime import DEFAULT_MIME

logger = logging.getLogger(__name__)

ENV_PREFIX = "DRIVEHELPER_"

# Drive v3 rejects pageSize above 1000.
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff schedule.

    max_attempts counts every attempt, so max_attempts=1 means no retry.
    """

    max_attempts: int = 1
    initial_delay_sec: float = 1.0
    multiplier: float = 2.0
    max_delay_sec: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise InvalidArgumentError("max_attempts must be >= 1")
        if self.initial_delay_sec < 0 or self.max_delay_sec < 0:
            raise InvalidArgumentError("delays must be non-negative")
        if self.multiplier < 1:
            raise InvalidArgumentError("multiplier must be >= 1")

    def schedule(self) -> Iterator[float]:
        """Yield max_attempts capped, exponentially growing delays."""
        delay = self.initial_delay_sec
        for _ in range(self.max_attempts):
            yield min(delay, self.max_delay_sec)
            delay *= self.multiplier

    def delays(self) -> Iterator[float]:
        """Yield the sleep before each retry (max_attempts - 1 values)."""
        return islice(self.schedule(), self.max_attempts - 1)


@dataclass(frozen=True)
class HelperConfig:
    """
    Settings shared by every helper operation.

    Fields:
        page_size: items per files.list page (1..1000).
        upload_description / update_description: description written on upload / update.
        default_mime_type: content type used when the extension is unknown.
        download_timeout: seconds allowed for a content GET (None waits forever).
        supports_all_drives: send the shared-drive flags with each request.
        share_app_folder: grant anyone/reader on the resolved app folder.
        request_retry: retry policy for transient request failures.
        folder_poll: backoff while waiting for a new app folder to be listed.
    """

    page_size: int = MAX_PAGE_SIZE
    upload_description: str = "File uploaded by drivehelper"
    update_description: str = "File updated by drivehelper"
    default_mime_type: str = DEFAULT_MIME
    download_timeout: Optional[float] = 60.0
    supports_all_drives: bool = True
    share_app_folder: bool = True
    request_retry: RetryPolicy = field(default_factory=RetryPolicy)
    folder_poll: RetryPolicy = field(default_factory=lambda: _default_folder_poll())

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}",
                details={"page_size": self.page_size},
            )
        if self.download_timeout is not None and self.download_timeout <= 0:
            raise InvalidArgumentError("download_timeout must be positive")

    def with_overrides(self, **changes) -> HelperConfig:
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> HelperConfig:
        """
        Build a config from DRIVEHELPER_* environment variables.

        Recognised variables:
            DRIVEHELPER_PAGE_SIZE, DRIVEHELPER_UPLOAD_DESCRIPTION,
            DRIVEHELPER_UPDATE_DESCRIPTION, DRIVEHELPER_DEFAULT_MIME_TYPE,
            DRIVEHELPER_DOWNLOAD_TIMEOUT, DRIVEHELPER_SUPPORTS_ALL_DRIVES,
            DRIVEHELPER_SHARE_APP_FOLDER, DRIVEHELPER_REQUEST_RETRIES,
            DRIVEHELPER_FOLDER_POLL_ATTEMPTS, DRIVEHELPER_FOLDER_POLL_DELAY
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name, "").strip()
            return value or None

        for name, key in _STRING_VARS:
            value = get(name)
            if value is not None:
                kwargs[key] = value

        value = get("PAGE_SIZE")
        if value is not None:
            kwargs["page_size"] = _parse_int("PAGE_SIZE", value)

        value = get("DOWNLOAD_TIMEOUT")
        if value is not None:
            kwargs["download_timeout"] = _parse_float("DOWNLOAD_TIMEOUT", value)

        for name, key in _BOOL_VARS:
            value = get(name)
            if value is not None:
                kwargs[key] = _parse_bool(name, value)

        value = get("REQUEST_RETRIES")
        if value is not None:
            kwargs["request_retry"] = RetryPolicy(
                max_attempts=_parse_int("REQUEST_RETRIES", value) + 1
            )

        poll = _default_folder_poll()
        value = get("FOLDER_POLL_ATTEMPTS")
        if value is not None:
            poll = replace(poll, max_attempts=_parse_int("FOLDER_POLL_ATTEMPTS", value))
        value = get("FOLDER_POLL_DELAY")
        if value is not None:
            poll = replace(poll, initial_delay_sec=_parse_float("FOLDER_POLL_DELAY", value))
        kwargs["folder_poll"] = poll

        config = cls(**kwargs)
        logger.debug(f"Loaded drivehelper config from environment: {config}")
        return config


_STRING_VARS: tuple[tuple[str, str], ...] = (
    ("UPLOAD_DESCRIPTION", "upload_description"),
    ("UPDATE_DESCRIPTION", "update_description"),
    ("DEFAULT_MIME_TYPE", "default_mime_type"),
)

_BOOL_VARS: tuple[tuple[str, str], ...] = (
    ("SUPPORTS_ALL_DRIVES", "supports_all_drives"),
    ("SHARE_APP_FOLDER", "share_app_folder"),
)


def _default_folder_poll() -> RetryPolicy:
    # 0.5 + 1 + 2 + 4 + 8 seconds between six listings.
    return RetryPolicy(max_attempts=6, initial_delay_sec=0.5)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{ENV_PREFIX}{name} must be an integer",
            details={"value": value},
            cause=exc,
        ) from exc


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{ENV_PREFIX}{name} must be a number",
            details={"value": value},
            cause=exc,
        ) from exc


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise InvalidArgumentError(
        f"{ENV_PREFIX}{name} must be a boolean",
        details={"value": value},
    )
