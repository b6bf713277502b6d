"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import io
import json
import logging
import time
from typing import Any, Callable, Iterator, Optional, TypeVar

from drivehelper.config import HelperConfig
from drivehelper.errors import (
    ApiError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from drivehelper.models import AboutInfo, FileResource, Permission, QuotaInfo
from drivehelper.session import DriveSession
from drivehelper.util.mime import FOLDER_MIME

from .fields import (
    ABOUT_FIELDS,
    FILE_FIELDS,
    LIST_FIELDS,
    PERMISSION_FIELDS,
    QUOTA_FIELDS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GoogleDriveController:
    """
    Drive API controller (internal only).

    Every method issues one logical request and raises drivehelper errors on
    failure; converting those into Results is the helper layer's job.
    """

    def __init__(self, session: DriveSession, config: Optional[HelperConfig] = None) -> None:
        self._session = session
        self._config = config or HelperConfig()
        self._service = session.service

    # ----------------------------
    # Public API
    # ----------------------------
    def get_about(self) -> AboutInfo:
        req = self._service.about().get(fields=ABOUT_FIELDS)
        data = self._execute(req.execute)
        user = data.get("user", {}) or {}
        return AboutInfo(
            user_name=user.get("displayName", "") or "",
            user_email=user.get("emailAddress", "") or "",
            root_folder_id=self.get_root_folder_id(),
            quota=_quota_from_about(data),
        )

    def get_quota(self) -> QuotaInfo:
        req = self._service.about().get(fields=QUOTA_FIELDS)
        data = self._execute(req.execute)
        return _quota_from_about(data)

    def get_root_folder_id(self) -> str:
        req = self._service.files().get(
            fileId="root",
            fields="id",
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return str(data.get("id", ""))

    def iter_file_pages(self, query: Optional[str] = None) -> Iterator[list[FileResource]]:
        """
        Yield one list of FileResource per page, in server order.

        Iteration stops after the first page without a continuation token.
        A failure on any page raises from the generator; earlier pages have
        already been yielded.
        """
        page_token: Optional[str] = None
        page_number = 0

        while True:
            kwargs: dict[str, Any] = {
                "pageSize": self._config.page_size,
                "fields": LIST_FIELDS,
                **self._common_list_kwargs(),
            }
            if query is not None:
                kwargs["q"] = query
            if page_token:
                kwargs["pageToken"] = page_token

            req = self._service.files().list(**kwargs)
            data = self._execute(req.execute)
            page_number += 1

            files = [_to_resource(f) for f in data.get("files", []) or []]
            logger.debug(f"Fetched page {page_number} with {len(files)} item(s)")
            yield files

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def insert_file(
        self,
        content: bytes,
        *,
        name: str,
        description: str,
        mime_type: str,
        parent_id: str,
    ) -> FileResource:
        body = {
            "name": name,
            "description": description,
            "mimeType": mime_type,
            "parents": [parent_id],
        }
        req = self._service.files().create(
            body=body,
            media_body=_media(content, mime_type),
            fields=FILE_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _to_resource(data)

    def update_file(
        self,
        file_id: str,
        content: bytes,
        *,
        name: str,
        description: str,
        mime_type: str,
        parent_id: str,
    ) -> FileResource:
        """
        Replace content and metadata of file_id.

        Note:
            Drive v3 does not accept `parents` in an update body, so the parent
            list is replaced with addParents/removeParents.
        """
        current = self._service.files().get(
            fileId=file_id,
            fields="parents",
            **self._common_get_kwargs(),
        )
        current_data = self._execute(current.execute)
        old_parents = [p for p in current_data.get("parents", []) or [] if p != parent_id]

        body = {"name": name, "description": description, "mimeType": mime_type}
        req = self._service.files().update(
            fileId=file_id,
            body=body,
            media_body=_media(content, mime_type),
            addParents=parent_id,
            removeParents=",".join(old_parents) or None,
            fields=FILE_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _to_resource(data)

    def create_folder(self, title: str, description: str, parent_id: str) -> FileResource:
        body = {
            "name": title,
            "description": description,
            "mimeType": FOLDER_MIME,
            "parents": [parent_id],
        }
        req = self._service.files().create(
            body=body,
            fields=FILE_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _to_resource(data)

    def insert_permission(self, file_id: str, permission: Permission) -> Permission:
        req = self._service.permissions().create(
            fileId=file_id,
            body=permission.to_body(),
            fields=PERMISSION_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        value = data.get("emailAddress") or data.get("domain") or permission.value
        return Permission(
            value=value,
            type=data.get("type", permission.type),
            role=data.get("role", permission.role),
        )

    def fetch_bytes(self, url: str) -> bytes:
        """GET `url` through the session's authorized HTTP client."""

        def _get() -> bytes:
            resp = self._session.http.get(url, timeout=self._config.download_timeout)
            resp.raise_for_status()
            return resp.content

        return self._execute(_get)

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._config.supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._config.supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._config.supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _execute(self, func: Callable[[], T]) -> T:
        delays = self._config.request_retry.delays()
        while True:
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                delay = next(delays, None) if self._should_retry(mapped) else None
                if delay is None:
                    raise mapped from exc
                logger.debug(f"Retrying after {delay:.1f}s: {mapped}")
                time.sleep(delay)

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        import requests
        from googleapiclient.errors import HttpError

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, requests.HTTPError) and exc.response is not None:
            info = HttpErrorInfo(
                status_code=exc.response.status_code,
                reason=exc.response.reason,
                message=str(exc),
            )
            return map_http_error(info, cause=exc)

        if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
            return NetworkError("Network error", cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _media(content: bytes, mime_type: str):
    from googleapiclient.http import MediaIoBaseUpload

    return MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)


def _to_resource(data: Any) -> FileResource:
    if not isinstance(data, dict):
        raise ApiError("Unexpected Drive response", details={"response": repr(data)})
    try:
        return FileResource.from_api(data)
    except ValueError as exc:
        raise ApiError("Malformed Drive file resource", cause=exc) from exc


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _quota_from_about(data: dict[str, Any]) -> QuotaInfo:
    quota = data.get("storageQuota", {}) or {}
    return QuotaInfo(
        total=_to_int(quota.get("limit")),
        used=_to_int(quota.get("usage")) or 0,
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
