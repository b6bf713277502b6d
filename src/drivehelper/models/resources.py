"""Data models for Drive resources, permissions and quota."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from drivehelper.util.mime import has_downloadable_content, is_folder

MEDIA_URL_TEMPLATE: str = "https://www.googleapis.com/drive/v3/files/{file_id}?alt=media"


@dataclass(slots=True, frozen=True)
class FileResource:
    """
    Snapshot of a Drive file or folder as returned by the service.

    Notes:
        - file_id is always assigned by Drive; it is never generated locally.
        - download_url is None for folders and Google-native documents.
    """

    file_id: str
    title: str
    mime_type: str
    description: str = ""
    parents: frozenset[str] = field(default_factory=frozenset)
    download_url: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> FileResource:
        """Build a FileResource from a Drive v3 `files` resource dict."""
        file_id = data.get("id")
        if not isinstance(file_id, str) or not file_id:
            raise ValueError("Drive response carries no file id")

        mime_type = data.get("mimeType", "")
        if not isinstance(mime_type, str):
            mime_type = ""

        name = data.get("name", "")
        description = data.get("description", "")
        parents = data.get("parents", []) or []

        size = None
        if isinstance(data.get("size"), str) and data["size"].isdigit():
            size = int(data["size"])
        elif isinstance(data.get("size"), int):
            size = data["size"]

        download_url = None
        if has_downloadable_content(mime_type):
            download_url = MEDIA_URL_TEMPLATE.format(file_id=file_id)

        return cls(
            file_id=file_id,
            title=name if isinstance(name, str) else "",
            mime_type=mime_type,
            description=description if isinstance(description, str) else "",
            parents=frozenset(p for p in parents if isinstance(p, str)),
            download_url=download_url,
            size=size,
        )


@dataclass(slots=True, frozen=True)
class Permission:
    """A (principal value, principal type, role) grant on a Drive item."""

    value: str
    type: str
    role: str

    def to_body(self) -> dict[str, str]:
        body = {"type": self.type, "role": self.role}
        if self.type in ("user", "group") and self.value:
            body["emailAddress"] = self.value
        elif self.type == "domain" and self.value:
            body["domain"] = self.value
        return body


@dataclass(slots=True, frozen=True)
class QuotaInfo:
    """Storage quota snapshot. total=None means the account has no limit."""

    total: Optional[int]
    used: int

    @property
    def free(self) -> Optional[int]:
        if self.total is None:
            return None
        return self.total - self.used

    @property
    def unlimited(self) -> bool:
        return self.total is None


@dataclass(slots=True, frozen=True)
class AboutInfo:
    user_name: str
    user_email: str
    root_folder_id: str
    quota: QuotaInfo
