"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "description,"
    "parents,"
    "size"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

QUOTA_FIELDS: str = "storageQuota(limit,usage)"

ABOUT_FIELDS: str = f"user(displayName,emailAddress),{QUOTA_FIELDS}"

PERMISSION_FIELDS: str = "id,type,role,emailAddress,domain"
