from __future__ import annotations

import mimetypes
import os

FOLDER_MIME: str = "application/vnd.google-apps.folder"
DEFAULT_MIME: str = "application/unknown"


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_google_app(mime_type: str) -> bool:
    """Returns True if the MIME type is a Google 'apps' type (documents, sheets, ...)."""
    return mime_type.startswith("application/vnd.google-apps.")


def has_downloadable_content(mime_type: str) -> bool:
    """Folders and Google-native documents carry no media to fetch."""
    return not (is_folder(mime_type) or is_google_app(mime_type))


def guess_mime_type(path: str, default: str = DEFAULT_MIME) -> str:
    """
    Guess a content type from the file extension of `path`.

    The extension is lowercased first, so 'REPORT.PDF' resolves like 'report.pdf'.
    """
    _, ext = os.path.splitext(path)
    mime_type, _ = mimetypes.guess_type("file" + ext.lower())
    return mime_type or default
