from .mime import (
    DEFAULT_MIME,
    FOLDER_MIME,
    guess_mime_type,
    has_downloadable_content,
    is_folder,
    is_google_app,
)
from .query import build_title_query, escape_query_value

__all__ = [
    "DEFAULT_MIME",
    "FOLDER_MIME",
    "is_folder",
    "is_google_app",
    "has_downloadable_content",
    "guess_mime_type",
    "escape_query_value",
    "build_title_query",
]
