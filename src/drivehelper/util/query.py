"""Helpers for building Drive `q` filter expressions."""

from __future__ import annotations

from .mime import FOLDER_MIME


def escape_query_value(value: str) -> str:
    """Escape a literal for use inside single quotes in a Drive query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_title_query(title: str, *, folders_only: bool = False) -> str:
    q = f"name = '{escape_query_value(title)}'"
    if folders_only:
        q = f"{q} and mimeType = '{FOLDER_MIME}'"
    return f"{q} and trashed = false"
