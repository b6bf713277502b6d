"""Public model exports for drivehelper."""

from __future__ import annotations

from .resources import AboutInfo, FileResource, Permission, QuotaInfo
from .results import Result

__all__ = [
    "FileResource",
    "Permission",
    "QuotaInfo",
    "AboutInfo",
    "Result",
]
