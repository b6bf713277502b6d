"""Authenticated handle passed to every drivehelper operation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Sequence

from drivehelper.errors import AuthError, LocalPreconditionError

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


@dataclass(frozen=True)
class DriveSession:
    """
    Opaque authenticated handle.

    Attributes:
        service: Drive v3 discovery resource (googleapiclient).
        http: Authorized `requests` session used to fetch download URLs.

    The caller owns the session; drivehelper never refreshes or closes it.
    """

    service: Any
    http: Any

    @classmethod
    def from_credentials(cls, credentials: Any) -> DriveSession:
        """Build a session from google-auth credentials."""
        from google.auth.transport.requests import AuthorizedSession
        from googleapiclient.discovery import build

        try:
            service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc
        return cls(service=service, http=AuthorizedSession(credentials))

    @classmethod
    def from_authorized_user_file(
        cls,
        token_file: str,
        scopes: Sequence[str] = DEFAULT_SCOPES,
    ) -> DriveSession:
        """
        Build a session from an authorized-user token JSON.

        Expired credentials are refreshed when a refresh token is present. The
        interactive consent flow that produces the token file is not handled here.
        """
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not os.path.exists(token_file):
            raise LocalPreconditionError(
                "token_file does not exist",
                details={"token_file": token_file},
            )

        try:
            creds = Credentials.from_authorized_user_file(token_file, scopes=list(scopes))
        except Exception as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

        if not creds.valid and creds.refresh_token:
            try:
                creds.refresh(Request())
            except Exception as exc:
                raise AuthError(
                    "Failed to refresh OAuth credentials",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

        return cls.from_credentials(creds)
