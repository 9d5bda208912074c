"""Authentication type definitions."""

from __future__ import annotations

import base64
from typing import NamedTuple


class ApiCredentials(NamedTuple):
    """Operator credentials for the Workspace ONE REST API."""

    username: str
    """API account user name used for HTTP basic authentication."""

    password: str
    """API account password used for HTTP basic authentication."""

    api_key: str
    """Tenant API key, sent as the ``aw-tenant-code`` header."""

    def basic_authorization(self) -> str:
        token = f"{self.username}:{self.password}".encode("utf-8")
        return f"Basic {base64.b64encode(token).decode('ascii')}"

    def redacted(self) -> str:
        return f"ApiCredentials(username={self.username!r}, password=***, api_key=***)"

    def __repr__(self) -> str:
        return self.redacted()


__all__ = ["ApiCredentials"]
