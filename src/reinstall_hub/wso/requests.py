from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import quote


HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


@dataclass(slots=True)
class WorkspaceOneRequest:
    """Structured representation of a Workspace ONE REST request."""

    method: HttpMethod
    path: str
    body: Any | None = None
    params: dict[str, Any] | None = None
    headers: dict[str, str] | None = None


def _segment(value: str | int) -> str:
    text = str(value).strip()
    if not text:
        raise ValueError("Path segment cannot be empty")
    return quote(text, safe="")


def tag_devices_request(tag_id: str | int) -> WorkspaceOneRequest:
    """List the devices carrying a given tag."""

    return WorkspaceOneRequest(
        method="GET",
        path=f"/api/mdm/tags/{_segment(tag_id)}/devices",
    )


def internal_app_install_request(
    app_id: str | int,
    device_id: int,
) -> WorkspaceOneRequest:
    """Queue an install of an internal app on one device."""

    return WorkspaceOneRequest(
        method="POST",
        path=f"/api/mam/apps/internal/{_segment(app_id)}/install",
        body={"DeviceId": str(device_id)},
    )


__all__ = [
    "HttpMethod",
    "WorkspaceOneRequest",
    "internal_app_install_request",
    "tag_devices_request",
]
