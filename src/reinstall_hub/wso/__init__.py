"""Workspace ONE UEM REST client utilities."""

from .client import (
    RequestTelemetryEvent,
    WorkspaceOneClient,
    WorkspaceOneClientConfig,
)
from .errors import (
    AuthenticationError,
    InvalidResponseError,
    PermissionError,
    WorkspaceOneAPIError,
    WorkspaceOneErrorCategory,
)
from .requests import (
    WorkspaceOneRequest,
    internal_app_install_request,
    tag_devices_request,
)

__all__ = [
    "AuthenticationError",
    "InvalidResponseError",
    "PermissionError",
    "RequestTelemetryEvent",
    "WorkspaceOneAPIError",
    "WorkspaceOneClient",
    "WorkspaceOneClientConfig",
    "WorkspaceOneErrorCategory",
    "WorkspaceOneRequest",
    "internal_app_install_request",
    "tag_devices_request",
]
