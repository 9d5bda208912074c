from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WorkspaceOneErrorCategory(str, Enum):
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    NETWORK = "network"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


@dataclass(slots=True, eq=False)
class WorkspaceOneAPIError(Exception):
    message: str
    category: WorkspaceOneErrorCategory = WorkspaceOneErrorCategory.UNKNOWN
    status_code: int | None = None
    error_code: int | None = None
    activity_id: str | None = None
    inner_error: Exception | None = None
    request_method: str | None = None
    request_url: str | None = None
    cli_example: str | None = None

    def __str__(self) -> str:
        return self.message

    @property
    def recovery_suggestion(self) -> str | None:
        if self.category is WorkspaceOneErrorCategory.AUTHENTICATION:
            return "Check the API username and password, then save the configuration again."
        if self.category is WorkspaceOneErrorCategory.PERMISSION:
            return "Verify the API key (aw-tenant-code) and the admin role of the API account."
        if self.category is WorkspaceOneErrorCategory.NOT_FOUND:
            return "Verify the tenant URL, tag ID and Hub app ID in the configuration."
        if self.category is WorkspaceOneErrorCategory.VALIDATION:
            return "Workspace ONE rejected the request. Review the configured IDs."
        if self.category is WorkspaceOneErrorCategory.NETWORK:
            return "Check your network connection and the tenant URL, then try again."
        if self.category is WorkspaceOneErrorCategory.INVALID_RESPONSE:
            return "The tenant URL may not point at a Workspace ONE API server."
        return None

    @property
    def is_transient(self) -> bool:
        if self.category is WorkspaceOneErrorCategory.NETWORK:
            return True
        if self.status_code and 500 <= self.status_code <= 599:
            return True
        return False


class AuthenticationError(WorkspaceOneAPIError):
    def __init__(self, message: str = "Authentication failed", **kwargs: object) -> None:
        super().__init__(
            message=message,
            category=WorkspaceOneErrorCategory.AUTHENTICATION,
            status_code=401,
            **kwargs,  # type: ignore[arg-type]
        )


class PermissionError(WorkspaceOneAPIError):
    def __init__(self, message: str = "Insufficient permissions", **kwargs: object) -> None:
        super().__init__(
            message=message,
            category=WorkspaceOneErrorCategory.PERMISSION,
            status_code=403,
            **kwargs,  # type: ignore[arg-type]
        )


class InvalidResponseError(WorkspaceOneAPIError):
    def __init__(self, message: str = "Unexpected response payload", **kwargs: object) -> None:
        super().__init__(
            message=message,
            category=WorkspaceOneErrorCategory.INVALID_RESPONSE,
            **kwargs,  # type: ignore[arg-type]
        )


__all__ = [
    "AuthenticationError",
    "InvalidResponseError",
    "PermissionError",
    "WorkspaceOneAPIError",
    "WorkspaceOneErrorCategory",
]
