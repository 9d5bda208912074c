from __future__ import annotations

import socket
from dataclasses import dataclass
from enum import Enum

import httpx
from keyring.errors import KeyringError

from reinstall_hub.config.settings import ConfigurationMissingError
from reinstall_hub.wso.errors import WorkspaceOneAPIError, WorkspaceOneErrorCategory


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ErrorDescriptor:
    headline: str
    detail: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    transient: bool = False
    suggestion: str | None = None

    def as_text(self) -> str:
        parts = [self.headline, self.detail]
        if self.suggestion:
            parts.append(self.suggestion)
        return " ".join(part for part in parts if part)


def describe_exception(error: Exception) -> ErrorDescriptor:
    descriptor = ErrorDescriptor(
        headline="Operation failed.",
        detail=f"{type(error).__name__}: {error}",
        severity=ErrorSeverity.ERROR,
        transient=False,
    )

    api_error = _locate_api_error(error)
    if api_error is not None:
        descriptor.detail = _format_api_detail(api_error)
        descriptor.suggestion = api_error.recovery_suggestion
        descriptor.transient = api_error.is_transient
        if api_error.is_transient:
            descriptor.severity = ErrorSeverity.WARNING
        descriptor.headline = _api_headline(api_error)
        return descriptor

    if isinstance(error, ConfigurationMissingError):
        descriptor.headline = "ReinstallHub is not configured."
        descriptor.detail = str(error)
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.suggestion = (
            "Enter the tenant URL, app ID, tag ID and API credentials first."
        )
        return descriptor

    if isinstance(error, KeyringError):
        descriptor.headline = "The system keyring could not be used."
        descriptor.suggestion = "Unlock the keychain or check the keyring backend."
        return descriptor

    if isinstance(error, httpx.TimeoutException):
        descriptor.headline = "Timed out contacting Workspace ONE."
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Check your network connection and retry shortly."
        return descriptor

    if isinstance(error, socket.gaierror):
        descriptor.headline = "DNS lookup failed while contacting Workspace ONE."
        descriptor.detail = f"socket.gaierror: {error}"
        descriptor.severity = ErrorSeverity.WARNING
        descriptor.transient = True
        descriptor.suggestion = "Verify the tenant URL and your DNS configuration."
        return descriptor

    return descriptor


def _locate_api_error(error: Exception) -> WorkspaceOneAPIError | None:
    current: BaseException | None = error
    visited: set[int] = set()
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        if isinstance(current, WorkspaceOneAPIError):
            return current
        current = current.__cause__ or current.__context__
    return None


def _api_headline(error: WorkspaceOneAPIError) -> str:
    match error.category:
        case WorkspaceOneErrorCategory.NETWORK:
            return "Network issue contacting Workspace ONE."
        case WorkspaceOneErrorCategory.AUTHENTICATION:
            return "Workspace ONE rejected the API credentials."
        case WorkspaceOneErrorCategory.PERMISSION:
            return "The API account is not allowed to perform this request."
        case WorkspaceOneErrorCategory.NOT_FOUND:
            return "Workspace ONE could not find the requested resource."
        case WorkspaceOneErrorCategory.VALIDATION:
            return "Workspace ONE rejected the request."
        case WorkspaceOneErrorCategory.INVALID_RESPONSE:
            return "Workspace ONE returned an unexpected response."
        case _:
            return "Workspace ONE request failed."


def _format_api_detail(error: WorkspaceOneAPIError) -> str:
    prefix = ""
    if error.status_code:
        prefix = f"HTTP {error.status_code}"
        if error.error_code is not None:
            prefix += f" (error {error.error_code})"
        prefix += ": "
    return f"{prefix}{error}"


__all__ = [
    "ErrorDescriptor",
    "ErrorSeverity",
    "describe_exception",
]
