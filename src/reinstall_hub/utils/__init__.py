"""Shared utility helpers for ReinstallHub."""

from .logging import LoggingOptions, configure_logging, get_logger
from .sanitize import (
    redact_headers,
    sanitize_log_message,
    sanitize_response_body,
)

__all__ = [
    "LoggingOptions",
    "configure_logging",
    "get_logger",
    "redact_headers",
    "sanitize_log_message",
    "sanitize_response_body",
]
