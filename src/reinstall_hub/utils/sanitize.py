from __future__ import annotations

import re
from typing import Final, Mapping

_CONTROL_CHARS: Final[frozenset[str]] = frozenset(
    chr(code) for code in range(0x00, 0x20) if chr(code) not in {"\t", "\n"}
)

_SENSITIVE_HEADERS: Final[frozenset[str]] = frozenset(
    {"authorization", "aw-tenant-code", "proxy-authorization", "cookie"}
)

_WHITESPACE_RUN: Final[re.Pattern[str]] = re.compile(r"\s+")

REDACTED: Final[str] = "<redacted>"


def sanitize_log_message(value: str) -> str:
    """Normalise log messages by stripping control characters and CR sequences."""

    normalised = value.replace("\r\n", "\n").replace("\r", "\n")
    return "".join(ch for ch in normalised if ch not in _CONTROL_CHARS)


def sanitize_response_body(value: str, *, limit: int = 500) -> str:
    """Collapse a raw response body into a single bounded log line."""

    compact = _WHITESPACE_RUN.sub(" ", sanitize_log_message(value)).strip()
    if len(compact) <= limit:
        return compact
    return f"{compact[: limit - 3]}..."


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Return a copy of ``headers`` with credentials replaced by a marker."""

    if not headers:
        return {}
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _SENSITIVE_HEADERS:
            redacted[key] = REDACTED
        else:
            redacted[key] = str(value)
    return redacted


__all__ = [
    "REDACTED",
    "redact_headers",
    "sanitize_log_message",
    "sanitize_response_body",
]
