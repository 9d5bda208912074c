from __future__ import annotations

import base64

from reinstall_hub.auth import ApiCredentials


def test_basic_authorization_encodes_username_and_password() -> None:
    credentials = ApiCredentials("operator", "hunter2", "tenant-code")

    header = credentials.basic_authorization()

    assert header.startswith("Basic ")
    assert base64.b64decode(header.removeprefix("Basic ")) == b"operator:hunter2"


def test_basic_authorization_uses_utf8() -> None:
    credentials = ApiCredentials("opérateur", "pässword", "tenant-code")

    encoded = credentials.basic_authorization().removeprefix("Basic ")

    assert base64.b64decode(encoded).decode("utf-8") == "opérateur:pässword"


def test_repr_never_contains_secrets() -> None:
    credentials = ApiCredentials("operator", "hunter2", "tenant-code")

    rendered = repr(credentials)

    assert "operator" in rendered
    assert "hunter2" not in rendered
    assert "tenant-code" not in rendered
    assert rendered == credentials.redacted()
