from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from reinstall_hub.auth import CredentialStore, SecretStore
from reinstall_hub.config.settings import ENV_PREFIX, SettingsManager
from reinstall_hub.utils import LoggingOptions, configure_logging
from tests.stubs import StubKeyringBackend


os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session", autouse=True)
def _test_logging(tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep test runs out of the user's log directory and off the console."""

    log_path = tmp_path_factory.mktemp("logs") / "reinstall-hub-tests.log"
    configure_logging(LoggingOptions(level="DEBUG", console=False, log_path=log_path))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop REINSTALL_HUB_* variables so settings come only from test files."""

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def keyring_backend() -> StubKeyringBackend:
    return StubKeyringBackend(secure=True)


@pytest.fixture
def secret_store(keyring_backend: StubKeyringBackend) -> SecretStore:
    return SecretStore(service_name="pytest", backend=keyring_backend)


@pytest.fixture
def credential_store(secret_store: SecretStore) -> CredentialStore:
    return CredentialStore(secret_store)


@pytest.fixture
def settings_manager(tmp_path) -> SettingsManager:
    return SettingsManager(env_file=tmp_path / "settings.env")


@pytest.fixture(scope="session")
def qt_app() -> Iterator[object]:
    """Ensure a QApplication instance exists for UI tests."""

    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
