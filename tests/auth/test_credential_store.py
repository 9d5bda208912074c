from __future__ import annotations

from pathlib import Path

import pytest

from reinstall_hub.auth import CredentialKey, CredentialStore, SecretStore, clear_storage
from reinstall_hub.config.settings import SettingsManager

from tests.factories import make_settings
from tests.stubs import StubKeyringBackend


def test_save_writes_each_secret_under_its_key(
    credential_store: CredentialStore,
    keyring_backend: StubKeyringBackend,
) -> None:
    credential_store.save("operator", "hunter2", "tenant-code")

    assert keyring_backend.keys("pytest") == {
        "WorkspaceOneAPIUsername",
        "WorkspaceOneAPIPassword",
        "WorkspaceOneAPIKey",
    }
    assert keyring_backend.get_password("pytest", CredentialKey.API_KEY) == "tenant-code"


def test_load_returns_credentials_when_complete(
    credential_store: CredentialStore,
) -> None:
    credential_store.save("operator", "hunter2", "tenant-code")

    credentials = credential_store.load()

    assert credentials is not None
    assert credentials.username == "operator"
    assert credentials.password == "hunter2"
    assert credentials.api_key == "tenant-code"
    assert credential_store.has_credentials() is True


def test_load_returns_none_when_any_secret_is_missing(
    credential_store: CredentialStore,
    secret_store: SecretStore,
) -> None:
    credential_store.save("operator", "hunter2", "tenant-code")
    secret_store.delete_secret(CredentialKey.API_PASSWORD)

    assert credential_store.load() is None
    assert credential_store.has_credentials() is False


def test_empty_store_has_no_credentials(credential_store: CredentialStore) -> None:
    assert credential_store.load() is None


def test_clear_removes_every_secret(
    credential_store: CredentialStore,
    keyring_backend: StubKeyringBackend,
) -> None:
    credential_store.save("operator", "hunter2", "tenant-code")

    credential_store.clear()

    assert keyring_backend.keys("pytest") == set()
    assert credential_store.load() is None


def test_clear_tolerates_partially_stored_credentials(
    credential_store: CredentialStore,
    secret_store: SecretStore,
) -> None:
    secret_store.set_secret(CredentialKey.API_USERNAME, "operator")

    credential_store.clear()

    assert secret_store.get_secret(CredentialKey.API_USERNAME) is None


def test_clear_storage_removes_settings_and_secrets(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())
    credential_store.save("operator", "hunter2", "tenant-code")

    clear_storage(settings_manager, credential_store)

    assert not settings_manager.env_file.exists()
    assert settings_manager.load().is_configured is False
    assert credential_store.has_credentials() is False


def test_clear_storage_without_saved_state_is_a_no_op(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    clear_storage(settings_manager, credential_store)
    assert not settings_manager.env_file.exists()


class _BrokenSettingsManager(SettingsManager):
    def clear(self) -> None:
        raise PermissionError("read-only volume")


def test_clear_storage_clears_secrets_even_if_settings_removal_fails(
    tmp_path: Path,
    credential_store: CredentialStore,
) -> None:
    manager = _BrokenSettingsManager(env_file=tmp_path / "settings.env")
    credential_store.save("operator", "hunter2", "tenant-code")

    with pytest.raises(PermissionError):
        clear_storage(manager, credential_store)

    assert credential_store.has_credentials() is False
