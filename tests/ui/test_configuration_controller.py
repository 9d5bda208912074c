from __future__ import annotations

from reinstall_hub.auth import ApiCredentials, CredentialStore, SecretStore
from reinstall_hub.config.settings import Settings, SettingsManager
from reinstall_hub.ui.configuration.controller import (
    ConfigurationController,
    ConfigurationSnapshot,
)

from tests.factories import make_credentials, make_settings
from tests.stubs import LockedKeyringBackend


def _controller(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> ConfigurationController:
    return ConfigurationController(settings_manager, credential_store)


def test_save_persists_and_emits_snapshot(
    qt_app,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    controller = _controller(settings_manager, credential_store)
    saved: list[ConfigurationSnapshot] = []
    controller.configurationSaved.connect(lambda snapshot: saved.append(snapshot))

    assert controller.save(make_settings(), make_credentials()) is True

    assert settings_manager.load().is_configured is True
    assert credential_store.load() == make_credentials()
    assert saved and saved[0].has_credentials is True


def test_save_rejects_incomplete_input(
    qt_app,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    controller = _controller(settings_manager, credential_store)
    errors: list[str] = []
    controller.errorOccurred.connect(lambda message: errors.append(message))

    saved = controller.save(Settings(tenant_url="https://x"), ApiCredentials("", "", ""))

    assert saved is False
    assert "app_id" in errors[0]
    assert "credentials" in errors[0]
    assert not settings_manager.env_file.exists()


def test_load_reports_stored_username(
    qt_app,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())
    credential_store.save("operator", "hunter2", "tenant-code")

    snapshot = _controller(settings_manager, credential_store).load()

    assert snapshot.username == "operator"
    assert snapshot.settings.tag_id == make_settings().tag_id


def test_reset_clears_storage_and_emits(
    qt_app,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())
    credential_store.save("operator", "hunter2", "tenant-code")
    controller = _controller(settings_manager, credential_store)
    cleared: list[bool] = []
    controller.storageCleared.connect(lambda: cleared.append(True))

    assert controller.reset() is True

    assert cleared == [True]
    assert credential_store.has_credentials() is False
    assert not settings_manager.env_file.exists()


def test_load_reports_unusable_keyring(
    qt_app,
    settings_manager: SettingsManager,
) -> None:
    settings_manager.save(make_settings())
    locked = CredentialStore(SecretStore("pytest", backend=LockedKeyringBackend()))
    controller = _controller(settings_manager, locked)
    errors: list[str] = []
    controller.errorOccurred.connect(lambda message: errors.append(message))

    snapshot = controller.load()

    assert snapshot.has_credentials is False
    assert snapshot.settings.tag_id == make_settings().tag_id
    assert errors and "The system keyring could not be used." in errors[0]
