from __future__ import annotations

from reinstall_hub.auth import CredentialStore
from reinstall_hub.config import detect_first_run
from reinstall_hub.config.settings import SettingsManager

from tests.factories import make_settings


def test_fresh_install_is_first_run(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    status = detect_first_run(
        settings_manager=settings_manager,
        credential_store=credential_store,
    )

    assert status.is_first_run is True
    assert status.is_configured is False


def test_settings_without_credentials_are_not_configured(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())

    status = detect_first_run(
        settings_manager=settings_manager,
        credential_store=credential_store,
    )

    assert status.missing_settings is False
    assert status.missing_credentials is True
    assert status.is_first_run is False
    assert status.is_configured is False


def test_complete_setup_is_configured(
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())
    credential_store.save("operator", "hunter2", "tenant-code")

    status = detect_first_run(
        settings_manager=settings_manager,
        credential_store=credential_store,
    )

    assert status.is_configured is True
    assert status.settings.tag_id == make_settings().tag_id
