from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .settings import Settings, SettingsManager

if TYPE_CHECKING:
    from reinstall_hub.auth import CredentialStore


@dataclass(slots=True)
class FirstRunStatus:
    """Represents how much of the operator setup has been completed."""

    missing_settings: bool
    missing_credentials: bool
    settings: Settings

    @property
    def is_configured(self) -> bool:
        return not (self.missing_settings or self.missing_credentials)

    @property
    def is_first_run(self) -> bool:
        return self.missing_settings and self.missing_credentials


def detect_first_run(
    *,
    settings_manager: SettingsManager | None = None,
    credential_store: "CredentialStore | None" = None,
) -> FirstRunStatus:
    """Determine whether configuration and API credentials are in place.

    Constructing the default credential store touches the OS keyring and may
    raise ``keyring.errors.KeyringError``.
    """

    manager = settings_manager or SettingsManager()
    settings = manager.load()
    if credential_store is None:
        from reinstall_hub.auth import CredentialStore

        credential_store = CredentialStore()

    return FirstRunStatus(
        missing_settings=not settings.is_configured,
        missing_credentials=not credential_store.has_credentials(),
        settings=settings,
    )


__all__ = ["FirstRunStatus", "detect_first_run"]
