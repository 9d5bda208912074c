from __future__ import annotations

from dataclasses import dataclass

from keyring.errors import KeyringError
from PySide6.QtCore import QObject, Signal

from reinstall_hub.auth import ApiCredentials, CredentialStore, clear_storage
from reinstall_hub.config import Settings, SettingsManager
from reinstall_hub.utils import get_logger
from reinstall_hub.utils.errors import describe_exception


logger = get_logger(__name__)


@dataclass(slots=True)
class ConfigurationSnapshot:
    settings: Settings
    username: str | None
    has_credentials: bool


class ConfigurationController(QObject):
    """Coordinates settings persistence and keyring credentials for the UI.

    The credential store is opened on first use so that an unusable keyring
    surfaces through ``errorOccurred`` instead of failing window creation.
    """

    configurationLoaded = Signal(object)
    configurationSaved = Signal(object)
    storageCleared = Signal()
    errorOccurred = Signal(str)

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        credential_store: CredentialStore | None = None,
    ) -> None:
        super().__init__()
        self._settings_manager = settings_manager or SettingsManager()
        self._credential_store = credential_store

    @property
    def settings_manager(self) -> SettingsManager:
        return self._settings_manager

    @property
    def credential_store(self) -> CredentialStore:
        """The keyring-backed store; raises ``KeyringError`` when unusable."""
        if self._credential_store is None:
            self._credential_store = CredentialStore()
        return self._credential_store

    def load(self) -> ConfigurationSnapshot:
        settings = self._settings_manager.load()
        error: KeyringError | None = None
        try:
            credentials = self.credential_store.load()
        except KeyringError as exc:
            logger.warning("Keyring unavailable", error=str(exc))
            credentials = None
            error = exc
        snapshot = ConfigurationSnapshot(
            settings=settings,
            username=credentials.username if credentials else None,
            has_credentials=credentials is not None,
        )
        self.configurationLoaded.emit(snapshot)
        if error is not None:
            self.errorOccurred.emit(describe_exception(error).as_text())
        return snapshot

    def save(self, settings: Settings, credentials: ApiCredentials) -> bool:
        missing = settings.missing_fields()
        if not (credentials.username and credentials.password and credentials.api_key):
            missing.append("credentials")
        if missing:
            self.errorOccurred.emit(
                f"Please fill in every field (missing: {', '.join(missing)})."
            )
            return False
        try:
            self._settings_manager.save(settings)
            self.credential_store.save(*credentials)
        except Exception as exc:  # noqa: BLE001 - surface keyring/file errors in the UI
            logger.exception("Failed to save configuration")
            self.errorOccurred.emit(describe_exception(exc).as_text())
            return False
        logger.info("Configuration saved", tenant_url=settings.tenant_url)
        snapshot = ConfigurationSnapshot(
            settings=settings,
            username=credentials.username,
            has_credentials=True,
        )
        self.configurationSaved.emit(snapshot)
        return True

    def reset(self) -> bool:
        try:
            clear_storage(self._settings_manager, self.credential_store)
        except Exception as exc:  # noqa: BLE001
            self.errorOccurred.emit(describe_exception(exc).as_text())
            return False
        self.storageCleared.emit()
        return True


__all__ = ["ConfigurationController", "ConfigurationSnapshot"]
