from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from reinstall_hub.utils import get_logger

from .secret_store import SecretStore
from .types import ApiCredentials

if TYPE_CHECKING:
    from reinstall_hub.config.settings import SettingsManager


logger = get_logger(__name__)


class CredentialKey(StrEnum):
    API_USERNAME = "WorkspaceOneAPIUsername"
    API_PASSWORD = "WorkspaceOneAPIPassword"
    API_KEY = "WorkspaceOneAPIKey"


class CredentialStore:
    """Keeps the Workspace ONE API username, password and tenant code in the keyring."""

    def __init__(self, secret_store: SecretStore | None = None) -> None:
        self._secrets = secret_store or SecretStore()

    def save(self, username: str, password: str, api_key: str) -> None:
        self._secrets.set_secret(CredentialKey.API_USERNAME, username)
        self._secrets.set_secret(CredentialKey.API_PASSWORD, password)
        self._secrets.set_secret(CredentialKey.API_KEY, api_key)
        logger.info("Stored API credentials", username=username)

    def load(self) -> ApiCredentials | None:
        """Return stored credentials, or ``None`` when any part is missing."""

        username = self._secrets.get_secret(CredentialKey.API_USERNAME)
        password = self._secrets.get_secret(CredentialKey.API_PASSWORD)
        api_key = self._secrets.get_secret(CredentialKey.API_KEY)
        if username is None or password is None or api_key is None:
            return None
        return ApiCredentials(username=username, password=password, api_key=api_key)

    def has_credentials(self) -> bool:
        return self.load() is not None

    def clear(self) -> None:
        for key in CredentialKey:
            self._secrets.delete_secret(key)
        logger.info("Cleared API credentials")


def clear_storage(
    settings_manager: "SettingsManager",
    credential_store: CredentialStore,
) -> None:
    """Forget the persisted tenant configuration and every stored secret."""

    first_error: Exception | None = None
    try:
        settings_manager.clear()
    except OSError as exc:
        logger.exception("Failed to remove persisted configuration")
        first_error = exc
    try:
        credential_store.clear()
    except Exception as exc:  # noqa: BLE001 - keyring backends raise their own types
        logger.exception("Failed to remove keyring credentials")
        first_error = first_error or exc
    if first_error is not None:
        raise first_error
    logger.info("Local configuration and credentials cleared")


__all__ = ["CredentialKey", "CredentialStore", "clear_storage"]
