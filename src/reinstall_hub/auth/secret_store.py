"""OS keyring access for the Workspace ONE API secrets."""

from __future__ import annotations

import os
from typing import Final

import keyring
from keyring.backend import KeyringBackend
from keyring.backends.chainer import ChainerBackend
from keyring.errors import KeyringError, PasswordDeleteError

from reinstall_hub.config.settings import ENV_PREFIX, KEYRING_SERVICE
from reinstall_hub.utils import get_logger


logger = get_logger(__name__)

ALLOW_INSECURE_ENV: Final[str] = f"{ENV_PREFIX}ALLOW_INSECURE_KEYRING"

# Backends that keep secrets unencrypted on disk or do not keep them at all.
_UNENCRYPTED_MODULES: Final[tuple[str, ...]] = (
    "keyring.backends.fail",
    "keyring.backends.null",
    "keyring.backends.file",
    "keyrings.alt.file",
)


class InsecureKeyringError(KeyringError):
    """The active keyring backend cannot hold the API password safely."""


def backend_name(backend: KeyringBackend) -> str:
    cls = type(backend)
    return f"{cls.__module__}.{cls.__name__}"


def is_encrypted_backend(backend: KeyringBackend) -> bool:
    """Return whether ``backend`` stores secrets encrypted by the OS."""

    declared = getattr(backend, "secure_storage", None)
    if isinstance(declared, bool):
        return declared
    if isinstance(backend, ChainerBackend):
        children = backend.backends
        return bool(children) and all(is_encrypted_backend(child) for child in children)
    if type(backend).__module__.startswith(_UNENCRYPTED_MODULES):
        return False
    return "plaintext" not in type(backend).__name__.lower()


def insecure_keyring_allowed(explicit: bool | None = None) -> bool:
    if explicit is not None:
        return explicit
    value = os.getenv(ALLOW_INSECURE_ENV, "")
    return value.strip().lower() in {"1", "true", "yes", "on"}


class SecretStore:
    """Reads and writes secrets under one keyring service name."""

    def __init__(
        self,
        service_name: str = KEYRING_SERVICE,
        *,
        backend: KeyringBackend | None = None,
        allow_insecure: bool | None = None,
    ) -> None:
        self._service_name = service_name
        self._backend = backend or keyring.get_keyring()
        name = backend_name(self._backend)
        if not is_encrypted_backend(self._backend):
            if not insecure_keyring_allowed(allow_insecure):
                raise InsecureKeyringError(
                    f"Keyring backend {name} does not encrypt stored secrets. "
                    "Unlock or install the system keychain, or set "
                    f"{ALLOW_INSECURE_ENV}=1 for development."
                )
            logger.warning("Using an unencrypted keyring backend", backend=name)
        logger.debug("Keyring backend selected", backend=name, service=service_name)

    @property
    def service_name(self) -> str:
        return self._service_name

    def get_secret(self, key: str) -> str | None:
        return self._backend.get_password(self._service_name, key)

    def set_secret(self, key: str, value: str) -> None:
        self._backend.set_password(self._service_name, key, value)

    def delete_secret(self, key: str) -> None:
        """Remove ``key``; a secret that is already gone is not an error."""
        try:
            self._backend.delete_password(self._service_name, key)
        except PasswordDeleteError:
            logger.debug("Secret already absent", service=self._service_name, key=key)


__all__ = [
    "ALLOW_INSECURE_ENV",
    "InsecureKeyringError",
    "SecretStore",
    "is_encrypted_backend",
]
