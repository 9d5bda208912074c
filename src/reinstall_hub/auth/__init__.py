"""Credential storage for ReinstallHub."""

from .credentials import CredentialKey, CredentialStore, clear_storage
from .secret_store import InsecureKeyringError, SecretStore
from .types import ApiCredentials

__all__ = [
    "ApiCredentials",
    "CredentialKey",
    "CredentialStore",
    "InsecureKeyringError",
    "SecretStore",
    "clear_storage",
]
