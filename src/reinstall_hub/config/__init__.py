"""Configuration helpers for ReinstallHub."""

from .settings import (
    APP_NAME,
    KEYRING_SERVICE,
    ConfigurationMissingError,
    Settings,
    SettingsManager,
)
from .onboarding import FirstRunStatus, detect_first_run

__all__ = [
    "APP_NAME",
    "KEYRING_SERVICE",
    "ConfigurationMissingError",
    "Settings",
    "SettingsManager",
    "FirstRunStatus",
    "detect_first_run",
]
