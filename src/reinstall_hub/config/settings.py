from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values
from platformdirs import user_cache_dir, user_config_dir

APP_NAME = "ReinstallHub"
KEYRING_SERVICE = "ch.epfl.reinstallhub"
ENV_PREFIX = "REINSTALL_HUB_"
ENV_FILE_NAME = "settings.env"

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class ConfigurationMissingError(RuntimeError):
    """Raised when tenant configuration or API credentials are not available."""


def _config_dir() -> Path:
    path = Path(user_config_dir(APP_NAME, roaming=True))
    path.mkdir(parents=True, exist_ok=True)
    return path


def _cache_dir() -> Path:
    path = Path(user_cache_dir(APP_NAME))
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_dir() -> Path:
    return _config_dir()


def cache_dir() -> Path:
    return _cache_dir()


def log_dir() -> Path:
    path = cache_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _env_file_path(explicit: Path | None) -> Path:
    if explicit is not None:
        return explicit
    return _config_dir() / ENV_FILE_NAME


def normalise_tenant_url(value: str) -> str:
    """Return the tenant URL without trailing slashes and with an explicit scheme."""

    trimmed = value.strip().rstrip("/")
    if not trimmed:
        return ""
    if "://" not in trimmed:
        trimmed = f"https://{trimmed}"
    return trimmed


@dataclass(slots=True)
class Settings:
    """Workspace ONE tenant details needed to reach the REST API.

    Secrets (API username, password and tenant code) live in the OS keyring
    and are never part of this object.
    """

    tenant_url: str | None = None
    app_id: str | None = None
    tag_id: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_configured(self) -> bool:
        """True when tenant URL, Hub app id and missing-Hub tag id are set."""
        return bool(self.tenant_url and self.app_id and self.tag_id)

    def base_url(self) -> str:
        """Return the normalised tenant URL used as the API base."""
        normalised = normalise_tenant_url(self.tenant_url or "")
        if not normalised:
            raise ConfigurationMissingError("Workspace ONE tenant URL is not configured")
        return normalised

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.tenant_url:
            missing.append("tenant_url")
        if not self.app_id:
            missing.append("app_id")
        if not self.tag_id:
            missing.append("tag_id")
        return missing


class SettingsManager:
    """Load and persist application settings with environment overrides."""

    def __init__(self, env_file: Path | None = None) -> None:
        self._env_file = _env_file_path(env_file)

    @property
    def env_file(self) -> Path:
        return self._env_file

    def load(self) -> Settings:
        """Load settings from the persisted file, letting the environment win."""
        file_values: dict[str, str | None] = {}
        if self._env_file.exists():
            file_values = dotenv_values(self._env_file)

        def lookup(name: str) -> str | None:
            key = f"{ENV_PREFIX}{name}"
            return os.getenv(key) or file_values.get(key) or None

        settings = Settings(
            tenant_url=lookup("TENANT_URL"),
            app_id=lookup("APP_ID"),
            tag_id=lookup("TAG_ID"),
        )

        timeout = lookup("REQUEST_TIMEOUT")
        if timeout:
            try:
                settings.request_timeout = float(timeout)
            except ValueError:
                settings.request_timeout = DEFAULT_REQUEST_TIMEOUT

        log_level = lookup("LOG_LEVEL")
        if log_level:
            settings.log_level = log_level.strip().upper()

        return settings

    def save(self, settings: Settings) -> None:
        """Persist configuration fields to the managed env file."""
        self._env_file.parent.mkdir(parents=True, exist_ok=True)
        content = [
            f"{ENV_PREFIX}TENANT_URL={settings.tenant_url or ''}",
            f"{ENV_PREFIX}APP_ID={settings.app_id or ''}",
            f"{ENV_PREFIX}TAG_ID={settings.tag_id or ''}",
            f"{ENV_PREFIX}REQUEST_TIMEOUT={settings.request_timeout}",
            f"{ENV_PREFIX}LOG_LEVEL={settings.log_level}",
        ]
        self._env_file.write_text("\n".join(content) + "\n", encoding="utf-8")

    def clear(self) -> None:
        """Remove the persisted configuration file."""
        self._env_file.unlink(missing_ok=True)


__all__ = [
    "APP_NAME",
    "KEYRING_SERVICE",
    "ConfigurationMissingError",
    "Settings",
    "SettingsManager",
    "cache_dir",
    "config_dir",
    "log_dir",
    "normalise_tenant_url",
]
