from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from keyring.errors import KeyringError

from reinstall_hub.config.settings import ConfigurationMissingError, Settings
from reinstall_hub.services.base import EventHook
from reinstall_hub.utils import get_logger
from reinstall_hub.wso.client import WorkspaceOneClient
from reinstall_hub.wso.errors import WorkspaceOneAPIError
from reinstall_hub.wso.requests import internal_app_install_request


logger = get_logger(__name__)

# Failures recorded per device instead of aborting the batch.
_INSTALL_FAILURES = (WorkspaceOneAPIError, ConfigurationMissingError, KeyringError)


class InstallStatus(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class InstallEvent:
    device_id: int
    app_id: str
    status: InstallStatus
    error: Exception | None = None


@dataclass(slots=True)
class InstallResult:
    device_id: int
    success: bool
    status_code: int | None = None
    error: Exception | None = None


@dataclass(slots=True)
class InstallBatchSummary:
    results: list[InstallResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[InstallResult]:
        return [result for result in self.results if result.success]

    @property
    def failed(self) -> list[InstallResult]:
        return [result for result in self.results if not result.success]

    @property
    def all_succeeded(self) -> bool:
        return bool(self.results) and not self.failed


class HubInstallService:
    """Queues reinstallation of the Hub internal app on selected devices."""

    def __init__(self, client: WorkspaceOneClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self.installs: EventHook[InstallEvent] = EventHook("installs")

    def _prepare(self) -> str:
        """Return the Hub app id once configuration and credentials are present."""

        app_id = (self._settings.app_id or "").strip()
        if not app_id:
            raise ConfigurationMissingError("Hub app ID is not configured")
        self._client.ensure_credentials()
        return app_id

    async def reinstall(self, device_id: int) -> InstallResult:
        """Send one install command; API failures are captured in the result."""

        app_id = self._prepare()
        return await self._reinstall(app_id, device_id)

    async def reinstall_many(self, device_ids: Iterable[int]) -> InstallBatchSummary:
        """Send install commands for every distinct device concurrently."""

        app_id = self._prepare()
        unique_ids = list(dict.fromkeys(device_ids))
        if not unique_ids:
            return InstallBatchSummary()

        logger.info("Reinstalling Hub", app_id=app_id, devices=len(unique_ids))
        results = await asyncio.gather(
            *(self._reinstall(app_id, device_id) for device_id in unique_ids)
        )
        summary = InstallBatchSummary(results=list(results))
        logger.info(
            "Hub reinstall batch finished",
            app_id=app_id,
            succeeded=len(summary.succeeded),
            failed=len(summary.failed),
        )
        return summary

    async def _reinstall(self, app_id: str, device_id: int) -> InstallResult:
        request = internal_app_install_request(app_id, device_id)
        self.installs.emit(InstallEvent(device_id, app_id, InstallStatus.PENDING))
        try:
            response = await self._client.execute(request)
        except _INSTALL_FAILURES as exc:
            status_code = (
                exc.status_code if isinstance(exc, WorkspaceOneAPIError) else None
            )
            logger.error(
                "Hub reinstall failed",
                device_id=device_id,
                app_id=app_id,
                status_code=status_code,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            self.installs.emit(
                InstallEvent(device_id, app_id, InstallStatus.FAILED, error=exc)
            )
            return InstallResult(
                device_id=device_id,
                success=False,
                status_code=status_code,
                error=exc,
            )

        logger.info(
            "Hub reinstall queued",
            device_id=device_id,
            app_id=app_id,
            status_code=response.status_code,
        )
        self.installs.emit(InstallEvent(device_id, app_id, InstallStatus.SUCCEEDED))
        return InstallResult(
            device_id=device_id,
            success=True,
            status_code=response.status_code,
        )


__all__ = [
    "HubInstallService",
    "InstallBatchSummary",
    "InstallEvent",
    "InstallResult",
    "InstallStatus",
]
