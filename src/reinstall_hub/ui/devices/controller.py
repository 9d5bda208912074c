from __future__ import annotations

from collections.abc import Callable
from typing import Iterable

from reinstall_hub.data import TaggedDevice
from reinstall_hub.services import (
    InstallBatchSummary,
    InstallEvent,
    ServiceErrorEvent,
    ServiceRegistry,
)


class DeviceController:
    """Bridge between the device list UI and the service layer."""

    def __init__(self, services: ServiceRegistry) -> None:
        self._services = services
        self._subscriptions: list[Callable[[], None]] = []

    @property
    def is_ready(self) -> bool:
        return self._services.is_ready

    # ----------------------------------------------------------------- Events

    def register_callbacks(
        self,
        *,
        refreshed: Callable[[list[TaggedDevice]], None] | None = None,
        error: Callable[[ServiceErrorEvent], None] | None = None,
        install: Callable[[InstallEvent], None] | None = None,
    ) -> None:
        devices = self._services.devices
        installs = self._services.installs
        if devices is not None and refreshed is not None:
            self._subscriptions.append(
                devices.refreshed.subscribe(lambda event: refreshed(event.devices)),
            )
        if devices is not None and error is not None:
            self._subscriptions.append(devices.errors.subscribe(error))
        if installs is not None and install is not None:
            self._subscriptions.append(installs.installs.subscribe(install))

    def dispose(self) -> None:
        while self._subscriptions:
            unsubscribe = self._subscriptions.pop()
            unsubscribe()

    # ----------------------------------------------------------------- Actions

    async def refresh(self) -> list[TaggedDevice]:
        if self._services.devices is None:
            raise RuntimeError("Device service is not configured")
        return await self._services.devices.list_missing_hub()

    async def reinstall(self, devices: Iterable[TaggedDevice]) -> InstallBatchSummary:
        if self._services.installs is None:
            raise RuntimeError("Install service is not configured")
        return await self._services.installs.reinstall_many(
            device.id for device in devices
        )

    async def close(self) -> None:
        self.dispose()
        await self._services.close()


__all__ = ["DeviceController"]
