from __future__ import annotations

from dataclasses import dataclass

from reinstall_hub.wso.client import WorkspaceOneClient

from .devices import DeviceService
from .installs import HubInstallService


@dataclass(slots=True)
class ServiceRegistry:
    """Container for the services built once configuration is complete."""

    client: WorkspaceOneClient | None = None
    devices: DeviceService | None = None
    installs: HubInstallService | None = None

    @property
    def is_ready(self) -> bool:
        return self.devices is not None and self.installs is not None

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()


__all__ = ["ServiceRegistry"]
