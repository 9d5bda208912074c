"""Business logic service layer for ReinstallHub."""

from .base import EventHook, RefreshEvent, ServiceErrorEvent
from .devices import DeviceService
from .installs import (
    HubInstallService,
    InstallBatchSummary,
    InstallEvent,
    InstallResult,
    InstallStatus,
)
from .registry import ServiceRegistry

__all__ = [
    "DeviceService",
    "EventHook",
    "HubInstallService",
    "InstallBatchSummary",
    "InstallEvent",
    "InstallResult",
    "InstallStatus",
    "RefreshEvent",
    "ServiceErrorEvent",
    "ServiceRegistry",
]
