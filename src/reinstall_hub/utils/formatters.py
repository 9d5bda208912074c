from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from reinstall_hub.data import TaggedDevice
    from reinstall_hub.services.installs import InstallBatchSummary, InstallResult


DEVICES_LOADED = "Devices loaded successfully."
NO_DEVICES_FOUND = "No Mac found with missing Hub."
REINSTALL_IN_PROGRESS = "Reinstallation in progress…"
LOADING = "Loading…"


def format_refresh_status(devices: Sequence["TaggedDevice"]) -> str:
    if not devices:
        return NO_DEVICES_FOUND
    return DEVICES_LOADED


def format_install_result(result: "InstallResult") -> str:
    if result.success:
        return f"Reinstallation succeeded for device {result.device_id}"
    return f"Error during reinstallation for device {result.device_id}"


def format_install_summary(summary: "InstallBatchSummary") -> str:
    if not summary.results:
        return "No device selected."
    if len(summary.results) == 1:
        return format_install_result(summary.results[0])
    succeeded = len(summary.succeeded)
    failed = summary.failed
    if not failed:
        return f"Reinstallation succeeded for {succeeded} devices"
    failed_ids = ", ".join(str(result.device_id) for result in failed)
    return (
        f"Reinstallation succeeded for {succeeded} of {len(summary.results)} devices; "
        f"failed for {failed_ids}"
    )


def format_tagged_at(value: datetime | None, fallback: str = "") -> str:
    if value is None:
        return fallback
    return value.strftime("%Y-%m-%d %H:%M")


__all__ = [
    "DEVICES_LOADED",
    "LOADING",
    "NO_DEVICES_FOUND",
    "REINSTALL_IN_PROGRESS",
    "format_install_result",
    "format_install_summary",
    "format_refresh_status",
    "format_tagged_at",
]
