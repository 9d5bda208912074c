from __future__ import annotations

from datetime import datetime

from reinstall_hub.services import InstallBatchSummary, InstallResult
from reinstall_hub.utils.formatters import (
    DEVICES_LOADED,
    NO_DEVICES_FOUND,
    format_install_result,
    format_install_summary,
    format_refresh_status,
    format_tagged_at,
)

from tests.factories import make_tagged_device


def test_refresh_status_reflects_whether_devices_were_found() -> None:
    assert format_refresh_status([]) == NO_DEVICES_FOUND == "No Mac found with missing Hub."
    assert format_refresh_status([make_tagged_device(1)]) == DEVICES_LOADED


def test_install_result_messages() -> None:
    assert (
        format_install_result(InstallResult(1001, True, 202))
        == "Reinstallation succeeded for device 1001"
    )
    assert (
        format_install_result(InstallResult(1001, False, 500))
        == "Error during reinstallation for device 1001"
    )


def test_install_summary_messages() -> None:
    assert format_install_summary(InstallBatchSummary()) == "No device selected."
    assert format_install_summary(
        InstallBatchSummary([InstallResult(7, True)])
    ) == "Reinstallation succeeded for device 7"
    assert format_install_summary(
        InstallBatchSummary([InstallResult(1, True), InstallResult(2, True)])
    ) == "Reinstallation succeeded for 2 devices"
    assert format_install_summary(
        InstallBatchSummary(
            [InstallResult(1, True), InstallResult(2, False), InstallResult(3, False)]
        )
    ) == "Reinstallation succeeded for 1 of 3 devices; failed for 2, 3"


def test_format_tagged_at() -> None:
    assert format_tagged_at(datetime(2024, 11, 11, 9, 30)) == "2024-11-11 09:30"
    assert format_tagged_at(None, "unknown") == "unknown"
