from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest
import respx
from PySide6.QtCore import QItemSelectionModel, Qt

from reinstall_hub.services import DeviceService, HubInstallService, ServiceRegistry
from reinstall_hub.ui.devices import DeviceController, DevicesWidget
from reinstall_hub.utils.formatters import DEVICES_LOADED, REINSTALL_IN_PROGRESS

from tests.factories import (
    APP_ID,
    BASE_URL,
    TAG_ID,
    device_payload,
    make_client,
    make_settings,
)


TAG_URL = f"{BASE_URL}/api/mdm/tags/{TAG_ID}/devices"
INSTALL_URL = f"{BASE_URL}/api/mam/apps/internal/{APP_ID}/install"


def _registry(**settings_overrides: object) -> ServiceRegistry:
    client = make_client()
    settings = make_settings(**settings_overrides)
    return ServiceRegistry(
        client=client,
        devices=DeviceService(client, settings),
        installs=HubInstallService(client, settings),
    )


def _build_widget(qtbot, services: ServiceRegistry) -> DevicesWidget:
    widget = DevicesWidget(DeviceController(services))
    qtbot.addWidget(widget)
    widget.show()
    return widget


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.01)


def _select_rows(widget: DevicesWidget, *rows: int) -> None:
    model = widget.list_view.model()
    selection = widget.list_view.selectionModel()
    for row in rows:
        selection.select(model.index(row, 0), QItemSelectionModel.SelectionFlag.Select)


def _tag_listing(*device_ids: int) -> httpx.Response:
    return httpx.Response(
        200, json={"Device": [device_payload(device_id) for device_id in device_ids]}
    )


def test_reinstall_disabled_without_selection(qtbot) -> None:
    widget = _build_widget(qtbot, _registry())

    assert widget.reinstall_button.isEnabled() is False
    assert widget.refresh_button.isEnabled() is True
    assert widget.progress.isHidden()


def test_reset_button_requests_reset(qtbot) -> None:
    widget = _build_widget(qtbot, _registry())

    with qtbot.waitSignal(widget.resetRequested, timeout=1000):
        qtbot.mouseClick(widget.reset_button, Qt.MouseButton.LeftButton)


@pytest.mark.asyncio
async def test_refresh_loads_devices_and_clears_indicator(
    qtbot,
    respx_mock: respx.Router,
) -> None:
    respx_mock.get(TAG_URL).mock(return_value=_tag_listing(1, 2))
    services = _registry()
    widget = _build_widget(qtbot, services)
    try:
        widget.refresh()
        assert widget.is_busy
        assert not widget.progress.isHidden()
        await _wait_until(lambda: not widget.is_busy)
    finally:
        await services.close()

    assert widget.list_view.model().rowCount() == 2
    assert widget.status_label.text() == DEVICES_LOADED
    assert widget.progress.isHidden()
    assert widget.reinstall_button.isEnabled() is False

    _select_rows(widget, 0)
    assert widget.reinstall_button.isEnabled() is True


@pytest.mark.asyncio
async def test_refresh_failure_reports_loading_error(
    qtbot,
    respx_mock: respx.Router,
) -> None:
    respx_mock.get(TAG_URL).mock(return_value=httpx.Response(401))
    services = _registry()
    widget = _build_widget(qtbot, services)
    try:
        widget.refresh()
        await _wait_until(lambda: not widget.is_busy)
    finally:
        await services.close()

    assert widget.status_label.text().startswith("Loading error: ")
    assert widget.progress.isHidden()
    assert widget.refresh_button.isEnabled() is True


@pytest.mark.asyncio
async def test_reinstall_streams_device_status_then_summary(
    qtbot,
    respx_mock: respx.Router,
) -> None:
    def _respond(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["DeviceId"] == "2":
            return httpx.Response(403)
        return httpx.Response(202)

    respx_mock.get(TAG_URL).mock(return_value=_tag_listing(1, 2, 3))
    install_route = respx_mock.post(INSTALL_URL).mock(side_effect=_respond)
    services = _registry()
    widget = _build_widget(qtbot, services)
    messages: list[str] = []
    try:
        widget.refresh()
        await _wait_until(lambda: not widget.is_busy)
        _select_rows(widget, 0, 1)
        widget.statusChanged.connect(messages.append)

        qtbot.mouseClick(widget.reinstall_button, Qt.MouseButton.LeftButton)
        await _wait_until(lambda: not widget.is_busy)
    finally:
        await services.close()

    assert install_route.call_count == 2
    assert messages[0] == REINSTALL_IN_PROGRESS
    assert sorted(messages[1:3]) == [
        "Error during reinstallation for device 2",
        "Reinstallation succeeded for device 1",
    ]
    summary = "Reinstallation succeeded for 1 of 2 devices; failed for 2"
    assert messages[-1] == summary
    assert widget.status_label.text() == summary
    assert widget.progress.isHidden()


@pytest.mark.asyncio
async def test_reinstall_failure_reports_reinstallation_error(
    qtbot,
    respx_mock: respx.Router,
) -> None:
    respx_mock.get(TAG_URL).mock(return_value=_tag_listing(1))
    services = _registry(app_id="  ")
    widget = _build_widget(qtbot, services)
    try:
        widget.refresh()
        await _wait_until(lambda: not widget.is_busy)
        _select_rows(widget, 0)

        widget.reinstall_selected()
        await _wait_until(lambda: not widget.is_busy)
    finally:
        await services.close()

    assert widget.status_label.text().startswith("Reinstallation error: ")
    assert "Loading error" not in widget.status_label.text()
    assert widget.progress.isHidden()
