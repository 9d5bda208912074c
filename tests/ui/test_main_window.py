from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest
import respx
from PySide6.QtCore import Qt

from reinstall_hub.auth import CredentialStore
from reinstall_hub.config.settings import SettingsManager
from reinstall_hub.ui.devices import DevicesWidget
from reinstall_hub.ui.main.window import MainWindow
from reinstall_hub.utils.formatters import DEVICES_LOADED

from tests.factories import BASE_URL, TAG_ID, device_payload, make_settings
from tests.stubs import StubKeyringBackend


TAG_URL = f"{BASE_URL}/api/mdm/tags/{TAG_ID}/devices"


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.01)


def test_unconfigured_start_shows_configuration(
    qtbot,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    window = MainWindow(settings_manager, credential_store)
    qtbot.addWidget(window)

    assert window._stack.currentWidget() is window._configuration_widget
    assert window._devices_widget is None


def test_insecure_keyring_shows_configuration_with_message(
    qtbot,
    settings_manager: SettingsManager,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    settings_manager.save(make_settings())
    monkeypatch.setattr("keyring.get_keyring", lambda: StubKeyringBackend(secure=False))

    window = MainWindow(settings_manager)
    qtbot.addWidget(window)

    form = window._configuration_widget
    assert window._stack.currentWidget() is form
    assert "The system keyring could not be used." in form.feedback_label.text()
    assert form.url_input.text() == BASE_URL


@pytest.mark.asyncio
async def test_configured_start_lists_devices_and_reset_returns_to_form(
    qtbot,
    respx_mock: respx.Router,
    settings_manager: SettingsManager,
    credential_store: CredentialStore,
) -> None:
    settings_manager.save(make_settings())
    credential_store.save("operator", "hunter2", "tenant-code")
    respx_mock.get(TAG_URL).mock(
        return_value=httpx.Response(200, json={"Device": [device_payload(1)]}),
    )

    window = MainWindow(settings_manager, credential_store)
    qtbot.addWidget(window)
    window.show()
    devices = window._devices_widget
    assert isinstance(devices, DevicesWidget)
    assert window._stack.currentWidget() is devices

    await _wait_until(lambda: not devices.is_busy)
    assert devices.status_label.text() == DEVICES_LOADED
    assert devices.progress.isHidden()

    qtbot.mouseClick(devices.reset_button, Qt.MouseButton.LeftButton)
    await asyncio.sleep(0.05)

    assert window._stack.currentWidget() is window._configuration_widget
    assert window._devices_widget is None
    assert credential_store.has_credentials() is False
    assert not settings_manager.env_file.exists()
