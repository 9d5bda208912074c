from __future__ import annotations

from keyring.errors import KeyringError
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QApplication, QMainWindow, QStackedWidget, QWidget

from reinstall_hub.auth import CredentialStore
from reinstall_hub.bootstrap import build_services
from reinstall_hub.config import SettingsManager, detect_first_run
from reinstall_hub.ui.configuration import (
    ConfigurationController,
    ConfigurationSnapshot,
    ConfigurationWidget,
)
from reinstall_hub.ui.devices import DeviceController, DevicesWidget
from reinstall_hub.utils import get_logger
from reinstall_hub.utils.asyncio import AsyncBridge


logger = get_logger(__name__)


class MainWindow(QMainWindow):
    """Switches between the configuration form and the device list."""

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        credential_store: CredentialStore | None = None,
        *,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings_manager = settings_manager or SettingsManager()
        self._bridge = AsyncBridge()
        self._configuration = ConfigurationController(
            self._settings_manager, credential_store
        )
        self._configuration_widget = ConfigurationWidget(self._configuration)
        self._devices_widget: DevicesWidget | None = None
        self._device_controller: DeviceController | None = None

        self._stack = QStackedWidget()
        self._stack.addWidget(self._configuration_widget)
        self.setCentralWidget(self._stack)
        self.setWindowTitle("ReinstallHub")
        self.resize(640, 480)

        self._configuration.configurationSaved.connect(self._handle_configuration_saved)
        self._configuration.storageCleared.connect(self._show_configuration)

        try:
            status = detect_first_run(
                settings_manager=self._settings_manager,
                credential_store=self._configuration.credential_store,
            )
        except KeyringError as exc:
            logger.warning("Keyring unavailable at start-up", error=str(exc))
            self._show_configuration()
            return
        if status.is_configured:
            self._show_devices()
        else:
            logger.info(
                "Configuration required",
                missing_settings=status.missing_settings,
                missing_credentials=status.missing_credentials,
            )
            self._show_configuration()

    # ------------------------------------------------------------------ Views

    def _show_configuration(self) -> None:
        self._teardown_devices()
        self._configuration_widget.load()
        self._stack.setCurrentWidget(self._configuration_widget)

    def _show_devices(self) -> None:
        self._teardown_devices()
        settings = self._settings_manager.load()
        try:
            services = build_services(settings, self._configuration.credential_store)
        except KeyringError as exc:
            logger.warning("Keyring unavailable", error=str(exc))
            self._show_configuration()
            return
        if not services.is_ready:
            self._show_configuration()
            return
        self._device_controller = DeviceController(services)
        widget = DevicesWidget(self._device_controller)
        widget.resetRequested.connect(self._configuration.reset)
        widget.quitRequested.connect(QApplication.quit)
        self._devices_widget = widget
        self._stack.addWidget(widget)
        self._stack.setCurrentWidget(widget)
        widget.refresh()

    def _teardown_devices(self) -> None:
        if self._devices_widget is not None:
            self._stack.removeWidget(self._devices_widget)
            self._devices_widget.dispose()
            self._devices_widget.deleteLater()
            self._devices_widget = None
        if self._device_controller is not None:
            self._bridge.run_coroutine(self._device_controller.close())
            self._device_controller = None

    def _handle_configuration_saved(self, _snapshot: ConfigurationSnapshot) -> None:
        self._show_devices()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self._teardown_devices()
        super().closeEvent(event)


__all__ = ["MainWindow"]
