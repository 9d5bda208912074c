from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QLabel,
    QListView,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from reinstall_hub.data import TaggedDevice
from reinstall_hub.services import (
    InstallBatchSummary,
    InstallEvent,
    InstallResult,
    InstallStatus,
)
from reinstall_hub.utils import get_logger
from reinstall_hub.utils.asyncio import AsyncBridge
from reinstall_hub.utils.errors import describe_exception
from reinstall_hub.utils.formatters import (
    LOADING,
    REINSTALL_IN_PROGRESS,
    format_install_result,
    format_install_summary,
    format_refresh_status,
)

from .controller import DeviceController
from .models import DeviceListModel


logger = get_logger(__name__)


class DevicesWidget(QWidget):
    """Device list with multi-select and the Hub reinstall actions."""

    resetRequested = Signal()
    quitRequested = Signal()
    statusChanged = Signal(str)

    def __init__(
        self,
        controller: DeviceController,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._bridge = AsyncBridge()
        self._bridge.task_completed.connect(self._handle_task_completed)
        self._model = DeviceListModel()
        self._busy = False
        self._error_prefix = "Loading error"

        self._build_ui()
        self._connect_signals()
        self._controller.register_callbacks(install=self._handle_install_event)

    # ------------------------------------------------------------------ UI setup

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        toolbar = QHBoxLayout()
        self.reinstall_button = QPushButton("Reinstall Hub")
        self.refresh_button = QPushButton("Refresh")
        self.reset_button = QPushButton("Reset authentication")
        self.quit_button = QPushButton("Quit")
        toolbar.addWidget(self.reinstall_button)
        toolbar.addWidget(self.refresh_button)
        toolbar.addStretch()
        toolbar.addWidget(self.reset_button)
        toolbar.addWidget(self.quit_button)

        self.list_view = QListView()
        self.list_view.setModel(self._model)
        self.list_view.setSelectionMode(
            QAbstractItemView.SelectionMode.ExtendedSelection
        )
        self.list_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)

        self.progress = QProgressBar()
        self.progress.setRange(0, 0)
        self.progress.setTextVisible(False)
        self.progress.setVisible(False)

        self.status_label = QLabel()
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet("color: #c0392b;")

        layout.addLayout(toolbar)
        layout.addWidget(self.list_view)
        layout.addWidget(self.progress)
        layout.addWidget(self.status_label)
        self._update_buttons()

    def _connect_signals(self) -> None:
        self.reinstall_button.clicked.connect(self.reinstall_selected)
        self.refresh_button.clicked.connect(self.refresh)
        self.reset_button.clicked.connect(self.resetRequested.emit)
        self.quit_button.clicked.connect(self.quitRequested.emit)
        self.list_view.selectionModel().selectionChanged.connect(
            lambda *_: self._update_buttons()
        )

    # ------------------------------------------------------------------ Public

    @property
    def is_busy(self) -> bool:
        return self._busy

    def selected_devices(self) -> list[TaggedDevice]:
        selection = self.list_view.selectionModel().selectedRows()
        rows = sorted(index.row() for index in selection)
        devices = [self._model.device_at(row) for row in rows]
        return [device for device in devices if device is not None]

    def refresh(self) -> None:
        if self._busy or not self._controller.is_ready:
            return
        self._error_prefix = "Loading error"
        self._set_busy(True, LOADING)
        self._bridge.run_coroutine(self._refresh_async())

    def reinstall_selected(self) -> None:
        devices = self.selected_devices()
        if self._busy or not devices:
            return
        self._error_prefix = "Reinstallation error"
        self._set_busy(True, REINSTALL_IN_PROGRESS)
        self._bridge.run_coroutine(self._reinstall_async(devices))

    def dispose(self) -> None:
        self._controller.dispose()

    # ----------------------------------------------------------------- Async

    async def _refresh_async(self) -> None:
        devices = await self._controller.refresh()
        self._model.set_devices(devices)
        self._set_busy(False, format_refresh_status(devices))

    async def _reinstall_async(self, devices: list[TaggedDevice]) -> None:
        summary: InstallBatchSummary = await self._controller.reinstall(devices)
        self._set_busy(False, format_install_summary(summary))

    def _handle_task_completed(self, _result: object, error: object) -> None:
        if error is None:
            return
        if isinstance(error, Exception):
            descriptor = describe_exception(error)
            self._set_busy(False, f"{self._error_prefix}: {descriptor.as_text()}")
        else:  # pragma: no cover - bridge only forwards exceptions
            self._set_busy(False, str(error))

    def _handle_install_event(self, event: InstallEvent) -> None:
        if event.status is InstallStatus.PENDING:
            return
        result = InstallResult(
            device_id=event.device_id,
            success=event.status is InstallStatus.SUCCEEDED,
            error=event.error,
        )
        self._set_status(format_install_result(result))

    # ----------------------------------------------------------------- Helpers

    def _set_busy(self, busy: bool, message: str) -> None:
        self._busy = busy
        self.progress.setVisible(busy)
        self.list_view.setEnabled(not busy)
        self._set_status(message)
        self._update_buttons()

    def _set_status(self, message: str) -> None:
        self.status_label.setText(message)
        self.statusChanged.emit(message)

    def _update_buttons(self) -> None:
        has_selection = self.list_view.selectionModel().hasSelection()
        self.reinstall_button.setEnabled(not self._busy and has_selection)
        self.refresh_button.setEnabled(not self._busy and self._controller.is_ready)


__all__ = ["DevicesWidget"]
