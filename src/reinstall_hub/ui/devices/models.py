from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import QAbstractListModel, QModelIndex, QPersistentModelIndex, Qt

from reinstall_hub.data import TaggedDevice
from reinstall_hub.utils.formatters import format_tagged_at


DeviceRole = Qt.ItemDataRole.UserRole + 1

_Index = QModelIndex | QPersistentModelIndex


class DeviceListModel(QAbstractListModel):
    """List model exposing tagged devices by friendly name."""

    def __init__(self, devices: Sequence[TaggedDevice] | None = None) -> None:
        super().__init__()
        self._devices: list[TaggedDevice] = list(devices or [])

    def rowCount(self, parent: _Index = QModelIndex()) -> int:  # noqa: N802
        if parent.isValid():
            return 0
        return len(self._devices)

    def data(self, index: _Index, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid() or not 0 <= index.row() < len(self._devices):
            return None
        device = self._devices[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return device.display_name
        if role == Qt.ItemDataRole.ToolTipRole:
            tagged = format_tagged_at(device.tagged_at, device.date_tagged or "unknown")
            return f"Device ID {device.id}\nUUID {device.device_uuid or '-'}\nTagged {tagged}"
        if role == DeviceRole:
            return device
        return None

    def set_devices(self, devices: Sequence[TaggedDevice]) -> None:
        self.beginResetModel()
        self._devices = list(devices)
        self.endResetModel()

    def devices(self) -> list[TaggedDevice]:
        return list(self._devices)

    def device_at(self, row: int) -> TaggedDevice | None:
        if 0 <= row < len(self._devices):
            return self._devices[row]
        return None

    def row_for_device(self, device_id: int) -> int | None:
        for row, device in enumerate(self._devices):
            if device.id == device_id:
                return row
        return None


__all__ = ["DeviceListModel", "DeviceRole"]
