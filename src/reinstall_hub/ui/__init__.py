"""PySide6 user interface for ReinstallHub."""

from .configuration import ConfigurationController, ConfigurationWidget
from .devices import DeviceController, DeviceListModel, DevicesWidget
from .main import MainWindow

__all__ = [
    "ConfigurationController",
    "ConfigurationWidget",
    "DeviceController",
    "DeviceListModel",
    "DevicesWidget",
    "MainWindow",
]
