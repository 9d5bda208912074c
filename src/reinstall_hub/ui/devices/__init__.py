from .controller import DeviceController
from .models import DeviceListModel, DeviceRole
from .widgets import DevicesWidget

__all__ = ["DeviceController", "DeviceListModel", "DeviceRole", "DevicesWidget"]
