from .controller import ConfigurationController, ConfigurationSnapshot
from .widgets import ConfigurationWidget

__all__ = ["ConfigurationController", "ConfigurationSnapshot", "ConfigurationWidget"]
