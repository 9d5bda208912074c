"""ReinstallHub: reinstall the Workspace ONE Hub on Macs tagged as missing it."""

from __future__ import annotations

import asyncio
import sys

__version__ = "0.1.0"


def main() -> None:
    """Launch the desktop UI."""

    from PySide6.QtWidgets import QApplication
    from qasync import QEventLoop

    from reinstall_hub.config import SettingsManager
    from reinstall_hub.ui import MainWindow
    from reinstall_hub.utils import LoggingOptions, configure_logging, get_logger

    settings = SettingsManager().load()
    configure_logging(LoggingOptions(level=settings.log_level))
    logger = get_logger(__name__)
    logger.info("Starting ReinstallHub", version=__version__)

    app = QApplication(sys.argv)
    app.setApplicationName("ReinstallHub")
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app_close_event = asyncio.Event()
    app.aboutToQuit.connect(app_close_event.set)

    window = MainWindow()
    window.show()

    try:
        with loop:
            loop.run_until_complete(app_close_event.wait())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


__all__ = ["main", "__version__"]
