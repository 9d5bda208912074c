"""structlog front end that writes through loguru sinks.

Modules log with ``get_logger(__name__)`` and key/value context. Each event
is handed to loguru, which writes it to stderr (optional) and to a rotating
file in the per-user cache directory.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import structlog
from loguru import logger as loguru_logger
from structlog.exceptions import DropEvent
from structlog.stdlib import BoundLogger
from structlog.typing import EventDict, WrappedLogger

from reinstall_hub.config.settings import log_dir


LOG_FILENAME = "reinstall-hub.log"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message} | {extra}"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_LOGURU_LEVELS = {"warn": "WARNING", "exception": "ERROR", "msg": "INFO"}

_configured = False


@dataclass(slots=True)
class LoggingOptions:
    level: str = "INFO"
    debug: bool = False
    console: bool = True
    log_path: Path | None = None
    rotation: str = "5 MB"
    retention: str = "14 days"

    def console_level(self) -> str:
        if self.debug:
            return "DEBUG"
        level = self.level.strip().upper()
        return level if level in _LEVELS else "INFO"


class LoguruForwarder:
    """Last structlog processor: emit the event on loguru and stop the chain."""

    def __call__(
        self,
        _logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        level = _LOGURU_LEVELS.get(method_name, method_name.upper())
        message = str(event_dict.pop("event", ""))
        traceback_text = event_dict.pop("exception", None)
        if traceback_text:
            message = f"{message}\n{traceback_text}"
        loguru_logger.bind(**event_dict).log(level, message)
        raise DropEvent


def configure_logging(options: LoggingOptions | None = None) -> Path:
    """Install the loguru sinks and route structlog into them.

    Returns the path of the log file.
    """

    global _configured

    opts = options or LoggingOptions()
    log_path = opts.log_path or log_dir() / LOG_FILENAME

    loguru_logger.remove()
    if opts.console:
        loguru_logger.add(
            sys.stderr,
            level=opts.console_level(),
            colorize=True,
            backtrace=opts.debug,
            diagnose=opts.debug,
            format=LOG_FORMAT,
        )
    loguru_logger.add(
        log_path,
        level="DEBUG",
        rotation=opts.rotation,
        retention=opts.retention,
        encoding="utf-8",
        format=LOG_FORMAT,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            LoguruForwarder(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        cache_logger_on_first_use=False,
    )
    _configured = True
    return log_path


def get_logger(name: str | None = None) -> BoundLogger:
    """Return a structlog logger tagged with the calling module's name."""

    if not _configured:
        configure_logging()
    if name is None:
        return cast(BoundLogger, structlog.get_logger())
    return cast(BoundLogger, structlog.get_logger(component=name))


__all__ = ["LoggingOptions", "LoguruForwarder", "configure_logging", "get_logger"]
