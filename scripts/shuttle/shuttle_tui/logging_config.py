"""Logging setup and the crash hook.

The terminal belongs to the UI while the dashboard runs, so log records go
to a file in the data directory rather than to the console.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.traceback import Traceback

LOGGER_NAME = "shuttle_tui"
LOG_FILE_NAME = "shuttle-tui.log"
LOG_LEVEL_ENV = "SHUTTLE_TUI_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def resolve_level(level: str | int | None = None) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def setup_logging(level: str | int | None = None, log_file: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(resolve_level(level))
    logger.propagate = False

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        logger.addHandler(logging.NullHandler())
    return logger


def install_panic_hook(restore: Callable[[], None], console: Console | None = None) -> None:
    """Restore the terminal before an uncaught exception is reported."""
    err_console = console or Console(stderr=True)
    previous = sys.excepthook

    def hook(exc_type, exc, tb):
        try:
            restore()
        finally:
            logging.getLogger(LOGGER_NAME).critical("uncaught exception", exc_info=(exc_type, exc, tb))
            if issubclass(exc_type, KeyboardInterrupt):
                previous(exc_type, exc, tb)
            else:
                err_console.print(Traceback.from_exception(exc_type, exc, tb))

    sys.excepthook = hook
