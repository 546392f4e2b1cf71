"""Logging system with Rich support."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from bpm.core.config.settings import LoggingSettings, get_settings

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_loggers: dict[str, logging.Logger] = {}


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Route bpm's log records to stderr and an optional log file.

    Replaces any handlers already installed on the root logger, so the CLI
    can call it again once the configuration file has been read.

    Args:
        settings: Logging settings. Uses environment settings if not provided.
    """
    if settings is None:
        settings = get_settings().logging
    level = getattr(logging, settings.level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler: logging.Handler
    if settings.use_rich:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))
    root_logger.addHandler(handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger by name.

    The first call installs the default handlers when nothing else has.
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
        if not logging.getLogger().handlers:
            setup_logging()

    return _loggers[name]
