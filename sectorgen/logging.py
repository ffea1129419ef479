"""Logging utilities for sectorgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "sectorgen"
_CONSOLE_FORMAT = "[sectorgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the sectorgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and, when ``log_file`` is given, a file sink.

    Calling this again replaces the handlers from the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    _reset_handlers(logger)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_path, encoding="utf-8")
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(sink)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]
