"""Logging utilities for sourcepage commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "sourcepage"

_CONSOLE_FORMAT = "[sourcepage] %(levelname)s %(message)s"
_VERBOSE_CONSOLE_FORMAT = "[sourcepage] %(levelname)s %(component)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the sourcepage hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class _ComponentFormatter(logging.Formatter):
    """Adds ``component``: the logger name below the sourcepage prefix (walker, orchestrator)."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{_LOGGER_NAME}."
        name = record.name
        record.component = name[len(prefix):] if name.startswith(prefix) else name
        return super().format(record)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the sourcepage logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        _ComponentFormatter(_VERBOSE_CONSOLE_FORMAT) if verbose else logging.Formatter(_CONSOLE_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
