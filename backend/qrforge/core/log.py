"""Logging setup for the qrforge namespace."""

import logging
from datetime import datetime, timezone

ROOT_LOGGER = "qrforge"


class ConsoleFormatter(logging.Formatter):
    """Compact single-line console output."""

    def format(self, record):
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        line = f"{ts} {record.levelname:7s} [{record.name}] {record.getMessage()}"
        if record.exc_info and record.exc_info[1]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO"):
    """Configure the root qrforge logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(ConsoleFormatter())
    root.addHandler(console)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger scoped under the qrforge namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module_name}")
