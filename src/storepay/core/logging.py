"""
Logging setup for StorePay.

All package loggers hang off the ``storepay`` logger, so one call to
``configure_logging`` controls the payment core, the gateway adapters and
the webhook dispatcher together:

    storepay.client
    storepay.coordinator
    storepay.gateways.<gateway id>
    storepay.webhooks
    storepay.store
"""

import json
import logging
import sys

LOGGER_NAME = "storepay"

TEXT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record. Messages are escaped, never interpolated raw."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _level(level: int | str) -> int | str:
    return level.upper() if isinstance(level, str) else level


def configure_logging(level: int | str = logging.INFO, json_format: bool = False) -> logging.Logger:
    """
    Install a single stdout handler on the ``storepay`` logger.

    Calling it again replaces the handler, so the level or format can be
    switched at runtime. Records do not propagate to the root logger.

    Args:
        level: Logging level, as a number or a name ("debug", "INFO")
        json_format: Emit JSON lines instead of plain text

    Returns:
        The ``storepay`` logger
    """
    level = _level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """``storepay.<name>``, or the package logger itself."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
