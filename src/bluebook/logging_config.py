"""Logging configuration for bluebook.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
single handler to the ``bluebook`` logger.
"""

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "bluebook"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "WARNING", json_format: bool = False) -> logging.Logger:
    """Configure the bluebook logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of plain text

    Returns:
        The configured ``bluebook`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger
