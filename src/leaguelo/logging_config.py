"""Logging setup for the API server and scripts."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from leaguelo.config import settings

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        level: Log level name, defaults to settings.log_level
        log_format: 'json' or 'console', defaults to settings.log_format
    """
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)
