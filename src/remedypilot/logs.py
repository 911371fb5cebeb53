"""
Structured JSON logging for the service and CLI.

Library code only calls ``logging.getLogger(__name__)``; handlers are
attached here by the entry points.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from . import config

# Extra attributes copied into the JSON record when present
EXTRA_FIELDS = (
    "request_id",
    "domain",
    "jurisdiction",
    "category",
    "status",
    "confidence",
    "verdict_hash_short",
    "pack_path",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``remedypilot`` logger.

    Safe to call repeatedly; the handler is installed once.
    """
    level = level or config.RP_LOG_LEVEL
    json_format = config.RP_LOG_JSON if json_format is None else json_format

    logger = logging.getLogger("remedypilot")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in logger.handlers:
        if getattr(existing, "_remedypilot_handler", False):
            return logger

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._remedypilot_handler = True
    logger.addHandler(handler)
    return logger
