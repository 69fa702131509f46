# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging: one JSON line per record.

Fetch-chain records carry the roster they concern as a top-level
``roster_id`` field (pass ``extra={"roster_id": ...}``).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from roster_sync.core.config import settings

CONTEXT_FIELDS: tuple[str, ...] = ("roster_id",)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1]:
            error = record.exc_info[1]
            entry["error"] = str(error)
            entry["error_type"] = type(error).__name__
        return json.dumps(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger writing JSON lines to stdout at settings.LOG_LEVEL."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger
