"""Stdout logging for the projects_api logger tree, plain text or one JSON object per line."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level_name: str = "INFO", use_json: bool = False) -> None:
    """Attach a single stdout handler to the projects_api logger. Later calls are no-ops."""
    global _configured
    if _configured:
        return

    level = logging.getLevelName((level_name or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(PLAIN_FORMAT))

    app_logger = logging.getLogger("projects_api")
    app_logger.handlers.clear()
    app_logger.addHandler(handler)
    app_logger.setLevel(level)
    app_logger.propagate = False
    _configured = True
    app_logger.info("Logging configured (level=%s, json=%s)", logging.getLevelName(level), use_json)
