"""Logging setup and structured log helpers for CORS handling.

``setup_logging`` configures the root logger for an application; ``init_cors``
calls it when ``LOG_SETUP_ENABLED`` is set.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

LOGGING_CONFIG_FLAG = "_logging_configured"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JSONLogFormatter(logging.Formatter):
    """Format LogRecord instances into single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value

        return json.dumps(payload, separators=(",", ":"), default=str)


def setup_logging(app) -> None:
    """Configure root logging from ``LOG_LEVEL``, ``LOG_JSON_ENABLED`` and ``LOG_FORMAT``."""

    if app.config.get(LOGGING_CONFIG_FLAG):
        return

    level = _resolve_level(app.config.get("LOG_LEVEL", "INFO"))
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if to_bool(app.config.get("LOG_JSON_ENABLED", False)):
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(app.config.get("LOG_FORMAT", DEFAULT_LOG_FORMAT)))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    app.logger.handlers = []
    app.logger.setLevel(level)
    app.logger.propagate = True

    app.config[LOGGING_CONFIG_FLAG] = True


def cors_log_extra(
    *,
    event: str,
    method: str,
    origin: str | None,
    allowed_origin: str | None,
    status: int | None = None,
    preflight: bool = False,
) -> dict[str, Any]:
    """Build the ``extra=`` payload for a CORS decision log line."""

    payload: dict[str, Any] = {
        "event": event,
        "method": method,
        "origin": origin or None,
        "allowed_origin": allowed_origin,
        "status": status,
        "preflight": preflight,
    }
    return {key: value for key, value in payload.items() if value is not None}


def _resolve_level(level_name: Any) -> int:
    if isinstance(level_name, int):
        return level_name
    if not level_name:
        return logging.INFO
    return getattr(logging, str(level_name).upper(), logging.INFO)


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
