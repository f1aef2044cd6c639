"""Structured logging for metaregistry.

Every module logs through ``logging.getLogger(__name__)`` under the
``metaregistry`` namespace and nothing is configured on import. Applications
that want the registry's own JSON output call :func:`setup_logging`; others
let records propagate to whatever handlers they already have.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional

from opentelemetry import trace

PACKAGE_LOGGER = "metaregistry"

# Attributes every LogRecord carries; anything else on a record came from
# ``extra=`` or a filter and is emitted as a JSON field.
_STANDARD_ATTRIBUTES: FrozenSet[str] = frozenset(
    vars(logging.makeLogRecord({})).keys() | {"asctime", "message"}
)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Fixed fields are ``timestamp``, ``level``, ``logger`` and ``message``.
    Extra record attributes (metadata keys, decoration target and member, SDK
    name) are copied as they are. Records logged inside a recording span also
    carry ``trace_id`` and ``span_id``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRIBUTES
        }
        payload.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            payload["trace_id"] = trace.format_trace_id(span_context.trace_id)
            payload["span_id"] = trace.format_span_id(span_context.span_id)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Send ``metaregistry`` logs to stdout as JSON.

    Only the package logger is touched: it gets a single stdout handler with
    the JSON formatter and the decoration context filter, and stops
    propagating to the root logger.

    Args:
        level: Level name for the package logger. ``RegistrySettings.log_level``
            is used when omitted.
    """
    if level is None:
        from metaregistry.settings import get_settings
        level = get_settings().log_level
    level = level.upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "registry_json": {"()": CustomJsonFormatter},
        },
        "filters": {
            "decoration_context": {"()": "metaregistry.logging.filters.ContextFilter"},
        },
        "handlers": {
            "registry_stdout": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "registry_json",
                "filters": ["decoration_context"],
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            PACKAGE_LOGGER: {
                "level": level,
                "handlers": ["registry_stdout"],
                "propagate": False,
            },
        },
    })
