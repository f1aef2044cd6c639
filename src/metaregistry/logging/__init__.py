"""Logging infrastructure for metaregistry.

This module provides structured logging with JSON output, decoration context
tracking and OpenTelemetry trace correlation.
"""

from metaregistry.logging.filters import (
    ContextFilter,
    clear_decoration_context,
    decoration_context,
    set_decoration_context,
)
from metaregistry.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "decoration_context",
    "set_decoration_context",
    "clear_decoration_context",
]
