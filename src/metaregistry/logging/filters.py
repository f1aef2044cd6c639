"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
so log lines emitted while decorators run can be tied back to the target and
member being decorated.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from metaregistry.__version__ import __version__

decoration_target_var: ContextVar[Optional[str]] = ContextVar("decoration_target", default=None)
decoration_member_var: ContextVar[Optional[str]] = ContextVar("decoration_member", default=None)


class ContextFilter(logging.Filter):
    """Logging filter that adds decoration context variables to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "decoration_target", decoration_target_var.get())
        setattr(record, "decoration_member", decoration_member_var.get())
        setattr(record, "sdk_name", "metaregistry")
        setattr(record, "sdk_version", __version__)

        return True


def set_decoration_context(
    target: Optional[str] = None,
    member: Optional[str] = None,
) -> None:
    """Set decoration context variables."""
    if target is not None:
        decoration_target_var.set(target)
    if member is not None:
        decoration_member_var.set(member)


def clear_decoration_context() -> None:
    """Clear all decoration context variables."""
    decoration_target_var.set(None)
    decoration_member_var.set(None)


@contextmanager
def decoration_context(target: Optional[str], member: Optional[str] = None) -> Iterator[None]:
    """Scope the decoration context to a block, restoring the outer values."""
    target_token = decoration_target_var.set(target)
    member_token = decoration_member_var.set(member)
    try:
        yield
    finally:
        decoration_member_var.reset(member_token)
        decoration_target_var.reset(target_token)
