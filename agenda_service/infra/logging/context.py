"""Context management for structured logging.

Log context lives in a ContextVar so each asyncio task (request handler,
scheduler cycle) carries its own fields without passing them explicitly.
"""

from __future__ import annotations

from contextvars import ContextVar
import logging
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        set_log_context(cycle_id="c-17")
        logger.info("Cycle started")  # record carries cycle_id
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    return _log_context.get().copy()


def clear_log_context() -> None:
    _log_context.set({})


def remove_from_log_context(*keys: str) -> None:
    current = _log_context.get().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


class ContextInjectingFilter(logging.Filter):
    """Copy the current log context onto every LogRecord.

    Installed on the queue handler by ``configure_logging`` so formatters
    (especially JSONFormatter) see context fields as record attributes.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
