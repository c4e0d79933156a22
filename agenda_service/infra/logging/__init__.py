"""Logging infrastructure.

Structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, cycle_id, ...)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug output

Basic usage:
    from agenda_service.infra.logging import get_lazy_logger, set_log_context

    set_log_context(cycle_id="c-1")
    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Rows: {expensive_dump()}")
"""

from __future__ import annotations

from .config import configure_logging, setup_logging, shutdown
from .context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from .formatters import JSONFormatter
from .lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
