"""CLI utilities for running async operations and formatting output."""

from agenda_service.cli.utils.async_runner import coro
from agenda_service.cli.utils.formatters import (
    error,
    header,
    info,
    success,
)

__all__ = [
    "coro",
    "error",
    "info",
    "success",
    "header",
]
