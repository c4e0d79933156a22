"""Reminder evaluation errors."""

from __future__ import annotations


class CycleError(Exception):
    """A reminder cycle failed in one of its passes.

    The cycle is abandoned; the next scheduled cycle starts from scratch.

    Attributes:
        phase: The pass that failed (``due_today``, ``imminent`` or ``overdue``).
        cause: The underlying exception.
    """

    def __init__(self, phase: str, cause: Exception) -> None:
        self.phase = phase
        self.cause = cause
        super().__init__(f"Reminder cycle failed during {phase}: {type(cause).__name__}: {cause}")
