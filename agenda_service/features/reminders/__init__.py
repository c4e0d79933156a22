"""Reminders feature package."""

from .engine import CycleReport, OverdueEvent, ReminderEngine, ReminderSignal
from .exceptions import CycleError
from .router import router
from .scheduler import ReminderScheduler

__all__ = [
    "router",
    "CycleError",
    "CycleReport",
    "OverdueEvent",
    "ReminderEngine",
    "ReminderScheduler",
    "ReminderSignal",
]
