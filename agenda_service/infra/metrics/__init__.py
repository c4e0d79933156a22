from __future__ import annotations

from .prometheus import (
    REGISTRY,
    database_connect_attempts_total,
    database_ready,
    http_requests_total,
    reminder_cycle_duration_seconds,
    reminder_cycles_total,
    reminder_events_notified_total,
    reminder_imminent_events,
    reminder_overdue_events,
)

__all__ = [
    "REGISTRY",
    "database_connect_attempts_total",
    "database_ready",
    "http_requests_total",
    "reminder_cycle_duration_seconds",
    "reminder_cycles_total",
    "reminder_events_notified_total",
    "reminder_imminent_events",
    "reminder_overdue_events",
]
