"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry so tests and the /metrics endpoint see only service metrics
REGISTRY = CollectorRegistry()

# Reminder cycles are short: a handful of indexed queries and one bulk update
CYCLE_DURATION_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

# Database bootstrap metrics
database_connect_attempts_total = Counter(
    "database_connect_attempts_total",
    "Storage connection attempts made by the startup bootstrapper",
    ["outcome"],
    registry=REGISTRY,
)

database_ready = Gauge(
    "database_ready",
    "Whether the storage gateway is established (1) or not (0)",
    registry=REGISTRY,
)

# Reminder scheduler metrics
reminder_cycles_total = Counter(
    "reminder_cycles_total",
    "Reminder evaluation cycles by final status",
    ["status"],
    registry=REGISTRY,
)

reminder_cycle_duration_seconds = Histogram(
    "reminder_cycle_duration_seconds",
    "Duration of completed reminder evaluation cycles",
    buckets=CYCLE_DURATION_BUCKETS,
    registry=REGISTRY,
)

reminder_events_notified_total = Counter(
    "reminder_events_notified_total",
    "Events flagged as notified by the due-today pass",
    registry=REGISTRY,
)

reminder_imminent_events = Gauge(
    "reminder_imminent_events",
    "Imminent events found by the last completed cycle",
    registry=REGISTRY,
)

reminder_overdue_events = Gauge(
    "reminder_overdue_events",
    "Recently overdue events found by the last completed cycle",
    registry=REGISTRY,
)
