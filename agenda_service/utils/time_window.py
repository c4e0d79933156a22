"""Calendar-day and sliding-window arithmetic over absolute instants.

Every function takes ``now`` explicitly so callers control the clock.
Naive datetimes are interpreted as UTC, which is how SQLite hands back
``DateTime(timezone=True)`` columns.
"""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta, tzinfo
import math


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def day_bounds(now: datetime, tz: tzinfo = UTC) -> tuple[datetime, datetime]:
    """UTC instants bounding the calendar day (in ``tz``) that contains ``now``.

    The interval is half-open: ``start <= t < end``.
    """
    local = ensure_utc(now).astimezone(tz)
    start_local = datetime.combine(local.date(), time.min, tzinfo=tz)
    end_local = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return start_local.astimezone(UTC), end_local.astimezone(UTC)


def is_same_day(ts: datetime, now: datetime, tz: tzinfo = UTC) -> bool:
    start, end = day_bounds(now, tz)
    return in_half_open_window(ts, start, end)


def in_closed_window(ts: datetime, start: datetime, end: datetime) -> bool:
    return ensure_utc(start) <= ensure_utc(ts) <= ensure_utc(end)


def in_half_open_window(ts: datetime, start: datetime, end: datetime) -> bool:
    return ensure_utc(start) <= ensure_utc(ts) < ensure_utc(end)


def imminent_window(now: datetime, minutes: int) -> tuple[datetime, datetime]:
    """Closed window ``[now, now + minutes]``."""
    now = ensure_utc(now)
    return now, now + timedelta(minutes=minutes)


def overdue_window(now: datetime, minutes: int) -> tuple[datetime, datetime]:
    """Half-open window ``[now - minutes, now)``."""
    now = ensure_utc(now)
    return now - timedelta(minutes=minutes), now


def minutes_until(ts: datetime, now: datetime) -> int:
    """Whole minutes remaining until ``ts``, floored."""
    delta = ensure_utc(ts) - ensure_utc(now)
    return math.floor(delta.total_seconds() / 60)


def minutes_since(ts: datetime, now: datetime) -> int:
    """Whole minutes elapsed since ``ts``, floored."""
    delta = ensure_utc(now) - ensure_utc(ts)
    return math.floor(delta.total_seconds() / 60)


def format_local_time(ts: datetime, tz: tzinfo = UTC) -> str:
    """``HH:MM`` wall-clock rendering of ``ts`` in ``tz``."""
    return ensure_utc(ts).astimezone(tz).strftime("%H:%M")
