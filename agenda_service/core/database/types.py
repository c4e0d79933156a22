"""Custom SQLAlchemy types.

Types included:
- UTCDateTime: timezone-aware timestamps that always come back in UTC
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, TypeDecorator

from agenda_service.utils.time_window import ensure_utc

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


class UTCDateTime(TypeDecorator):
    """``DateTime(timezone=True)`` normalized to aware UTC in both directions.

    SQLite has no time zone storage and returns naive values; PostgreSQL
    returns the session zone. Either way callers see UTC.

    Example:
        scheduled_time: Mapped[datetime] = mapped_column(UTCDateTime(), index=True)
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return ensure_utc(value)
