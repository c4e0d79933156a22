"""SQLAlchemy models for the events feature."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, Enum, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, validates

from agenda_service.core.database import Base, IntegerPKMixin, TimestampMixin, UTCDateTime
from agenda_service.utils.time_window import ensure_utc


class EventPriority(StrEnum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class Event(Base, IntegerPKMixin, TimestampMixin):
    """A dated agenda entry.

    ``scheduled_time`` is an absolute instant and is always stored in UTC.
    ``notified`` is written only by the reminder scheduler's due-today pass,
    and only ever from false to true.
    """

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_completed_scheduled_time", "completed", "scheduled_time"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    scheduled_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        index=True,
    )
    priority: Mapped[EventPriority] = mapped_column(
        Enum(
            EventPriority,
            native_enum=False,
            length=10,
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        default=EventPriority.NORMAL,
        server_default=EventPriority.NORMAL.value,
        nullable=False,
    )
    completed: Mapped[bool] = mapped_column(Boolean(), default=False, server_default=false(), nullable=False)
    notified: Mapped[bool] = mapped_column(Boolean(), default=False, server_default=false(), nullable=False)

    @validates("scheduled_time")
    def _normalize_scheduled_time(self, key: str, value: datetime) -> datetime:
        return ensure_utc(value)

    def __repr__(self) -> str:
        return f"Event(id={self.id!r}, title={self.title!r}, scheduled_time={self.scheduled_time!r})"
