"""Pydantic schemas for the events feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agenda_service.features.events.models import EventPriority
from agenda_service.utils.time_window import ensure_utc

DISPLAY_TITLE_LENGTH = 30
DISPLAY_LIMIT = 10


class EventBase(BaseModel):
    """Shared attributes for event payloads."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    scheduled_time: datetime = Field(
        ...,
        description="When the event happens. Naive values are read in the configured calendar time zone.",
    )
    priority: EventPriority = EventPriority.NORMAL

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "title must not be blank"
            raise ValueError(msg)
        return value


class EventCreate(EventBase):
    """Payload used when creating an event."""


class EventUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    scheduled_time: datetime | None = None
    priority: EventPriority | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            msg = "title must not be blank"
            raise ValueError(msg)
        return value


class EventResponse(EventBase):
    """Representation returned from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    completed: bool
    notified: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("scheduled_time", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class NotificationResponse(EventResponse):
    """An imminent event with the whole minutes left before it starts."""

    minutes_remaining: int


class NotificationList(BaseModel):
    count: int
    notifications: list[NotificationResponse]


class DisplayItem(BaseModel):
    """Compact entry for small displays."""

    t: str = Field(description=f"Title, truncated to {DISPLAY_TITLE_LENGTH} characters")
    h: str = Field(description="Local time as HH:MM")
    p: str = Field(description="Priority initial: H, N or L")


class DisplayFeed(BaseModel):
    count: int
    events: list[DisplayItem]


__all__ = [
    "DISPLAY_LIMIT",
    "DISPLAY_TITLE_LENGTH",
    "DisplayFeed",
    "DisplayItem",
    "EventBase",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "NotificationList",
    "NotificationResponse",
]
