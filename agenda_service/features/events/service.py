"""Service layer for event record-keeping."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from agenda_service.core.database import NotFoundError
from agenda_service.core.exceptions import ConflictException, NotFoundException
from agenda_service.core.services.base import BaseService
from agenda_service.core.settings import get_reminder_settings
from agenda_service.features.events.models import Event
from agenda_service.features.events.repository import EventRepository, get_event_repository
from agenda_service.features.events.schemas import (
    DISPLAY_LIMIT,
    DISPLAY_TITLE_LENGTH,
    DisplayFeed,
    DisplayItem,
    EventResponse,
    NotificationList,
    NotificationResponse,
)
from agenda_service.utils.clock import Clock, SystemClock
from agenda_service.utils.time_window import ensure_utc, format_local_time, minutes_until

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from agenda_service.core.settings import ReminderSettings
    from agenda_service.features.events.schemas import EventCreate, EventUpdate


class EventService(BaseService):
    """CRUD and read feeds over events.

    The service owns the transaction: each mutating method commits.
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: EventRepository | None = None,
        *,
        clock: Clock | None = None,
        settings: ReminderSettings | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repository = repository or get_event_repository()
        self._clock = clock or SystemClock()
        self._settings = settings or get_reminder_settings()
        self._tz = self._settings.tz

    def _to_instant(self, value: datetime) -> datetime:
        """Naive input is wall-clock time in the calendar zone."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=self._tz)
        return ensure_utc(value)

    async def _get_or_404(self, event_id: int) -> Event:
        try:
            return await self._repository.get_or_raise(self._session, event_id)
        except NotFoundError as exc:
            raise NotFoundException(
                detail=f"Event {event_id} not found",
                type="event-not-found",
                extra={"event_id": event_id},
            ) from exc

    async def list_events(self) -> list[Event]:
        return list(await self._repository.list_all(self._session))

    async def get_event(self, event_id: int) -> Event:
        return await self._get_or_404(event_id)

    async def create_event(self, payload: EventCreate) -> Event:
        event = Event(
            title=payload.title,
            description=payload.description,
            scheduled_time=self._to_instant(payload.scheduled_time),
            priority=payload.priority,
        )
        created = await self._repository.create(self._session, event)
        await self._session.commit()

        self.logger.info(
            "Event created",
            extra={
                "event_id": created.id,
                "title": payload.title[:50],
                "scheduled_time": created.scheduled_time.isoformat(),
                "operation": "service.create_event",
            },
        )
        return created

    async def update_event(self, event_id: int, payload: EventUpdate) -> Event:
        """Apply the fields present in ``payload``.

        Raises:
            NotFoundException: If the event does not exist.
            ConflictException: If the update would reopen a completed event.
        """
        event = await self._get_or_404(event_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if changes.get("completed") is False and event.completed:
            raise ConflictException(
                detail=f"Event {event_id} is completed and cannot be reopened",
                type="event-completed",
                extra={"event_id": event_id},
            )

        if "scheduled_time" in changes:
            changes["scheduled_time"] = self._to_instant(changes["scheduled_time"])
        for field, value in changes.items():
            setattr(event, field, value)

        await self._session.flush()
        await self._session.commit()
        await self._session.refresh(event)

        self.logger.info(
            "Event updated",
            extra={"event_id": event_id, "fields": sorted(changes), "operation": "service.update_event"},
        )
        return event

    async def complete_event(self, event_id: int) -> Event:
        event = await self._get_or_404(event_id)
        if event.completed:
            self._lazy.debug(lambda: f"service.complete_event({event_id}) -> already completed")
            return event

        event.completed = True
        await self._session.commit()
        await self._session.refresh(event)

        self.logger.info(
            "Event marked completed",
            extra={"event_id": event_id, "operation": "service.complete_event"},
        )
        return event

    async def delete_event(self, event_id: int) -> None:
        event = await self._get_or_404(event_id)
        await self._repository.delete(self._session, event)
        await self._session.commit()

    async def list_today(self) -> Sequence[Event]:
        return await self._repository.find_today(self._session, self._clock.now(), self._tz)

    async def list_pending(self) -> Sequence[Event]:
        return await self._repository.find_pending(self._session, self._clock.now())

    async def display_feed(self) -> DisplayFeed:
        """Today's open events in the compact form small displays poll for."""
        events = await self._repository.find_today(
            self._session,
            self._clock.now(),
            self._tz,
            include_completed=False,
            limit=DISPLAY_LIMIT,
        )
        items = [
            DisplayItem(
                t=event.title[:DISPLAY_TITLE_LENGTH],
                h=format_local_time(event.scheduled_time, self._tz),
                p=str(event.priority)[0].upper(),
            )
            for event in events
        ]
        return DisplayFeed(count=len(items), events=items)

    async def notifications(self) -> NotificationList:
        """Imminent events with their remaining minutes."""
        now = self._clock.now()
        events = await self._repository.find_imminent(
            self._session, now, self._settings.imminent_minutes
        )
        notifications = [
            NotificationResponse.model_validate(
                {
                    **EventResponse.model_validate(event).model_dump(),
                    "minutes_remaining": minutes_until(event.scheduled_time, now),
                }
            )
            for event in events
        ]
        return NotificationList(count=len(notifications), notifications=notifications)
