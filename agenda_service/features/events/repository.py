"""Repository for the events feature.

All time predicates are evaluated against UTC instants; the calendar day
is resolved by the caller's time zone through ``day_bounds``. Every query
orders by ``scheduled_time`` ascending, then ``id`` for a stable order.
"""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

from sqlalchemy import select, update

from agenda_service.core.database import BaseRepository
from agenda_service.features.events.models import Event
from agenda_service.utils.time_window import day_bounds, ensure_utc, imminent_window, overdue_window

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime, tzinfo

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession


class EventRepository(BaseRepository[Event]):
    """Repository for Event model.

    Inherits from BaseRepository:
        - get(session, id) -> Event | None
        - get_or_raise(session, id) -> Event
        - create(session, instance) -> Event
        - delete(session, instance) -> None

    Reminder classification queries:
        - find_due_today_unnotified(session, now, tz)
        - find_imminent(session, now, minutes)
        - find_recently_overdue(session, now, minutes)
        - bulk_set_notified(session, ids) -> int
    """

    def __init__(self) -> None:
        super().__init__(Event)

    @staticmethod
    def _ordered(stmt: Select[tuple[Event]]) -> Select[tuple[Event]]:
        return stmt.order_by(Event.scheduled_time.asc(), Event.id.asc())

    async def _fetch(
        self,
        session: AsyncSession,
        stmt: Select[tuple[Event]],
        *,
        limit: int | None = None,
    ) -> Sequence[Event]:
        stmt = self._ordered(stmt)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_all(self, session: AsyncSession) -> Sequence[Event]:
        items = await self._fetch(session, select(Event))
        self._lazy.debug(lambda: f"db.list_all: Event -> {len(items)} items")
        return items

    async def find_scheduled_between(
        self,
        session: AsyncSession,
        start: datetime,
        end: datetime,
        *,
        include_end: bool = False,
        include_completed: bool = False,
        limit: int | None = None,
    ) -> Sequence[Event]:
        """Events with ``start <= scheduled_time < end`` (``<= end`` when ``include_end``)."""
        start, end = ensure_utc(start), ensure_utc(end)
        upper = Event.scheduled_time <= end if include_end else Event.scheduled_time < end
        stmt = select(Event).where(Event.scheduled_time >= start, upper)
        if not include_completed:
            stmt = stmt.where(Event.completed.is_(False))
        items = await self._fetch(session, stmt, limit=limit)

        self._lazy.debug(
            lambda: f"db.find_scheduled_between({start.isoformat()}, {end.isoformat()}) -> {len(items)} items"
        )
        return items

    async def find_today(
        self,
        session: AsyncSession,
        now: datetime,
        tz: tzinfo = UTC,
        *,
        include_completed: bool = True,
        limit: int | None = None,
    ) -> Sequence[Event]:
        start, end = day_bounds(now, tz)
        return await self.find_scheduled_between(
            session, start, end, include_completed=include_completed, limit=limit
        )

    async def find_pending(self, session: AsyncSession, now: datetime) -> Sequence[Event]:
        """Non-completed events scheduled at or after ``now``."""
        stmt = select(Event).where(
            Event.completed.is_(False),
            Event.scheduled_time >= ensure_utc(now),
        )
        items = await self._fetch(session, stmt)
        self._lazy.debug(lambda: f"db.find_pending -> {len(items)} items")
        return items

    async def find_due_today_unnotified(
        self,
        session: AsyncSession,
        now: datetime,
        tz: tzinfo = UTC,
    ) -> Sequence[Event]:
        """Events in the current calendar day, not completed, not yet notified."""
        start, end = day_bounds(now, tz)
        stmt = select(Event).where(
            Event.scheduled_time >= start,
            Event.scheduled_time < end,
            Event.completed.is_(False),
            Event.notified.is_(False),
        )
        items = await self._fetch(session, stmt)
        self._lazy.debug(lambda: f"db.find_due_today_unnotified -> {len(items)} items")
        return items

    async def find_imminent(self, session: AsyncSession, now: datetime, minutes: int) -> Sequence[Event]:
        """Non-completed events with ``now <= scheduled_time <= now + minutes``.

        Ignores ``notified``: an imminent event is reported on every cycle.
        """
        start, end = imminent_window(now, minutes)
        return await self.find_scheduled_between(session, start, end, include_end=True)

    async def find_recently_overdue(
        self,
        session: AsyncSession,
        now: datetime,
        minutes: int,
    ) -> Sequence[Event]:
        """Non-completed events with ``now - minutes <= scheduled_time < now``."""
        start, end = overdue_window(now, minutes)
        return await self.find_scheduled_between(session, start, end)

    async def bulk_set_notified(self, session: AsyncSession, ids: Iterable[int]) -> int:
        """Set ``notified`` on the given events in a single UPDATE.

        Rows that were completed or notified in the meantime are left alone.
        Returns the number of rows changed. The caller commits.
        """
        id_list = list(ids)
        if not id_list:
            return 0

        stmt = (
            update(Event)
            .where(
                Event.id.in_(id_list),
                Event.notified.is_(False),
                Event.completed.is_(False),
            )
            .values(notified=True)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        count = result.rowcount or 0

        self._lazy.debug(lambda: f"db.bulk_set_notified({len(id_list)} ids) -> {count} rows")
        return count


_event_repository: EventRepository | None = None


def get_event_repository() -> EventRepository:
    """Get the shared EventRepository instance.

    Usage in FastAPI routes:
        @router.get("/{event_id}")
        async def get_event(
            event_id: int,
            session: Annotated[AsyncSession, Depends(get_db_session)],
            repo: Annotated[EventRepository, Depends(get_event_repository)],
        ):
            return await repo.get_or_raise(session, event_id)
    """
    global _event_repository
    if _event_repository is None:
        _event_repository = EventRepository()
    return _event_repository
