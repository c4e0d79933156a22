"""Reminder classification passes.

One evaluation runs three passes against a single ``now``:

1. due today: open, not-yet-notified events in the current calendar day are
   flagged ``notified`` with one bulk update (idempotent across cycles);
2. imminent: open events starting within the look-ahead window are
   reported on every cycle, regardless of ``notified``;
3. recently overdue: open events that started within the look-back window
   are counted.

Passes 2 and 3 only read.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, tzinfo
import logging
from typing import TYPE_CHECKING, Any

from agenda_service.features.events.repository import EventRepository, get_event_repository
from agenda_service.features.reminders.exceptions import CycleError
from agenda_service.infra.logging import get_lazy_logger
from agenda_service.utils.time_window import ensure_utc, format_local_time, minutes_since, minutes_until

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from agenda_service.core.settings import ReminderSettings
    from agenda_service.features.events.models import Event

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class ReminderSignal:
    """An imminent event as reported by one cycle."""

    event_id: int
    title: str
    scheduled_time: datetime
    local_time: str
    minutes_remaining: int
    priority: str


@dataclass(slots=True, frozen=True)
class OverdueEvent:
    event_id: int
    title: str
    scheduled_time: datetime
    minutes_overdue: int


@dataclass(slots=True, frozen=True)
class CycleReport:
    """Outcome of one evaluation."""

    evaluated_at: datetime
    due_today_ids: tuple[int, ...] = ()
    notified_count: int = 0
    imminent: tuple[ReminderSignal, ...] = field(default_factory=tuple)
    overdue: tuple[OverdueEvent, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ReminderEngine:
    """Runs the three reminder passes over a session supplied by the caller."""

    def __init__(
        self,
        repository: EventRepository | None = None,
        *,
        imminent_minutes: int = 30,
        overdue_minutes: int = 60,
        tz: tzinfo = UTC,
    ) -> None:
        self._repository = repository or get_event_repository()
        self.imminent_minutes = imminent_minutes
        self.overdue_minutes = overdue_minutes
        self.tz = tz

    @classmethod
    def from_settings(
        cls,
        settings: ReminderSettings,
        repository: EventRepository | None = None,
    ) -> ReminderEngine:
        return cls(
            repository,
            imminent_minutes=settings.imminent_minutes,
            overdue_minutes=settings.overdue_minutes,
            tz=settings.tz,
        )

    async def evaluate(self, session: AsyncSession, now: datetime) -> CycleReport:
        """Run all passes in order.

        Raises:
            CycleError: If any pass fails; later passes are not run.
        """
        now = ensure_utc(now)
        due_ids, notified = await self.flag_due_today(session, now)
        imminent = await self.find_imminent(session, now)
        overdue = await self.find_recently_overdue(session, now)
        return CycleReport(
            evaluated_at=now,
            due_today_ids=due_ids,
            notified_count=notified,
            imminent=imminent,
            overdue=overdue,
        )

    async def flag_due_today(self, session: AsyncSession, now: datetime) -> tuple[tuple[int, ...], int]:
        """Flag today's open, unnotified events and commit.

        Returns the ids selected and the number of rows updated.
        """
        try:
            events = await self._repository.find_due_today_unnotified(session, now, self.tz)
            ids = tuple(event.id for event in events)
            if not ids:
                lazy_logger.debug("No unnotified events scheduled for today")
                return (), 0

            updated = await self._repository.bulk_set_notified(session, ids)
            await session.commit()
        except Exception as exc:
            raise CycleError("due_today", exc) from exc

        logger.info(
            f"{len(ids)} event(s) scheduled for today",
            extra={
                "count": len(ids),
                "notified": updated,
                "event_ids": list(ids),
                "operation": "reminders.flag_due_today",
            },
        )
        return ids, updated

    async def find_imminent(self, session: AsyncSession, now: datetime) -> tuple[ReminderSignal, ...]:
        try:
            events = await self._repository.find_imminent(session, now, self.imminent_minutes)
        except Exception as exc:
            raise CycleError("imminent", exc) from exc

        signals = tuple(self._signal(event, now) for event in events)
        for signal in signals:
            logger.info(
                f'REMINDER: "{signal.title}" in {signal.minutes_remaining} min ({signal.local_time})',
                extra={
                    "event_id": signal.event_id,
                    "minutes_remaining": signal.minutes_remaining,
                    "local_time": signal.local_time,
                    "priority": signal.priority,
                    "operation": "reminders.imminent",
                },
            )
        return signals

    async def find_recently_overdue(self, session: AsyncSession, now: datetime) -> tuple[OverdueEvent, ...]:
        try:
            events = await self._repository.find_recently_overdue(session, now, self.overdue_minutes)
        except Exception as exc:
            raise CycleError("overdue", exc) from exc

        overdue = self._overdue(events, now)
        if overdue:
            logger.warning(
                f"{len(overdue)} event(s) overdue in the last {self.overdue_minutes} min",
                extra={
                    "count": len(overdue),
                    "event_ids": [item.event_id for item in overdue],
                    "operation": "reminders.overdue",
                },
            )
        return overdue

    def _signal(self, event: Event, now: datetime) -> ReminderSignal:
        scheduled = ensure_utc(event.scheduled_time)
        return ReminderSignal(
            event_id=event.id,
            title=event.title,
            scheduled_time=scheduled,
            local_time=format_local_time(scheduled, self.tz),
            minutes_remaining=minutes_until(scheduled, now),
            priority=str(event.priority),
        )

    @staticmethod
    def _overdue(events: Sequence[Event], now: datetime) -> tuple[OverdueEvent, ...]:
        return tuple(
            OverdueEvent(
                event_id=event.id,
                title=event.title,
                scheduled_time=ensure_utc(event.scheduled_time),
                minutes_overdue=minutes_since(event.scheduled_time, now),
            )
            for event in events
        )
