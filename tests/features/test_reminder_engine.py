"""Tests for the reminder classification passes."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import select

from agenda_service.features.events.models import Event, EventPriority
from agenda_service.features.events.repository import EventRepository
from agenda_service.features.reminders import CycleError, ReminderEngine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class BrokenRepository(EventRepository):
    """Fails the chosen query."""

    def __init__(self, failing: str) -> None:
        super().__init__()
        self.failing = failing

    async def find_due_today_unnotified(self, session, now, tz=UTC):
        if self.failing == "due_today":
            raise RuntimeError("due query failed")
        return await super().find_due_today_unnotified(session, now, tz)

    async def find_imminent(self, session, now, minutes):
        if self.failing == "imminent":
            raise RuntimeError("imminent query failed")
        return await super().find_imminent(session, now, minutes)

    async def find_recently_overdue(self, session, now, minutes):
        if self.failing == "overdue":
            raise RuntimeError("overdue query failed")
        return await super().find_recently_overdue(session, now, minutes)


async def _notified(session: AsyncSession) -> dict[str, bool]:
    result = await session.execute(select(Event.title, Event.notified))
    return dict(result.all())


@pytest.fixture
def engine() -> ReminderEngine:
    return ReminderEngine(EventRepository())


class TestDueToday:
    async def test_flags_open_events_once(self, make_event, db_session: AsyncSession, engine: ReminderEngine):
        morning = await make_event(title="morning", scheduled_time=NOW - timedelta(hours=2))
        evening = await make_event(title="evening", scheduled_time=NOW + timedelta(hours=10))
        await make_event(title="done", scheduled_time=NOW, completed=True)
        await make_event(title="tomorrow", scheduled_time=NOW + timedelta(days=1))

        first = await engine.evaluate(db_session, NOW)
        second = await engine.evaluate(db_session, NOW + timedelta(minutes=1))

        assert first.due_today_ids == (morning.id, evening.id)
        assert first.notified_count == 2
        assert second.due_today_ids == ()
        assert second.notified_count == 0
        assert await _notified(db_session) == {
            "morning": True,
            "evening": True,
            "done": False,
            "tomorrow": False,
        }

    async def test_commits_the_flag(self, make_event, db_session: AsyncSession, engine: ReminderEngine, gateway):
        await make_event(title="today")

        await engine.evaluate(db_session, NOW)

        async with gateway.session() as other:
            assert await _notified(other) == {"today": True}

    async def test_calendar_zone(self, make_event, db_session: AsyncSession):
        # 23:30 UTC is tomorrow in Madrid
        await make_event(title="late", scheduled_time=datetime(2026, 3, 2, 23, 30, tzinfo=UTC))
        madrid = ReminderEngine(EventRepository(), tz=ZoneInfo("Europe/Madrid"))

        report = await madrid.evaluate(db_session, NOW)

        assert report.due_today_ids == ()

    async def test_logs_count(self, make_event, db_session: AsyncSession, engine, caplog):
        await make_event(title="a")
        await make_event(title="b")

        with caplog.at_level(logging.INFO, logger="agenda_service.features.reminders.engine"):
            await engine.evaluate(db_session, NOW)

        assert "2 event(s) scheduled for today" in caplog.text


class TestImminent:
    async def test_window_edges(self, make_event, db_session: AsyncSession, engine: ReminderEngine):
        await make_event(title="+15", scheduled_time=NOW + timedelta(minutes=15))
        await make_event(title="+30", scheduled_time=NOW + timedelta(minutes=30))
        await make_event(title="+31", scheduled_time=NOW + timedelta(minutes=31))
        await make_event(title="done", scheduled_time=NOW + timedelta(minutes=10), completed=True)

        report = await engine.evaluate(db_session, NOW)

        assert [(s.title, s.minutes_remaining) for s in report.imminent] == [("+15", 15), ("+30", 30)]

    async def test_re_emitted_every_cycle(self, make_event, db_session: AsyncSession, engine: ReminderEngine):
        await make_event(title="soon", scheduled_time=NOW + timedelta(minutes=20))

        first = await engine.evaluate(db_session, NOW)
        second = await engine.evaluate(db_session, NOW + timedelta(minutes=1))

        assert [s.minutes_remaining for s in first.imminent] == [20]
        assert [s.minutes_remaining for s in second.imminent] == [19]

    async def test_signal_carries_local_time_and_priority(self, make_event, db_session, engine, caplog):
        standup = await make_event(
            title="Standup",
            scheduled_time=NOW + timedelta(minutes=15),
            priority=EventPriority.HIGH,
        )

        with caplog.at_level(logging.INFO, logger="agenda_service.features.reminders.engine"):
            report = await engine.evaluate(db_session, NOW)

        (signal,) = report.imminent
        assert signal.event_id == standup.id
        assert signal.local_time == "09:15"
        assert signal.priority == "high"
        assert 'REMINDER: "Standup" in 15 min (09:15)' in caplog.text


class TestOverdue:
    async def test_window_edges(self, make_event, db_session: AsyncSession, engine: ReminderEngine):
        await make_event(title="-45", scheduled_time=NOW - timedelta(minutes=45))
        await make_event(title="-61", scheduled_time=NOW - timedelta(minutes=61))
        await make_event(title="now", scheduled_time=NOW)

        report = await engine.evaluate(db_session, NOW)

        assert [(o.title, o.minutes_overdue) for o in report.overdue] == [("-45", 45)]

    async def test_completed_excluded(self, make_event, db_session: AsyncSession, engine: ReminderEngine):
        await make_event(title="done", scheduled_time=NOW - timedelta(minutes=10), completed=True)

        report = await engine.evaluate(db_session, NOW)

        assert report.overdue == ()


class TestFailures:
    @pytest.mark.parametrize("phase", ["due_today", "imminent", "overdue"])
    async def test_failure_names_the_phase(self, phase: str, make_event, db_session: AsyncSession):
        await make_event(title="x")
        engine = ReminderEngine(BrokenRepository(phase))

        with pytest.raises(CycleError) as exc_info:
            await engine.evaluate(db_session, NOW)

        assert exc_info.value.phase == phase
        assert isinstance(exc_info.value.cause, RuntimeError)


def test_report_to_dict():
    from agenda_service.features.reminders import CycleReport

    report = CycleReport(evaluated_at=NOW, due_today_ids=(1,), notified_count=1)
    assert report.to_dict()["due_today_ids"] == (1,)
    assert report.to_dict()["imminent"] == ()


class TestScenarios:
    async def test_standup_flagged_early_then_imminent(self, make_event, db_session: AsyncSession, engine):
        standup = await make_event(
            title="Standup",
            scheduled_time=datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
            priority=EventPriority.HIGH,
        )

        early = await engine.evaluate(db_session, datetime(2024, 1, 1, 7, 0, tzinfo=UTC))
        report = await engine.evaluate(db_session, datetime(2024, 1, 1, 8, 50, tzinfo=UTC))

        assert early.due_today_ids == (standup.id,)
        assert early.imminent == ()
        assert report.due_today_ids == ()
        assert [(s.title, s.minutes_remaining) for s in report.imminent] == [("Standup", 10)]
        assert await _notified(db_session) == {"Standup": True}

    async def test_event_moves_from_imminent_to_overdue(self, make_event, db_session: AsyncSession, engine):
        await make_event(title="call", scheduled_time=NOW + timedelta(minutes=15))

        before = await engine.evaluate(db_session, NOW)
        after = await engine.evaluate(db_session, NOW + timedelta(minutes=31))
        gone = await engine.evaluate(db_session, NOW + timedelta(minutes=15 + 61))

        assert [s.title for s in before.imminent] == ["call"]
        assert before.overdue == ()
        assert after.imminent == ()
        assert [(o.title, o.minutes_overdue) for o in after.overdue] == [("call", 16)]
        assert gone.imminent == ()
        assert gone.overdue == ()

    async def test_completed_never_mutated(self, make_event, db_session: AsyncSession, engine):
        await make_event(title="done-today", scheduled_time=NOW + timedelta(minutes=5), completed=True)
        await make_event(title="done-past", scheduled_time=NOW - timedelta(minutes=5), completed=True)

        for minute in range(0, 120, 30):
            report = await engine.evaluate(db_session, NOW + timedelta(minutes=minute))
            assert report.imminent == ()
            assert report.overdue == ()

        assert await _notified(db_session) == {"done-today": False, "done-past": False}
