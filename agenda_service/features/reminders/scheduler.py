"""Periodic reminder scheduler.

Runs ReminderEngine on a fixed interval inside the service's event loop,
using an APScheduler interval job. Cycles never overlap: APScheduler
keeps at most one instance of the job, and ``run_cycle`` holds a lock
so manual runs cannot interleave with scheduled ones either.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING
from uuid import uuid4

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-untyped]
from apscheduler.triggers.interval import IntervalTrigger  # type: ignore[import-untyped]

from agenda_service.features.reminders.engine import CycleReport, ReminderEngine
from agenda_service.features.reminders.exceptions import CycleError
from agenda_service.infra.logging import remove_from_log_context, set_log_context
from agenda_service.infra.metrics import (
    reminder_cycle_duration_seconds,
    reminder_cycles_total,
    reminder_events_notified_total,
    reminder_imminent_events,
    reminder_overdue_events,
)
from agenda_service.utils.clock import Clock, SystemClock

if TYPE_CHECKING:
    from datetime import datetime

    from agenda_service.core.settings import ReminderSettings
    from agenda_service.infra.database import StorageGateway

logger = logging.getLogger(__name__)

JOB_ID = "reminder_cycle"


class ReminderScheduler:
    """Owns the periodic reminder task.

    Example:
        scheduler = ReminderScheduler(gateway, ReminderEngine(), interval_seconds=60)
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        gateway: StorageGateway | None,
        engine: ReminderEngine,
        *,
        interval_seconds: float = 60.0,
        clock: Clock | None = None,
    ) -> None:
        self._gateway = gateway
        self._engine = engine
        self._clock = clock or SystemClock()
        self.interval_seconds = interval_seconds
        self._lock = asyncio.Lock()
        self._scheduler: AsyncIOScheduler | None = None
        self._stopped = False
        self.last_report: CycleReport | None = None
        self.last_error: str | None = None

    @classmethod
    def from_settings(
        cls,
        gateway: StorageGateway | None,
        settings: ReminderSettings,
        *,
        clock: Clock | None = None,
    ) -> ReminderScheduler:
        return cls(
            gateway,
            ReminderEngine.from_settings(settings),
            interval_seconds=settings.interval_seconds,
            clock=clock,
        )

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def cycle_in_progress(self) -> bool:
        return self._lock.locked()

    def start(self) -> None:
        """Register the interval job and start ticking.

        Must be called from within the running event loop.
        """
        if self.running:
            logger.warning("Reminder scheduler is already running")
            return

        self._stopped = False
        self._scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": max(1, int(self.interval_seconds)),
            },
        )
        self._scheduler.add_job(
            func=self.tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name="Evaluate reminders",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Reminder scheduler started",
            extra={"interval_seconds": self.interval_seconds, "operation": "reminders.start"},
        )

    async def stop(self) -> None:
        """Stop ticking. No cycle runs after this returns."""
        self._stopped = True
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None and scheduler.running:
            scheduler.remove_all_jobs()
            scheduler.shutdown(wait=False)

        # Let a cycle that was already running finish or unwind
        async with self._lock:
            pass

        logger.info("Reminder scheduler stopped", extra={"operation": "reminders.stop"})

    async def tick(self) -> None:
        """Job body: run one cycle and absorb its failure."""
        if self._stopped:
            return
        try:
            await self.run_cycle()
        except CycleError as exc:
            self.last_error = str(exc)
            reminder_cycles_total.labels(status="failed").inc()
            logger.error(
                "Reminder cycle failed",
                exc_info=exc,
                extra={"phase": exc.phase, "error": str(exc.cause), "operation": "reminders.tick"},
            )
        except Exception as exc:
            self.last_error = str(exc)
            reminder_cycles_total.labels(status="failed").inc()
            logger.exception("Unexpected error in reminder cycle", extra={"operation": "reminders.tick"})

    async def run_cycle(self, now: datetime | None = None) -> CycleReport | None:
        """Evaluate reminders once.

        Returns None without touching storage when the gateway is not ready
        or another cycle is still running.

        Raises:
            CycleError: If a pass fails.
        """
        gateway = self._gateway
        if gateway is None or not gateway.is_ready:
            reminder_cycles_total.labels(status="skipped").inc()
            logger.debug("Database not ready, skipping reminder cycle")
            return None

        if self._lock.locked():
            reminder_cycles_total.labels(status="skipped").inc()
            logger.warning(
                "Previous reminder cycle still running, skipping",
                extra={"operation": "reminders.run_cycle"},
            )
            return None

        async with self._lock:
            set_log_context(cycle_id=uuid4().hex[:12])
            started = time.perf_counter()
            try:
                async with gateway.session() as session:
                    report = await self._engine.evaluate(session, now or self._clock.now())
            finally:
                remove_from_log_context("cycle_id")

            reminder_cycle_duration_seconds.observe(time.perf_counter() - started)
            reminder_cycles_total.labels(status="completed").inc()
            reminder_events_notified_total.inc(report.notified_count)
            reminder_imminent_events.set(len(report.imminent))
            reminder_overdue_events.set(len(report.overdue))

            self.last_report = report
            self.last_error = None
            return report
