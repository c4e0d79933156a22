"""Reminder commands."""

from __future__ import annotations

import json
import sys

import click

from agenda_service.cli.commands.database import connect_or_exit
from agenda_service.cli.utils import coro, error, header, info, success
from agenda_service.core.settings import get_reminder_settings
from agenda_service.features.reminders import CycleError, ReminderScheduler


@click.group(name="reminders")
def reminders() -> None:
    """Reminder scheduler commands."""


@reminders.command(name="run-once")
@click.option("--json", "as_json", is_flag=True, help="Print the cycle report as JSON")
@coro
async def run_once(as_json: bool) -> None:
    """Run a single reminder cycle and print what it found."""
    gateway = await connect_or_exit()
    scheduler = ReminderScheduler.from_settings(gateway, get_reminder_settings())
    try:
        report = await scheduler.run_cycle()
    except CycleError as e:
        error(str(e))
        sys.exit(1)
    finally:
        await gateway.close()

    if report is None:
        error("Cycle skipped")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), default=str, indent=2))
        return

    header(f"Reminder cycle at {report.evaluated_at.isoformat()}")
    success(f"Flagged {report.notified_count} event(s) due today")
    for signal in report.imminent:
        info(f'"{signal.title}" in {signal.minutes_remaining} min ({signal.local_time})')
    if report.overdue:
        info(f"{len(report.overdue)} event(s) overdue")
