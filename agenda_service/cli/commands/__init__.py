"""CLI command modules."""

from agenda_service.cli.commands import database, reminders, server

__all__ = [
    "database",
    "reminders",
    "server",
]
