"""Main CLI entry point for agenda-service management commands."""

import click

from agenda_service.cli.commands import database, reminders, server
from agenda_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="2.0.0", prog_name="agenda")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Agenda Service CLI.

    \b
    Commands:
      serve      Run the API server and reminder scheduler
      db         Database connectivity and schema
      reminders  Run reminder cycles by hand

    \b
    Quick Start:
      agenda db check               # Test database connection
      agenda db init                # Create the events table
      agenda reminders run-once     # Evaluate reminders now
    """
    ctx.ensure_object(dict)
    setup_logging()


cli.add_command(server.serve)
cli.add_command(database.db)
cli.add_command(reminders.reminders)


if __name__ == "__main__":
    cli()
