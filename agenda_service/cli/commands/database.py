"""Database commands.

Example:bash
    # Verify connectivity using the startup retry policy
    agenda db check

    # Create the events table if missing
    agenda db init
"""

from __future__ import annotations

import sys

import click

from agenda_service.cli.utils import coro, error, info, success
from agenda_service.core.settings import get_db_settings
from agenda_service.infra.database import StorageConnectionError, StorageGateway, establish


async def connect_or_exit() -> StorageGateway:
    settings = get_db_settings()
    info(f"Connecting to: {settings.safe_url}")
    try:
        return await establish(settings)
    except StorageConnectionError as e:
        error(f"Failed to connect after {e.attempts} attempt(s): {e.last_exception}")
        sys.exit(1)


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@coro
async def check() -> None:
    """Run the connection bootstrapper once and report."""
    gateway = await connect_or_exit()
    try:
        success("Database connected successfully!")
    finally:
        await gateway.close()


@db.command()
@coro
async def init() -> None:
    """Connect and create the schema if it does not exist."""
    gateway = await connect_or_exit()
    try:
        await gateway.create_schema()
        success("Schema is up to date")
    finally:
        await gateway.close()
