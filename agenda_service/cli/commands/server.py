"""Server command."""

from __future__ import annotations

import click

from agenda_service.cli.utils import info
from agenda_service.core.settings import get_app_settings


@click.command(name="serve")
@click.option("--host", default=None, help="Bind host (default: from settings)")
@click.option("--port", default=None, type=int, help="Bind port (default: from settings)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    show_default=True,
    type=click.Choice(["debug", "info", "warning", "error", "critical"], case_sensitive=False),
    help="Uvicorn log level",
)
def serve(host: str | None, port: int | None, reload: bool, log_level: str) -> None:
    """Run the HTTP API and the reminder scheduler with Uvicorn.

    Examples:
        \b
        agenda serve --reload
        agenda serve --host 127.0.0.1 --port 8080
    """
    import uvicorn

    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Server will run at: http://{host}:{port}")
    info(f"Environment: {settings.environment}")

    uvicorn.run(
        "agenda_service.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )
