#!/usr/bin/env python3
"""
Main CLI entry point for the hrgraph backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from hrgraph import __version__
from hrgraph.config import get_settings
from hrgraph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="hrgraph")
def cli() -> None:
    """hrgraph CLI - run the API server and manage the database schema."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: HRGRAPH_API_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: HRGRAPH_API_PORT)")
@click.option(
    "--reload/--no-reload", default=None, help="Auto-reload for development (default: HRGRAPH_API_RELOAD)"
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str | None, port: int | None, reload: bool | None, log_level: str) -> None:
    """Start the hrgraph API server.

    Options left out fall back to the api_* settings.
    """
    settings = get_settings()
    host = host if host is not None else settings.api_host
    port = port if port is not None else settings.api_port
    reload = reload if reload is not None else settings.api_reload

    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting hrgraph API server", host=host, port=port, reload=reload, log_level=log_level)

    # The app factory reads settings from the environment, also in reload workers
    if log_level == "debug":
        os.environ["HRGRAPH_DEBUG"] = "true"
    os.environ.setdefault("HRGRAPH_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "hrgraph.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option("--database-url", default=None, help="Override HRGRAPH_DATABASE_URL")
def init_db(database_url: str | None) -> None:
    """Create the accounts and employees tables if they do not exist."""
    from hrgraph.database.connection import create_tables, get_async_engine, init_database

    configure_logging()

    async def _run() -> None:
        init_database(database_url)
        try:
            await create_tables()
        finally:
            await get_async_engine().dispose()

    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        sys.exit(1)

    click.echo("Database schema is up to date.")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
