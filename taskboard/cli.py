"""Command line entry point: ``python -m taskboard`` or ``taskboard``."""

import asyncio
import sys

import click
import httpx
import uvicorn

from taskboard.core.settings import get_taskboard_config
from taskboard.db import TaskboardDB
from taskboard.seed import init_database


@click.group()
@click.version_option(package_name="taskboard", prog_name="taskboard")
def cli():
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to TASKBOARD__HOST)")
@click.option("--port", default=None, type=int, help="Port (defaults to TASKBOARD__PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
def serve(host, port, reload):
    """Run the API server."""
    settings = get_taskboard_config().TASKBOARD
    host = host or settings.HOST
    port = port or settings.PORT

    click.echo(f"Starting Taskboard API at http://{host}:{port} ...")
    click.echo("Press Ctrl+C to stop.")

    uvicorn.run(
        "taskboard.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


@cli.command("init-db")
def init_db():
    """Create indexes and the admin user."""
    config = get_taskboard_config()
    settings = config.TASKBOARD

    async def _run():
        async with TaskboardDB(uri=settings.MONGO_URI, db_name=settings.MONGO_DB) as db:
            await db.ping()
            return await init_database(config, db)

    admin = asyncio.run(_run())
    click.echo(f"Indexes ensured on database '{settings.MONGO_DB}'.")
    if admin is None:
        click.echo("Admin user already present.")
    else:
        click.echo(f"Created admin user '{admin.username}' <{admin.email}>.")
        click.echo("Change the default admin password in production!")


@cli.command()
@click.option("--url", default=None, help="Base URL of the API (defaults to TASKBOARD__URL)")
@click.option("--timeout", default=5.0, show_default=True, help="Request timeout in seconds")
def status(url, timeout):
    """Report liveness and readiness of a running server."""
    base_url = (url or get_taskboard_config().TASKBOARD.URL).rstrip("/")
    ready = False

    with httpx.Client(base_url=base_url, timeout=timeout) as client:
        try:
            health = client.get("/health")
            click.echo(f"health: {health.status_code} {health.json().get('status')}")
            readiness = client.get("/ready")
            body = readiness.json()
            click.echo(f"ready:  {readiness.status_code} {body.get('status')} (database {body.get('database')})")
            ready = readiness.status_code == 200
        except (httpx.HTTPError, ValueError) as e:
            click.echo(f"Taskboard API at {base_url} is unreachable: {e}", err=True)

    if not ready:
        sys.exit(1)
