"""jobqueue CLI - Main Entry Point"""

import asyncio
from typing import Optional

import typer
from rich.markup import escape

from jobqueue.config.settings import Settings, get_settings
from jobqueue.healthz import DatabaseHealth, QueueHealth, check_database_health, check_queue_health
from jobqueue.infra.database import Database
from jobqueue.jobs.repository import SqlAlchemyJobRepository

# Import command modules
from .commands import queue
from .utils.formatting import console

# Create main Typer app
app = typer.Typer(
    name="jobqueue",
    help="Persistent background job queue",
    rich_markup_mode="rich",
)

# Add command subapps
app.add_typer(queue.app, name="queue")


@app.command()
def doctor():
    """Check database connectivity and queue status"""
    settings = get_settings()
    db_health, queue_health = asyncio.run(_diagnose(settings))

    lines, ok = _doctor_report(db_health, queue_health)
    for line in lines:
        console.print(escape(line))

    if not ok:
        raise typer.Exit(1)


async def _diagnose(settings: Settings) -> tuple[DatabaseHealth, QueueHealth | None]:
    database = Database(settings)
    try:
        db_health = await check_database_health(database)
        if not db_health.connected:
            return db_health, None

        if settings.module_queue:
            await database.create_schema()
        queue_health = await check_queue_health(
            settings, SqlAlchemyJobRepository(database.SessionLocal)
        )
        return db_health, queue_health
    finally:
        await database.close()


def _doctor_report(
    db_health: DatabaseHealth, queue_health: QueueHealth | None
) -> tuple[list[str], bool]:
    lines = []
    ok = True

    if db_health.connected:
        lines.append(f"[OK] Database: Connected ({db_health.response_time_ms} ms)")
    else:
        lines.append(f"[FAIL] Database: {db_health.error}")
        ok = False

    if queue_health is None:
        return lines, ok

    if not queue_health.enabled:
        lines.append("[--] Queue: Disabled")
    elif queue_health.error:
        lines.append(f"[FAIL] Queue: {queue_health.error}")
        ok = False
    else:
        lines.append(f"[OK] Queue: Enabled, {queue_health.pending} pending job(s)")
        if queue_health.stats and queue_health.stats.failed:
            lines.append(f"[!!] Queue: {queue_health.stats.failed} failed job(s)")

    return lines, ok


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-v", is_eager=True, help="Show version and exit"
    ),
):
    """
    jobqueue - persistent, database-backed background jobs

    Run workers, inspect queue depth and requeue failed jobs.
    """
    if version:
        from jobqueue import __version__

        console.print(f"jobqueue v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
