"""Queue Commands - worker process and queue maintenance"""

import asyncio

import typer

from jobqueue.config.logging import bind_worker_context, setup_logging
from jobqueue.config.settings import Settings, get_settings
from jobqueue.core.exceptions import QueueDisabledError
from jobqueue.core.registries import job_registry
from jobqueue.infra.database import Database
from jobqueue.jobs.registry_init import register_job_handlers
from jobqueue.jobs.service import create_queue_service
from jobqueue.jobs.worker import Worker, ensure_queue_enabled, install_stop_signal_handlers

from ..utils.formatting import console, create_stats_table, print_error, print_info, print_success

app = typer.Typer(name="queue", help="Background job queue")


@app.command("work")
def work(
    queue: str | None = typer.Option(
        None, "--queue", "-q", help="Queue to poll (defaults to QUEUE_DEFAULT_NAME)"
    ),
    sleep: float | None = typer.Option(
        None, "--sleep", "-s", min=0.1, help="Seconds to sleep when the queue is empty"
    ),
):
    """Run a worker until SIGINT or SIGTERM"""
    settings = get_settings()

    try:
        ensure_queue_enabled(settings)
    except QueueDisabledError as e:
        print_error(str(e))
        raise typer.Exit(1) from None

    queue = queue or settings.queue_default_name
    sleep = sleep if sleep is not None else settings.worker_sleep_seconds

    setup_logging(settings)
    console.print(f"Starting worker on queue '{queue}' (sleep: {sleep:g}s)...")

    asyncio.run(_run_worker(settings, queue, sleep))


async def _run_worker(settings: Settings, queue: str, sleep: float) -> int:
    database = Database(settings)
    try:
        await database.create_schema()

        register_job_handlers(job_registry)
        if settings.environment != "development":
            job_registry.freeze()

        bind_worker_context(queue=queue)
        service = create_queue_service(database.SessionLocal, settings)
        worker = Worker(service, sleep_seconds=sleep)

        stop_event = asyncio.Event()
        install_stop_signal_handlers(stop_event)
        return await worker.run(queue, stop_event)
    finally:
        await database.close()


@app.command("retry-failed")
def retry_failed():
    """Reset all failed jobs to pending"""
    count = asyncio.run(_retry_failed(get_settings()))

    if count:
        print_success(f"Reset {count} failed job(s) to pending")
    else:
        print_info("No failed jobs to retry")


async def _retry_failed(settings: Settings) -> int:
    database = Database(settings)
    try:
        await database.create_schema()
        return await create_queue_service(database.SessionLocal, settings).retry_failed()
    finally:
        await database.close()


@app.command("stats")
def stats():
    """Show job counts per status"""
    job_stats = asyncio.run(_stats(get_settings()))
    console.print(create_stats_table(job_stats))


async def _stats(settings: Settings):
    database = Database(settings)
    try:
        await database.create_schema()
        return await create_queue_service(database.SessionLocal, settings).get_stats()
    finally:
        await database.close()
