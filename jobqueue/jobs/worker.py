"""
Polling worker that drains one named queue.
"""

import asyncio
import signal
from typing import Any

from jobqueue.config.logging import get_logger
from jobqueue.config.settings import Settings
from jobqueue.core.exceptions import QueueDisabledError
from jobqueue.jobs.service import QueueService

logger = get_logger(__name__)


class Worker:
    """
    Single-task poll, execute, sleep loop over one queue.

    Workers never coordinate with each other: running several against the
    same database is safe because claims are atomic in the repository.

    A job left in ``processing`` by a worker that crashed is not picked up
    again by anyone; there is no lease or visibility timeout.
    """

    def __init__(
        self,
        queue_service: QueueService,
        *,
        sleep_seconds: float = 3.0,
        logger: Any | None = None,
    ):
        if sleep_seconds <= 0:
            raise ValueError("sleep_seconds must be positive")
        self.queue_service = queue_service
        self.sleep_seconds = sleep_seconds
        self.logger = logger or get_logger(__name__)

    async def run(
        self, queue: str = "default", stop_event: asyncio.Event | None = None
    ) -> int:
        """
        Process jobs until ``stop_event`` is set.

        The stop event is checked between jobs only, so a claimed job always
        finishes its attempt first. An empty queue is polled again after
        ``sleep_seconds`` (or as soon as a stop is requested); a non-empty one
        is drained without pausing. Storage errors propagate to the caller.

        Returns:
            Number of jobs processed before stopping
        """
        stop_event = stop_event or asyncio.Event()
        processed_count = 0

        self.logger.info(
            "Worker started", queue=queue, sleep_seconds=self.sleep_seconds
        )

        while not stop_event.is_set():
            processed = await self.queue_service.process_next(queue)

            if processed:
                processed_count += 1
                continue

            await self._idle(stop_event)

        self.logger.info(
            "Worker stopped gracefully", queue=queue, processed=processed_count
        )
        return processed_count

    async def _idle(self, stop_event: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.sleep_seconds)
        except TimeoutError:
            pass


def install_stop_signal_handlers(
    stop_event: asyncio.Event, loop: asyncio.AbstractEventLoop | None = None
) -> None:
    """Set ``stop_event`` when the process receives SIGINT or SIGTERM."""
    loop = loop or asyncio.get_running_loop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Event loops without signal support (Windows)
            signal.signal(
                sig, lambda *_: loop.call_soon_threadsafe(stop_event.set)
            )

    logger.debug("Stop signal handlers installed")


def ensure_queue_enabled(settings: Settings) -> None:
    """Refuse to run workers while the queue module is switched off."""
    if not settings.module_queue:
        raise QueueDisabledError()
