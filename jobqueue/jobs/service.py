"""
Queue service: dispatching, executing and resetting jobs.
"""

import inspect
from datetime import timedelta
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobqueue.config.logging import get_logger
from jobqueue.config.settings import Settings
from jobqueue.core.exceptions import UnknownJobTypeError
from jobqueue.core.registries import JobRegistry, job_registry
from jobqueue.infra.database import utcnow
from jobqueue.jobs.context import JobContext
from jobqueue.jobs.models import Job, JobStatus
from jobqueue.jobs.repository import JobRepository, SqlAlchemyJobRepository
from jobqueue.jobs.schemas import JobStats


class DispatchableJob(Protocol):
    """What ``QueueService.dispatch`` needs from a unit of work."""

    job_type: str
    queue: str
    max_attempts: int | None

    def to_payload(self) -> str:
        ...


class QueueService:
    """Service for dispatching and processing background jobs."""

    def __init__(
        self,
        repository: JobRepository,
        registry: JobRegistry,
        context: JobContext,
        logger: Any | None = None,
    ):
        self.repository = repository
        self.registry = registry
        self.context = context
        self.logger = logger or get_logger(__name__)

    async def dispatch(
        self,
        job: DispatchableJob,
        *,
        queue: str | None = None,
        delay: timedelta | None = None,
    ) -> Job:
        """
        Persist a new pending job.

        Args:
            job: Unit of work describing the type, queue, attempts and payload
            queue: Overrides the queue declared by the job
            delay: Keeps the job invisible to workers for this long

        Returns:
            The stored job record with its identifier assigned
        """
        now = utcnow()
        target_queue = queue or job.queue
        if not target_queue:
            raise ValueError("Queue name must not be empty")

        queued_job = Job(
            queue=target_queue,
            job_type=job.job_type,
            payload=job.to_payload(),
            status=JobStatus.PENDING.value,
            attempts=0,
            max_attempts=job.max_attempts
            or self.context.settings.job_default_max_attempts,
            error_message=None,
            available_at=now + delay if delay else now,
            created_at=now,
            completed_at=None,
        )

        queued_job = await self.repository.save(queued_job)

        self.logger.info(
            "Job dispatched",
            job_id=queued_job.id,
            job_type=queued_job.job_type,
            queue=queued_job.queue,
            max_attempts=queued_job.max_attempts,
        )
        return queued_job

    async def process_next(self, queue: str = "default") -> bool:
        """
        Claim and run one job from ``queue``.

        Returns False only when no job was available. Any outcome of running
        the job (success, retry, permanent failure) returns True; handler
        errors are recorded on the job and never raised. Storage errors are.
        """
        job = await self.repository.claim_next(queue)
        if job is None:
            return False

        try:
            handler = self.registry.resolve(job.job_type)
        except UnknownJobTypeError as e:
            # Retrying cannot make an unregistered type known
            job.status = JobStatus.FAILED.value
            job.error_message = str(e)
            await self.repository.update(job)
            self.logger.error(
                "Queue job type not registered",
                job_id=job.id,
                job_type=job.job_type,
                queue=job.queue,
            )
            return True

        try:
            job_input = handler.decode(job.payload)
            result = handler.execute(job_input, self.context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            await self._record_failure(job, e)
            return True

        job.status = JobStatus.COMPLETED.value
        job.completed_at = utcnow()
        await self.repository.update(job)

        self.logger.info(
            "Queue job completed",
            job_id=job.id,
            job_type=job.job_type,
            queue=job.queue,
            attempts=job.attempts,
        )
        return True

    async def _record_failure(self, job: Job, error: Exception) -> None:
        """Send the job back to pending or fail it for good."""
        job.error_message = str(error) or error.__class__.__name__

        if not job.has_attempts_remaining():
            job.status = JobStatus.FAILED.value
            await self.repository.update(job)
            self.logger.error(
                "Queue job failed permanently",
                job_id=job.id,
                job_type=job.job_type,
                queue=job.queue,
                error=job.error_message,
                attempts=job.attempts,
            )
        else:
            job.status = JobStatus.PENDING.value
            await self.repository.update(job)
            self.logger.warning(
                "Queue job failed, will retry",
                job_id=job.id,
                job_type=job.job_type,
                queue=job.queue,
                error=job.error_message,
                attempts=job.attempts,
                max_attempts=job.max_attempts,
            )

    async def retry_failed(self) -> int:
        """Reset every failed job to pending with a fresh attempt budget."""
        failed_jobs = await self.repository.find_failed()

        for job in failed_jobs:
            job.status = JobStatus.PENDING.value
            job.attempts = 0
            job.error_message = None
            await self.repository.update(job)

        count = len(failed_jobs)
        if count > 0:
            self.logger.info(f"Retrying {count} failed job(s)", count=count)

        return count

    async def count_pending(self) -> int:
        return await self.repository.count_pending()

    async def get_stats(self) -> JobStats:
        """Job counts for every status."""
        return JobStats.from_counts(await self.repository.count_all_by_status())


def create_queue_service(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    registry: JobRegistry | None = None,
    context: JobContext | None = None,
    logger: Any | None = None,
) -> QueueService:
    """Wire a QueueService over the SQLAlchemy repository."""
    return QueueService(
        SqlAlchemyJobRepository(session_factory),
        registry if registry is not None else job_registry,
        context or JobContext(settings=settings),
        logger=logger,
    )
