"""
Job persistence and the atomic claim protocol.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobqueue.infra.database import utcnow
from jobqueue.jobs.models import Job, JobStatus


class JobRepository(Protocol):
    """Storage contract the queue service depends on."""

    async def save(self, job: Job) -> Job:
        ...

    async def update(self, job: Job) -> None:
        ...

    async def claim_next(self, queue: str, *, now: datetime | None = None) -> Job | None:
        ...

    async def find(self, job_id: int) -> Job | None:
        ...

    async def find_failed(self) -> list[Job]:
        ...

    async def count_by_status(self, status: JobStatus | str) -> int:
        ...

    async def count_pending(self) -> int:
        ...

    async def count_all_by_status(self) -> dict[str, int]:
        ...


class SqlAlchemyJobRepository:
    """
    JobRepository backed by SQLAlchemy's async ORM.

    Each call runs in its own session and commits its own unit of work, so
    returned jobs are detached snapshots that stay readable after the call.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, job: Job) -> Job:
        """Insert a new job and return it with its identifier assigned."""
        async with self.session_factory() as session:
            session.add(job)
            await session.commit()
        return job

    async def update(self, job: Job) -> None:
        """Persist the mutable fields of an existing job."""
        if job.id is None:
            raise ValueError("Cannot update a job that has not been saved")

        async with self.session_factory() as session:
            await session.execute(
                update(Job)
                .where(Job.id == job.id)
                .values(
                    status=job.status,
                    attempts=job.attempts,
                    error_message=job.error_message,
                    completed_at=job.completed_at,
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()

    async def claim_next(self, queue: str, *, now: datetime | None = None) -> Job | None:
        """
        Atomically claim the oldest available pending job in ``queue``.

        The candidate row is moved to ``processing`` with a conditional
        UPDATE guarded on ``status = 'pending'``; when a concurrent claimer
        wins that row the UPDATE matches nothing and the next candidate is
        tried. On PostgreSQL the candidate select also takes a row lock with
        SKIP LOCKED so concurrent claimers do not contend for the same row.

        Returns the job as it is after the claim, or None if nothing is
        available.
        """
        now = now or utcnow()

        candidate_query = (
            select(Job.id)
            .where(
                Job.queue == queue,
                Job.status == JobStatus.PENDING.value,
                Job.available_at <= now,
            )
            .order_by(Job.created_at, Job.id)
            .limit(1)
            .with_for_update(skip_locked=True)
        )

        async with self.session_factory() as session:
            while True:
                job_id = (await session.execute(candidate_query)).scalar_one_or_none()
                if job_id is None:
                    await session.commit()
                    return None

                result = await session.execute(
                    update(Job)
                    .where(Job.id == job_id, Job.status == JobStatus.PENDING.value)
                    .values(
                        status=JobStatus.PROCESSING.value,
                        attempts=Job.attempts + 1,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    # Lost the race for this row
                    await session.rollback()
                    continue

                job = await session.get(Job, job_id, populate_existing=True)
                await session.commit()
                return job

    async def find(self, job_id: int) -> Job | None:
        """Get a job by identifier."""
        async with self.session_factory() as session:
            return await session.get(Job, job_id)

    async def find_failed(self) -> list[Job]:
        """All failed jobs, oldest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Job)
                .where(Job.status == JobStatus.FAILED.value)
                .order_by(Job.created_at, Job.id)
            )
            return list(result.scalars().all())

    async def count_by_status(self, status: JobStatus | str) -> int:
        status_value = status.value if isinstance(status, JobStatus) else status
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(Job.id)).where(Job.status == status_value)
            )
            return result.scalar() or 0

    async def count_pending(self) -> int:
        return await self.count_by_status(JobStatus.PENDING)

    async def count_all_by_status(self) -> dict[str, int]:
        """Job counts keyed by status value; statuses with no jobs are absent."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Job.status, func.count(Job.id)).group_by(Job.status)
            )
            return {status: count for status, count in result.all()}
