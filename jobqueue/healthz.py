from datetime import UTC, datetime

from pydantic import BaseModel

from jobqueue.config.settings import Settings
from jobqueue.infra.database import Database
from jobqueue.jobs.repository import JobRepository
from jobqueue.jobs.schemas import JobStats


class DatabaseHealth(BaseModel):
    """Database health status."""

    connected: bool
    response_time_ms: float | None = None
    error: str | None = None


class QueueHealth(BaseModel):
    """Queue module status."""

    enabled: bool
    pending: int = 0
    stats: JobStats | None = None
    error: str | None = None


async def check_database_health(database: Database) -> DatabaseHealth:
    """Check database connectivity and response time."""
    start_time = datetime.now(UTC)

    try:
        await database.ping()

        end_time = datetime.now(UTC)
        response_time_ms = (end_time - start_time).total_seconds() * 1000

        return DatabaseHealth(
            connected=True, response_time_ms=round(response_time_ms, 2)
        )

    except Exception as e:
        return DatabaseHealth(connected=False, error=str(e))


async def check_queue_health(
    settings: Settings, repository: JobRepository
) -> QueueHealth:
    """Report whether the queue is enabled and how much work it holds."""
    if not settings.module_queue:
        return QueueHealth(enabled=False)

    try:
        stats = JobStats.from_counts(await repository.count_all_by_status())
    except Exception as e:
        return QueueHealth(enabled=True, error=str(e))

    return QueueHealth(enabled=True, pending=stats.pending, stats=stats)
