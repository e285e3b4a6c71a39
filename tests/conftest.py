from collections.abc import AsyncGenerator

import pytest
from structlog.testing import CapturingLogger

from jobqueue.config.settings import Settings
from jobqueue.core.registries import JobRegistry
from jobqueue.infra.database import Database
from jobqueue.jobs.context import JobContext
from jobqueue.jobs.registry_init import register_job_handlers
from jobqueue.jobs.repository import SqlAlchemyJobRepository
from jobqueue.jobs.service import QueueService

from job_fixtures import EchoJob, FailingJob, RecordingMailer


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file with the queue enabled."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'queue.db'}",
        module_queue=True,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create a fresh database with the jobs schema for each test."""
    database = Database(settings)
    await database.create_schema()
    yield database
    await database.close()


@pytest.fixture
def repository(database: Database) -> SqlAlchemyJobRepository:
    return SqlAlchemyJobRepository(database.SessionLocal)


@pytest.fixture
def executed() -> list[str]:
    """Messages seen by the echo handler, in execution order."""
    return []


@pytest.fixture
def registry(executed: list[str]) -> JobRegistry:
    """Registry with the built-in jobs plus echo and failing test jobs."""
    registry = JobRegistry()

    async def run_echo(job: EchoJob, ctx: JobContext) -> None:
        executed.append(job.message)

    def run_failing(job: FailingJob, ctx: JobContext) -> None:
        raise RuntimeError(job.message)

    registry.register_job(EchoJob, run_echo)
    registry.register_job(FailingJob, run_failing)
    register_job_handlers(registry)
    return registry


@pytest.fixture
def logger() -> CapturingLogger:
    return CapturingLogger()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def job_context(settings: Settings, mailer: RecordingMailer, logger: CapturingLogger) -> JobContext:
    return JobContext(settings=settings, mailer=mailer, logger=logger)


@pytest.fixture
def service(
    repository: SqlAlchemyJobRepository,
    registry: JobRegistry,
    job_context: JobContext,
    logger: CapturingLogger,
) -> QueueService:
    return QueueService(repository, registry, job_context, logger=logger)
