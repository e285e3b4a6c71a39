"""
Job registry initialization.

Registers all built-in job handlers. Applications add their own job types
to the same registry before starting workers.
"""

from jobqueue.config.logging import get_logger
from jobqueue.core.registries import JobRegistry, job_registry
from jobqueue.jobs.handlers import SendEmailJob, send_email

logger = get_logger(__name__)


def register_job_handlers(registry: JobRegistry = job_registry) -> JobRegistry:
    """Register all built-in job handlers with the job registry."""

    if SendEmailJob.job_type not in registry.list():
        registry.register_job(SendEmailJob, send_email)

    logger.debug("Job handlers registered", registered_handlers=registry.list())
    return registry
