from dataclasses import dataclass, field
from typing import Any

from jobqueue.config.logging import get_logger
from jobqueue.config.settings import Settings
from jobqueue.mailer.service import EmailService, LogEmailService


@dataclass
class JobContext:
    """Collaborators handed to every job handler.

    Built once by the hosting process and shared by all jobs it runs.
    """

    settings: Settings
    mailer: EmailService = field(default_factory=LogEmailService)
    logger: Any = field(default_factory=lambda: get_logger("jobqueue.jobs"))
