"""
Built-in job types.

Each job type is a ``QueueableJob`` model plus an execute function taking
the decoded model and the shared ``JobContext``.
"""

from typing import ClassVar

from pydantic import Field

from jobqueue.jobs.context import JobContext
from jobqueue.jobs.schemas import QueueableJob


class SendEmailJob(QueueableJob):
    """Deliver one email through the context's mailer."""

    job_type: ClassVar[str] = "send_email"
    queue: ClassVar[str] = "email"
    max_attempts: ClassVar[int] = 5

    to: str = Field(..., min_length=3)
    subject: str
    html_body: str = ""
    text_body: str = ""


async def send_email(job: SendEmailJob, ctx: JobContext) -> None:
    await ctx.mailer.send(job.to, job.subject, job.html_body, job.text_body)
