"""
Outbound email.

Only a logging implementation ships here; a transport-backed service can be
dropped in anywhere an ``EmailService`` is expected.
"""

from typing import Any, Protocol

from jobqueue.config.logging import get_logger


class EmailService(Protocol):
    """Protocol for services that deliver email."""

    async def send(
        self, to: str, subject: str, html_body: str, text_body: str
    ) -> None:
        ...


class LogEmailService:
    """EmailService that records each message in the log instead of sending it."""

    def __init__(self, logger: Any | None = None):
        self.logger = logger or get_logger(__name__)

    async def send(
        self, to: str, subject: str, html_body: str, text_body: str
    ) -> None:
        self.logger.info(
            "Email sent",
            to=to,
            subject=subject,
            html_length=len(html_body),
            text_length=len(text_body),
        )
