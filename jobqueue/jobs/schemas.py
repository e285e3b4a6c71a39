"""
Job submission contract and reporting schemas.
"""

from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jobqueue.core.exceptions import InvalidPayloadError
from jobqueue.jobs.models import JobStatus


class QueueableJob(BaseModel):
    """
    Base class for typed units of work.

    Subclasses name their handler key and routing defaults as class
    variables and declare the payload as ordinary pydantic fields:

        class ResizeImage(QueueableJob):
            job_type: ClassVar[str] = "resize_image"
            queue: ClassVar[str] = "media"
            max_attempts: ClassVar[int] = 5

            path: str
            width: int

    Jobs that leave ``max_attempts`` unset get the configured
    ``job_default_max_attempts`` when dispatched. The payload is stored as
    JSON, so decoding never executes code.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    job_type: ClassVar[str]
    queue: ClassVar[str] = "default"
    max_attempts: ClassVar[int | None] = None

    def to_payload(self) -> str:
        """Serialize the job input for storage."""
        return self.model_dump_json()

    @classmethod
    def from_payload(cls, payload: str) -> Self:
        """Rebuild the job input from its stored form."""
        try:
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise InvalidPayloadError(
                cls.job_type,
                f"{e.error_count()} validation error(s)",
                {"errors": e.errors(include_url=False)},
            ) from e


class JobStats(BaseModel):
    """Job counts per status."""

    pending: int = Field(default=0, ge=0)
    processing: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.pending + self.processing + self.completed + self.failed

    @classmethod
    def from_counts(cls, counts: dict[str, int]) -> "JobStats":
        return cls(**{status.value: counts.get(status.value, 0) for status in JobStatus})
