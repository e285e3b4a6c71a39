"""
Job record model for the persistent work queue.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, CheckConstraint, Index, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobqueue.infra.database import Base, UTCDateTime


class JobStatus(str, Enum):
    """Job status enumeration."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Job(Base):
    """
    One unit of deferred work and its execution state.

    Rows are owned by the job repository; services and workers only hold a
    detached instance for the duration of one processing step. Lifecycle:

    - ``pending`` on dispatch
    - ``processing`` once claimed (attempts incremented by the claim)
    - ``completed``, back to ``pending`` (retry) or ``failed`` after execution
    - ``failed`` jobs go back to ``pending`` with attempts reset on retry
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    queue: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="Queue partition name"
    )
    job_type: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="Job type identifier"
    )
    payload: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Serialized job input"
    )

    # Job state
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=JobStatus.PENDING.value,
        comment="Job status: pending|processing|completed|failed",
    )
    attempts: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=0, comment="Number of claims made"
    )
    max_attempts: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, comment="Attempts allowed before failing"
    )
    error_message: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="Last error message"
    )

    # Timestamps
    available_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, comment="Earliest time the job may be claimed"
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'failed')",
            name="jobs_status_check",
        ),
        CheckConstraint("attempts >= 0", name="jobs_attempts_check"),
        CheckConstraint("max_attempts >= 1", name="jobs_max_attempts_check"),
        CheckConstraint("queue <> ''", name="jobs_queue_check"),
        Index("ix_jobs_claim", "queue", "status", "available_at", "created_at"),
        Index("ix_jobs_status_created_at", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Job id={self.id} queue={self.queue!r} type={self.job_type!r} "
            f"status={self.status} attempts={self.attempts}/{self.max_attempts}>"
        )

    def has_attempts_remaining(self) -> bool:
        """Check if another claim is allowed after a failed attempt."""
        return self.attempts < self.max_attempts
