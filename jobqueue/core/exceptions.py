from typing import Any


class JobQueueException(Exception):
    """Base exception for the job queue."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class UnknownJobTypeError(JobQueueException, KeyError):
    """Raised when no handler is registered for a job type."""

    def __init__(self, job_type: str):
        super().__init__(
            f"Job type not registered: {job_type}", {"job_type": job_type}
        )
        self.job_type = job_type


class InvalidPayloadError(JobQueueException):
    """Raised when a stored payload cannot be decoded into its job model."""

    def __init__(self, job_type: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Invalid payload for job type {job_type}: {message}",
            {"job_type": job_type, **(details or {})},
        )
        self.job_type = job_type


class QueueDisabledError(JobQueueException):
    """Raised when a worker is started while the queue module is turned off."""

    def __init__(self, message: str = "Queue module is not enabled. Set MODULE_QUEUE=true in .env"):
        super().__init__(message)
