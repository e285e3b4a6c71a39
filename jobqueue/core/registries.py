from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from jobqueue.core.exceptions import UnknownJobTypeError

if TYPE_CHECKING:
    from jobqueue.jobs.context import JobContext

# Base registry implementation
T = TypeVar("T")


class Registry(Generic[T]):
    """Generic registry for pluggable implementations."""

    def __init__(self, name: str):
        self.name = name
        self._implementations: dict[str, T] = {}
        self._frozen = False

    def register(self, name: str, implementation: T) -> None:
        """Register an implementation with a given name."""
        if self._frozen:
            raise RuntimeError(
                f"Cannot register '{name}' in {self.name.lower()} registry: "
                "registry is frozen"
            )
        self._implementations[name] = implementation

    def get(self, name: str) -> T:
        """Get an implementation by name."""
        if name not in self._implementations:
            raise KeyError(
                f"No {self.name.lower()} implementation registered with name: {name}"
            )
        return self._implementations[name]

    def list(self) -> list[str]:
        """List all registered implementation names."""
        return list(self._implementations.keys())

    def freeze(self) -> None:
        """Freeze the registry to prevent further modifications."""
        self._frozen = True

    def is_frozen(self) -> bool:
        """Check if the registry is frozen."""
        return self._frozen


# Job Registry - background job handlers
class QueueableJobType(Protocol):
    """What a job class must expose to be registered."""

    job_type: str

    @classmethod
    def from_payload(cls, payload: str) -> Any:
        ...


@dataclass(frozen=True)
class JobHandler(Generic[T]):
    """
    Decoder and executor pair for one job type.

    ``decode`` turns the stored payload text back into the job's input;
    ``execute`` runs it with the application's execution context and may be a
    plain function or a coroutine function.
    """

    decode: Callable[[str], T]
    execute: Callable[[T, "JobContext"], Awaitable[None] | None]


class JobRegistry(Registry[JobHandler[Any]]):
    """Registry for background job handlers, keyed by job type."""

    def __init__(self):
        super().__init__("Job")

    def register_job(
        self,
        job_cls: type[QueueableJobType],
        execute: Callable[[Any, "JobContext"], Awaitable[None] | None],
    ) -> None:
        """Register a job model class under its ``job_type`` key."""
        self.register(job_cls.job_type, JobHandler(job_cls.from_payload, execute))

    def resolve(self, job_type: str) -> JobHandler[Any]:
        """Get the handler for a job type or raise ``UnknownJobTypeError``."""
        try:
            return self.get(job_type)
        except KeyError:
            raise UnknownJobTypeError(job_type) from None


# Global registry instance (singleton)
job_registry = JobRegistry()
