import pytest

from jobqueue.core.exceptions import UnknownJobTypeError
from jobqueue.core.registries import JobHandler, JobRegistry, Registry, job_registry
from jobqueue.jobs.handlers import SendEmailJob, send_email
from jobqueue.jobs.registry_init import register_job_handlers

from job_fixtures import EchoJob


def test_registry_basic_operations():
    """Test basic registry register, get, list operations."""
    registry = Registry[str]("Test")

    # Test empty registry
    assert registry.list() == []

    # Test register and get
    registry.register("test_impl", "test_value")
    assert registry.get("test_impl") == "test_value"
    assert registry.list() == ["test_impl"]

    # Test KeyError for missing implementation
    with pytest.raises(KeyError, match="No test implementation registered"):
        registry.get("nonexistent")


def test_registry_overwrites_implementation():
    """Test that registering the same name overwrites previous implementation."""
    registry = Registry[str]("Test")

    registry.register("same_name", "first_value")
    registry.register("same_name", "second_value")

    assert registry.get("same_name") == "second_value"
    assert registry.list() == ["same_name"]  # Only one entry


def test_frozen_registry_rejects_registration():
    registry = Registry[str]("Test")
    registry.register("kept", "value")
    registry.freeze()

    assert registry.is_frozen() is True
    with pytest.raises(RuntimeError, match="registry is frozen"):
        registry.register("late", "value")
    assert registry.get("kept") == "value"


def test_register_job_uses_job_type_and_payload_decoder():
    registry = JobRegistry()

    def execute(job, ctx):
        return None

    registry.register_job(EchoJob, execute)

    handler = registry.resolve("test_echo")
    assert isinstance(handler, JobHandler)
    assert handler.execute is execute
    assert handler.decode('{"message":"hi"}') == EchoJob(message="hi")


def test_resolve_unknown_job_type():
    registry = JobRegistry()

    with pytest.raises(UnknownJobTypeError) as exc_info:
        registry.resolve("ghost")

    assert exc_info.value.job_type == "ghost"
    assert str(exc_info.value) == "Job type not registered: ghost"
    assert isinstance(exc_info.value, KeyError)


def test_register_job_handlers_adds_builtins():
    registry = register_job_handlers(JobRegistry())

    handler = registry.resolve(SendEmailJob.job_type)
    assert handler.execute is send_email


def test_register_job_handlers_is_repeatable_on_frozen_registry():
    registry = register_job_handlers(JobRegistry())
    registry.freeze()

    assert register_job_handlers(registry).list() == ["send_email"]


def test_global_job_registry_is_singleton():
    assert isinstance(job_registry, JobRegistry)
    assert job_registry.name == "Job"
