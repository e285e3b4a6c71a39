import json

import pytest
from pydantic import ValidationError

from jobqueue.core.exceptions import InvalidPayloadError
from jobqueue.jobs.handlers import SendEmailJob
from jobqueue.jobs.schemas import JobStats

from job_fixtures import EchoJob


def test_payload_is_plain_json():
    job = SendEmailJob(to="user@example.com", subject="Hi", text_body="Hello")

    assert json.loads(job.to_payload()) == {
        "to": "user@example.com",
        "subject": "Hi",
        "html_body": "",
        "text_body": "Hello",
    }


def test_payload_decodes_back_to_job():
    job = SendEmailJob(to="user@example.com", subject="Hi")

    assert SendEmailJob.from_payload(job.to_payload()) == job


def test_invalid_payload_raises_with_details():
    with pytest.raises(InvalidPayloadError) as exc_info:
        EchoJob.from_payload('{"message": 1, "extra": true}')

    error = exc_info.value
    assert error.job_type == "test_echo"
    assert "Invalid payload for job type test_echo" in str(error)
    assert error.details["errors"]


def test_job_routing_defaults():
    assert EchoJob.queue == "default"
    assert EchoJob.max_attempts is None
    assert SendEmailJob.queue == "email"
    assert SendEmailJob.max_attempts == 5


def test_jobs_are_immutable():
    job = EchoJob(message="hi")

    with pytest.raises(ValidationError):
        job.message = "changed"


def test_job_stats_from_counts():
    stats = JobStats.from_counts({"pending": 2, "failed": 1})

    assert stats.pending == 2
    assert stats.processing == 0
    assert stats.completed == 0
    assert stats.failed == 1
    assert stats.total == 3
