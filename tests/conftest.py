"""Pytest fixtures and in-memory fakes for the Google Cloud clients."""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from google.api_core.exceptions import NotFound, ServiceUnavailable
from google.cloud import logging

# Settings require a project; set it before anything reads them
os.environ.setdefault("GCP_PROJECT_ID", "my-project")

from integrations.gcp_dataproc import GCPDataprocClient
from integrations.gcp_logging import GCPLoggingClient
from models.resource import ResourceMetadataSnapshot, ResourceType

PROJECT = "my-project"
LOCATION = "us-central1"


def make_entry(
    message: Any = "hello",
    timestamp: Optional[datetime] = None,
    **fields: Any,
) -> SimpleNamespace:
    """A Cloud Logging entry with only the given optional fields set."""
    entry = {
        "log_name": f"projects/{PROJECT}/logs/dataproc.googleapis.com%2Foutput",
        "timestamp": timestamp or datetime(2025, 10, 1, 5, 30, 0, tzinfo=timezone.utc),
        "severity": "INFO",
        "resource": SimpleNamespace(
            type="cloud_dataproc_batch",
            labels={"project_id": PROJECT, "location": LOCATION, "batch_id": "my-batch"},
        ),
        "payload": message,
        "insert_id": None,
        "labels": None,
        "http_request": None,
        "trace": None,
        "span_id": None,
        "operation": None,
        "source_location": None,
    }
    entry.update(fields)
    return SimpleNamespace(**entry)


class FakeLoggingBackend:
    """Stands in for ``google.cloud.logging.Client``."""

    def __init__(self, entries: List[Any], fail_after: Optional[int] = None):
        self.entries = entries
        self.fail_after = fail_after
        self.calls: List[Dict[str, Any]] = []
        self.pulled = 0

    def list_entries(self, **kwargs: Any):
        self.calls.append(kwargs)
        ordered = sorted(self.entries, key=lambda e: e.timestamp, reverse=kwargs.get("order_by") == logging.DESCENDING)
        return self._generate(ordered)

    def _generate(self, ordered: List[Any]):
        for index, entry in enumerate(ordered):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("backend unavailable")
            self.pulled += 1
            yield entry


class FakeDataproc:
    """Stands in for ``GCPDataprocClient`` in service tests."""

    def __init__(self, metadata: Optional[ResourceMetadataSnapshot] = None, error: Optional[Exception] = None):
        self.project_id = PROJECT
        self.location = LOCATION
        self.metadata = metadata or ResourceMetadataSnapshot()
        self.error = error
        self.lookups: List[tuple] = []

    async def get_metadata(self, resource_type: ResourceType, resource_id: str) -> ResourceMetadataSnapshot:
        self.lookups.append((resource_type, resource_id))
        if self.error is not None:
            raise self.error
        return self.metadata


@pytest.fixture
def entries():
    return [
        make_entry(f"line {i}", timestamp=datetime(2025, 10, 1, 5, i, 0, tzinfo=timezone.utc))
        for i in range(50)
    ]


@pytest.fixture
def logging_backend(entries):
    return FakeLoggingBackend(entries)


@pytest.fixture
def logging_client(logging_backend):
    return GCPLoggingClient(project_id=PROJECT, client=logging_backend)


@pytest.fixture
def fixed_now():
    return datetime(2025, 10, 1, 7, 0, 0, tzinfo=timezone.utc)


class FailingController:
    """Dataproc controller whose every call fails with ``error``."""

    def __init__(self, error: Exception):
        self.error = error

    def _fail(self, *args: Any, **kwargs: Any):
        raise self.error

    get_batch = get_session = list_batches = list_sessions = create_batch = cancel_operation = _fail


@pytest.fixture
def failing_dataproc():
    return GCPDataprocClient(
        project_id=PROJECT,
        location=LOCATION,
        batch_client=FailingController(NotFound("batch not found")),
        session_client=FailingController(ServiceUnavailable("backend down")),
    )
