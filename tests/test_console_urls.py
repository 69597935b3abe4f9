"""Tests for console and log viewer deep links."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from models.resource import ResourceType
from utils.console_urls import (
    batch_console_url,
    batch_logs_url,
    console_url_from_resource,
    logs_url_from_resource,
    session_console_url,
    session_logs_url,
)
from utils.exceptions import MalformedResourceName

START = datetime(2025, 10, 1, 5, 0, 0, tzinfo=timezone.utc)
END = datetime(2025, 10, 1, 6, 0, 0, tzinfo=timezone.utc)

BATCH_LOGS_URL = (
    "https://console.cloud.google.com/logs/viewer?advancedFilter="
    "resource.type%3D%22cloud_dataproc_batch%22"
    "%0Aresource.labels.project_id%3D%22my-project%22"
    "%0Aresource.labels.location%3D%22us-central1%22"
    "%0Aresource.labels.batch_id%3D%22my-batch%22"
    "%0Atimestamp%3E%3D%222025-10-01T04%3A59%3A00Z%22"
    "%0Atimestamp%3C%3D%222025-10-01T06%3A10%3A00Z%22"
    "&project=my-project"
    "&resource=cloud_dataproc_batch%2Fbatch_id%2Fmy-batch"
)

SESSION_LOGS_URL = (
    "https://console.cloud.google.com/logs/viewer?advancedFilter="
    "resource.type%3D%22cloud_dataproc_session%22"
    "%0Aresource.labels.session_id%3D%22my-session%22"
    "%0Aresource.labels.project_id%3D%22my-project%22"
    "%0Aresource.labels.location%3D%22us-central1%22"
    "%0Atimestamp%3E%3D%222025-10-01T04%3A59%3A00Z%22"
    "%0Atimestamp%3C%3D%222025-10-01T06%3A10%3A00Z%22"
    "&project=my-project"
)


class TestBatchUrls:
    """Tests for batch links."""

    def test_console_url(self):
        assert batch_console_url("my-project", "us-central1", "my-batch") == (
            "https://console.cloud.google.com/dataproc/batches/us-central1/my-batch/summary?project=my-project"
        )

    def test_logs_url(self):
        assert batch_logs_url("my-project", "us-central1", "my-batch", START, END) == BATCH_LOGS_URL

    def test_logs_url_is_deterministic(self):
        first = batch_logs_url("my-project", "us-central1", "my-batch", START, END)
        second = batch_logs_url("my-project", "us-central1", "my-batch", START, END)

        assert first == second

    def test_from_resource(self):
        batch = SimpleNamespace(
            name="projects/my-project/locations/us-central1/batches/my-batch",
            create_time=START,
            state_time=END,
        )

        assert console_url_from_resource(ResourceType.BATCH, batch) == (
            "https://console.cloud.google.com/dataproc/batches/us-central1/my-batch/summary?project=my-project"
        )
        assert logs_url_from_resource(ResourceType.BATCH, batch) == BATCH_LOGS_URL

    def test_from_resource_with_bad_name(self):
        with pytest.raises(MalformedResourceName):
            console_url_from_resource(ResourceType.BATCH, SimpleNamespace(name="bad"))

    def test_spaces_and_quotes_are_query_escaped(self):
        url = batch_logs_url("my-project", "us-central1", 'a" b', START, END)

        assert "batch_id%3D%22a%5C%22+b%22" in url
        assert url.endswith("&resource=cloud_dataproc_batch%2Fbatch_id%2Fa%22+b")


class TestSessionUrls:
    """Tests for session links."""

    def test_console_url(self):
        assert session_console_url("my-project", "us-central1", "my-session") == (
            "https://console.cloud.google.com/dataproc/interactive/us-central1/my-session/details?project=my-project"
        )

    def test_logs_url_has_no_resource_parameter(self):
        url = session_logs_url("my-project", "us-central1", "my-session", START, END)

        assert url == SESSION_LOGS_URL
        assert "&resource=" not in url

    def test_from_resource(self):
        session = SimpleNamespace(
            name="projects/my-project/locations/us-central1/sessions/my-session",
            create_time=START,
            state_time=END,
        )

        assert console_url_from_resource(ResourceType.SESSION, session) == (
            "https://console.cloud.google.com/dataproc/interactive/us-central1/my-session/details?project=my-project"
        )
        assert logs_url_from_resource(ResourceType.SESSION, session) == SESSION_LOGS_URL
