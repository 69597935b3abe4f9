"""Tests for log time window resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from models.resource import ResourceMetadataSnapshot, ResourceType, TimeWindow
from utils.exceptions import InvalidTimeFormat
from utils.time_windows import needs_metadata, parse_caller_window, resolve_time_window

CREATED = datetime(2025, 10, 1, 5, 0, 0, tzinfo=timezone.utc)
FINISHED = datetime(2025, 10, 1, 6, 0, 0, tzinfo=timezone.utc)
NOW = datetime(2025, 10, 2, 0, 0, 0, tzinfo=timezone.utc)


def _metadata(state: str) -> ResourceMetadataSnapshot:
    return ResourceMetadataSnapshot(create_time=CREATED, state=state, state_time=FINISHED)


class TestParseCallerWindow:
    """Tests for caller bound validation."""

    def test_parses_both_bounds(self):
        window = parse_caller_window("2025-10-01T05:00:00Z", "2025-10-01T06:00:00+01:00")

        assert window.start == CREATED
        assert window.end == datetime(2025, 10, 1, 5, 0, 0, tzinfo=timezone.utc)

    def test_missing_bounds_stay_missing(self):
        assert parse_caller_window(None, None) == TimeWindow()

    def test_invalid_start_names_field(self):
        with pytest.raises(InvalidTimeFormat) as exc_info:
            parse_caller_window("yesterday", None)

        assert exc_info.value.field == "startTime"
        assert "startTime" in str(exc_info.value)

    def test_invalid_end_names_field(self):
        with pytest.raises(InvalidTimeFormat) as exc_info:
            parse_caller_window("2025-10-01T05:00:00Z", "2025-10-01")

        assert exc_info.value.field == "endTime"


class TestResolveTimeWindow:
    """Tests for defaulting missing bounds from resource metadata."""

    @pytest.mark.parametrize("state", ["SUCCEEDED", "FAILED", "CANCELLED"])
    def test_terminal_batch_ends_at_state_time(self, state):
        window = resolve_time_window(ResourceType.BATCH, TimeWindow(), _metadata(state), now=lambda: NOW)

        assert window == TimeWindow(start=CREATED, end=FINISHED)

    def test_running_batch_ends_now(self):
        window = resolve_time_window(ResourceType.BATCH, TimeWindow(), _metadata("RUNNING"), now=lambda: NOW)

        assert window == TimeWindow(start=CREATED, end=NOW)

    def test_terminated_is_terminal_only_for_sessions(self):
        session = resolve_time_window(ResourceType.SESSION, TimeWindow(), _metadata("TERMINATED"), now=lambda: NOW)
        batch = resolve_time_window(ResourceType.BATCH, TimeWindow(), _metadata("TERMINATED"), now=lambda: NOW)

        assert session.end == FINISHED
        assert batch.end == NOW

    def test_default_clock_is_close_to_now(self):
        window = resolve_time_window(ResourceType.SESSION, TimeWindow(), _metadata("ACTIVE"))

        assert abs(datetime.now(timezone.utc) - window.end) < timedelta(seconds=5)

    def test_caller_bounds_win(self):
        caller_start = datetime(2025, 10, 1, 5, 30, tzinfo=timezone.utc)
        window = resolve_time_window(
            ResourceType.BATCH, TimeWindow(start=caller_start), _metadata("SUCCEEDED"), now=lambda: NOW
        )

        assert window == TimeWindow(start=caller_start, end=FINISHED)

    def test_complete_window_ignores_metadata(self):
        caller = TimeWindow(start=CREATED, end=FINISHED)

        assert not needs_metadata(caller)
        assert resolve_time_window(ResourceType.BATCH, caller, None, now=lambda: NOW) is caller

    def test_terminal_state_without_state_time_ends_now(self):
        metadata = ResourceMetadataSnapshot(create_time=CREATED, state="SUCCEEDED")
        window = resolve_time_window(ResourceType.BATCH, TimeWindow(), metadata, now=lambda: NOW)

        assert window.end == NOW
