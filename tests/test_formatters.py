"""Tests for timestamp/latency formatting and input validation helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from utils.exceptions import InvalidResourceId, InvalidTimeFormat
from utils.formatters import format_latency, format_rfc3339
from utils.validators import normalize_limit, parse_rfc3339, validate_resource_id


class TestFormatRfc3339:
    def test_utc(self):
        assert format_rfc3339(datetime(2025, 10, 1, 5, 0, 0, 123456, tzinfo=timezone.utc)) == "2025-10-01T05:00:00Z"

    def test_offset_converted(self):
        value = datetime(2025, 10, 1, 7, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_rfc3339(value) == "2025-10-01T05:00:00Z"

    def test_naive_is_utc(self):
        assert format_rfc3339(datetime(2025, 10, 1, 5, 0, 0)) == "2025-10-01T05:00:00Z"


class TestFormatLatency:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("0.250s", "250ms"),
            ("1.5s", "1.5s"),
            ("0s", "0s"),
            ("0.000001500s", "1.5µs"),
            ("0.000000042s", "42ns"),
            ("3600s", "1h0m0s"),
            ("3723.5s", "1h2m3.5s"),
            ({"seconds": 2, "nanos": 500000000}, "2.5s"),
            (timedelta(milliseconds=1500), "1.5s"),
            (None, "0s"),
        ],
    )
    def test_go_style(self, value, expected):
        assert format_latency(value) == expected

    def test_unparseable_is_passed_through(self):
        assert format_latency("fast") == "fast"


class TestParseRfc3339:
    def test_zulu(self):
        assert parse_rfc3339("2025-12-09T00:00:00Z", "startTime") == datetime(2025, 12, 9, tzinfo=timezone.utc)

    def test_fractional_and_offset(self):
        parsed = parse_rfc3339("2025-12-09T01:00:00.123456789+01:00", "startTime")
        assert parsed.astimezone(timezone.utc) == datetime(2025, 12, 9, 0, 0, 0, 123456, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value",
        ["2025-12-09", "2025-12-09 00:00:00Z", "2025-12-09T00:00:00", "2025-13-09T00:00:00Z", "now", ""],
    )
    def test_rejects(self, value):
        with pytest.raises(InvalidTimeFormat) as exc_info:
            parse_rfc3339(value, "endTime")
        assert exc_info.value.field == "endTime"


class TestValidateResourceId:
    def test_short_id(self):
        assert validate_resource_id("batch_id", "my-batch") == "my-batch"

    def test_rejects_slash(self):
        with pytest.raises(InvalidResourceId) as exc_info:
            validate_resource_id("batch_id", "projects/p/locations/l/batches/b")
        assert str(exc_info.value) == "batch_id must be a short name without '/': projects/p/locations/l/batches/b"

    def test_rejects_empty(self):
        with pytest.raises(InvalidResourceId) as exc_info:
            validate_resource_id("session_id", "")
        assert str(exc_info.value) == "missing required parameter: session_id"


@pytest.mark.parametrize("limit,expected", [(None, 20), (0, 20), (-5, 20), (1, 1), (500, 500)])
def test_normalize_limit(limit, expected):
    assert normalize_limit(limit) == expected
