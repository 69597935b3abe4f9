"""
Utility functions for formatting timestamps and durations in log output.

This module provides the formatting used by log filters, deep links and log
entry projections so that every timestamp and latency is rendered the same
way across the service.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

NANOS_PER_MICROSECOND = 1_000
NANOS_PER_MILLISECOND = 1_000_000
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MINUTE = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR = 60 * NANOS_PER_MINUTE


def format_rfc3339(value: datetime) -> str:
    """
    Format a datetime as an RFC3339 timestamp in UTC with whole seconds.

    Args:
        value: Datetime to format; naive values are taken to be UTC

    Returns:
        Timestamp string such as ``2025-10-01T05:00:00Z``
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def _to_nanoseconds(value: Union[str, int, float, timedelta, Dict[str, Any]]) -> Optional[int]:
    """Convert a duration in any of the shapes Cloud Logging uses to nanoseconds."""
    if isinstance(value, timedelta):
        whole = (value.days * 86400 + value.seconds) * NANOS_PER_SECOND
        return whole + value.microseconds * NANOS_PER_MICROSECOND

    if isinstance(value, dict):
        seconds = int(value.get("seconds", 0) or 0)
        nanos = int(value.get("nanos", 0) or 0)
        return seconds * NANOS_PER_SECOND + nanos

    if isinstance(value, (int, float)):
        return int(Decimal(str(value)) * NANOS_PER_SECOND)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("s"):
            text = text[:-1]
        try:
            return int(Decimal(text) * NANOS_PER_SECOND)
        except InvalidOperation:
            return None

    return None


def _trim_fraction(whole: int, remainder: int, digits: int) -> str:
    if not remainder:
        return str(whole)
    fraction = f"{remainder:0{digits}d}".rstrip("0")
    return f"{whole}.{fraction}"


def format_latency(value: Union[str, int, float, timedelta, Dict[str, Any], None]) -> str:
    """
    Format a request latency the way Go renders durations.

    Accepts the protobuf JSON form (``"0.250s"``), a ``{"seconds", "nanos"}``
    mapping, a timedelta or a number of seconds.

    Args:
        value: Latency to format

    Returns:
        Compact duration string such as ``250ms``, ``1.5s`` or ``1h2m3s``
    """
    if value is None:
        return "0s"

    nanos = _to_nanoseconds(value)
    if nanos is None:
        return str(value)

    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos == 0:
        return "0s"

    if nanos < NANOS_PER_MICROSECOND:
        return f"{sign}{nanos}ns"

    if nanos < NANOS_PER_MILLISECOND:
        whole, rest = divmod(nanos, NANOS_PER_MICROSECOND)
        return f"{sign}{_trim_fraction(whole, rest, 3)}µs"

    if nanos < NANOS_PER_SECOND:
        whole, rest = divmod(nanos, NANOS_PER_MILLISECOND)
        return f"{sign}{_trim_fraction(whole, rest, 6)}ms"

    hours, rest = divmod(nanos, NANOS_PER_HOUR)
    minutes, rest = divmod(rest, NANOS_PER_MINUTE)
    seconds, rest = divmod(rest, NANOS_PER_SECOND)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{_trim_fraction(seconds, rest, 9)}s")

    return sign + "".join(parts)
