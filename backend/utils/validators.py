"""
Validation utility functions for caller-supplied log query input.

This module validates short resource ids, RFC3339 time bounds and entry limits
before they reach the Google Cloud APIs.
"""

import re
from datetime import datetime
from typing import Optional

from utils.exceptions import InvalidResourceId, InvalidTimeFormat

DEFAULT_LOG_LIMIT = 20

RFC3339_PATTERN = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str, field: str) -> datetime:
    """
    Parse a strict RFC3339 timestamp.

    Args:
        value: Timestamp string, e.g. ``2025-12-09T00:00:00Z``
        field: Parameter name reported when the value is rejected

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimeFormat: If the value is not RFC3339
    """
    match = RFC3339_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeFormat(field, value)

    offset = match.group("offset").upper()
    if offset == "Z":
        offset = "+00:00"

    normalized = f"{match.group('date')}T{match.group('time')}"
    if match.group("fraction"):
        # datetime only keeps microseconds
        normalized += "." + match.group("fraction")[:6].ljust(6, "0")
    normalized += offset

    try:
        return datetime.fromisoformat(normalized)
    except ValueError as e:
        raise InvalidTimeFormat(field, value, str(e)) from e


def validate_resource_id(field: str, resource_id: Optional[str]) -> str:
    """
    Check that a batch or session id is a short name.

    Args:
        field: Parameter name, e.g. ``batch_id``
        resource_id: Caller-supplied id

    Returns:
        The id unchanged

    Raises:
        InvalidResourceId: If the id is empty or contains ``/``
    """
    if not resource_id or "/" in resource_id:
        raise InvalidResourceId(field, resource_id or "")
    return resource_id


def normalize_limit(limit: Optional[int], default: int = DEFAULT_LOG_LIMIT) -> int:
    """Return ``limit`` if positive, otherwise the default."""
    if limit is None or limit <= 0:
        return default
    return limit
