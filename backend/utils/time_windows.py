"""
Time window resolution for resource log queries.

Callers may give both, one or neither bound. Missing bounds come from the
resource itself: the start defaults to its creation time, the end to its
final state time once it has reached a terminal state, or to the current time
while it is still running.
"""

from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from models.resource import ResourceMetadataSnapshot, ResourceType, TimeWindow
from utils.formatters import utc_now
from utils.validators import parse_rfc3339


def parse_caller_window(start_time: Optional[str], end_time: Optional[str]) -> TimeWindow:
    """
    Validate the bounds a caller supplied.

    Raises:
        InvalidTimeFormat: If a supplied bound is not RFC3339
    """
    start = parse_rfc3339(start_time, "startTime") if start_time else None
    end = parse_rfc3339(end_time, "endTime") if end_time else None
    return TimeWindow(start=start, end=end)


def needs_metadata(window: TimeWindow) -> bool:
    """Whether resource metadata is required to complete the window."""
    return window.start is None or window.end is None


def resolve_time_window(
    resource_type: ResourceType,
    window: TimeWindow,
    metadata: Optional[ResourceMetadataSnapshot],
    now: Callable[[], datetime] = utc_now,
) -> TimeWindow:
    """
    Fill the missing bounds of a caller window.

    Metadata-derived bounds are trusted and not re-validated.

    Args:
        resource_type: Batch or session, selects the terminal state set
        window: Caller window, already validated
        metadata: Resource lifecycle snapshot; only consulted for missing bounds
        now: Clock used when a running resource has no natural end

    Returns:
        TimeWindow with both bounds set whenever the metadata allows it
    """
    if not needs_metadata(window):
        return window

    metadata = metadata or ResourceMetadataSnapshot()

    start = window.start
    if start is None:
        start = metadata.create_time

    end = window.end
    if end is None:
        if metadata.state in resource_type.terminal_states and metadata.state_time is not None:
            end = metadata.state_time
        else:
            end = now()

    logger.debug(
        f"Resolved {resource_type.value} log window: start={start} end={end} "
        f"(state={metadata.state})"
    )
    return TimeWindow(start=start, end=end)
