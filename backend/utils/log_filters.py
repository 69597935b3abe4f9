"""
Cloud Logging filter construction for batch and session logs.

Clauses are newline-separated (implicit AND) and their order is fixed per
resource type so that the same inputs always give byte-identical filters and
deep links.
"""

from datetime import timedelta
from typing import List, Optional

from models.resource import ResourceIdentifier, ResourceType, TimeWindow
from utils.formatters import format_rfc3339

# Log delivery can lag the resource's own timestamps
START_PADDING = timedelta(minutes=1)
END_PADDING = timedelta(minutes=10)


def quote_filter_value(value: str) -> str:
    """Quote a value for a filter clause, escaping embedded double quotes."""
    return '"' + value.replace('"', '\\"') + '"'


def _timestamp_clauses(window: TimeWindow) -> List[str]:
    clauses = []
    if window.start is not None:
        clauses.append(f"timestamp>={quote_filter_value(format_rfc3339(window.start - START_PADDING))}")
    if window.end is not None:
        clauses.append(f"timestamp<={quote_filter_value(format_rfc3339(window.end + END_PADDING))}")
    return clauses


def build_log_filter(
    identifier: ResourceIdentifier,
    window: TimeWindow,
    extra_filter: Optional[str] = None,
) -> str:
    """
    Build the log filter for one batch or session.

    Args:
        identifier: Resource whose logs are queried
        window: Resolved time window; a missing bound omits its clause
        extra_filter: Caller filter appended verbatim as a final line

    Returns:
        Newline-joined filter expression
    """
    resource_type = identifier.resource_type
    type_clause = f"resource.type={quote_filter_value(resource_type.monitored_resource)}"
    project_clause = f"resource.labels.project_id={quote_filter_value(identifier.project)}"
    location_clause = f"resource.labels.location={quote_filter_value(identifier.location)}"
    id_clause = f"resource.labels.{resource_type.id_label}={quote_filter_value(identifier.id)}"

    if resource_type is ResourceType.BATCH:
        clauses = [type_clause, project_clause, location_clause, id_clause]
    else:
        clauses = [type_clause, id_clause, project_clause, location_clause]

    clauses.extend(_timestamp_clauses(window))

    if extra_filter:
        clauses.append(extra_filter)

    return "\n".join(clauses)


def batch_logs_filter(project: str, location: str, batch_id: str, window: TimeWindow) -> str:
    """Log filter for a batch."""
    identifier = ResourceIdentifier(
        project=project, location=location, resource_type=ResourceType.BATCH, id=batch_id
    )
    return build_log_filter(identifier, window)


def session_logs_filter(project: str, location: str, session_id: str, window: TimeWindow) -> str:
    """Log filter for a session."""
    identifier = ResourceIdentifier(
        project=project, location=location, resource_type=ResourceType.SESSION, id=session_id
    )
    return build_log_filter(identifier, window)
