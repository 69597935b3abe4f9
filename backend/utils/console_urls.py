"""
Deep links into the Google Cloud console for batches and sessions.

Links are pure functions of resource identity (and time window for the log
viewer), so the same resource always renders the same URL.
"""

from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlencode

from models.resource import ResourceIdentifier, ResourceType, TimeWindow
from utils.log_filters import build_log_filter
from utils.resource_names import parse_resource_name

CONSOLE_BASE_URL = "https://console.cloud.google.com"
LOGS_VIEWER_URL = f"{CONSOLE_BASE_URL}/logs/viewer"

_CONSOLE_PATHS = {
    ResourceType.BATCH: "dataproc/batches/{location}/{id}/summary",
    ResourceType.SESSION: "dataproc/interactive/{location}/{id}/details",
}


def console_url(identifier: ResourceIdentifier) -> str:
    """Link to the resource's detail page."""
    path = _CONSOLE_PATHS[identifier.resource_type].format(
        location=identifier.location, id=identifier.id
    )
    return f"{CONSOLE_BASE_URL}/{path}?{urlencode({'project': identifier.project})}"


def logs_url(identifier: ResourceIdentifier, window: TimeWindow) -> str:
    """
    Link to the log viewer pre-filtered to the resource and time window.

    Batches carry an extra ``resource`` parameter selecting the monitored
    resource in the viewer; sessions do not.
    """
    params = [
        ("advancedFilter", build_log_filter(identifier, window)),
        ("project", identifier.project),
    ]
    if identifier.resource_type is ResourceType.BATCH:
        params.append(
            ("resource", f"{ResourceType.BATCH.monitored_resource}/{ResourceType.BATCH.id_label}/{identifier.id}")
        )
    return f"{LOGS_VIEWER_URL}?{urlencode(params)}"


def _identifier(resource_type: ResourceType, project: str, location: str, resource_id: str) -> ResourceIdentifier:
    return ResourceIdentifier(
        project=project, location=location, resource_type=resource_type, id=resource_id
    )


def batch_console_url(project: str, location: str, batch_id: str) -> str:
    return console_url(_identifier(ResourceType.BATCH, project, location, batch_id))


def batch_logs_url(
    project: str,
    location: str,
    batch_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> str:
    return logs_url(
        _identifier(ResourceType.BATCH, project, location, batch_id),
        TimeWindow(start=start, end=end),
    )


def session_console_url(project: str, location: str, session_id: str) -> str:
    return console_url(_identifier(ResourceType.SESSION, project, location, session_id))


def session_logs_url(
    project: str,
    location: str,
    session_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> str:
    return logs_url(
        _identifier(ResourceType.SESSION, project, location, session_id),
        TimeWindow(start=start, end=end),
    )


def console_url_from_resource(resource_type: ResourceType, resource: Any) -> str:
    """
    Console link for a Dataproc ``Batch`` or ``Session`` object.

    Raises:
        MalformedResourceName: If the object's name cannot be parsed
    """
    return console_url(parse_resource_name(resource.name, resource_type))


def logs_url_from_resource(resource_type: ResourceType, resource: Any) -> str:
    """
    Log viewer link for a Dataproc ``Batch`` or ``Session`` object, covering
    its creation time up to its latest state change.

    Raises:
        MalformedResourceName: If the object's name cannot be parsed
    """
    identifier = parse_resource_name(resource.name, resource_type)
    window = TimeWindow(
        start=getattr(resource, "create_time", None),
        end=getattr(resource, "state_time", None),
    )
    return logs_url(identifier, window)
