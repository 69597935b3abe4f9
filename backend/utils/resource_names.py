"""Parsing of fully-qualified Serverless Spark resource names."""

from typing import Tuple

from models.resource import ResourceIdentifier, ResourceType
from utils.exceptions import MalformedResourceName


def parse_resource_name(name: str, resource_type: ResourceType) -> ResourceIdentifier:
    """
    Split ``projects/{project}/locations/{location}/{batches|sessions}/{id}``.

    Args:
        name: Fully-qualified resource name
        resource_type: Which collection the name must belong to

    Returns:
        ResourceIdentifier with project, location and short id

    Raises:
        MalformedResourceName: If the name does not have exactly that shape
    """
    parts = name.split("/") if isinstance(name, str) else []
    if (
        len(parts) != 6
        or parts[0] != "projects"
        or parts[2] != "locations"
        or parts[4] != resource_type.collection
        or not all(parts[i] for i in (1, 3, 5))
    ):
        raise MalformedResourceName(resource_type.value, name)

    return ResourceIdentifier(
        project=parts[1],
        location=parts[3],
        resource_type=resource_type,
        id=parts[5],
    )


def extract_batch_details(name: str) -> Tuple[str, str, str]:
    """Return ``(project, location, batch_id)`` for a batch name."""
    identifier = parse_resource_name(name, ResourceType.BATCH)
    return identifier.project, identifier.location, identifier.id


def extract_session_details(name: str) -> Tuple[str, str, str]:
    """Return ``(project, location, session_id)`` for a session name."""
    identifier = parse_resource_name(name, ResourceType.SESSION)
    return identifier.project, identifier.location, identifier.id
