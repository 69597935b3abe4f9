"""
Resource models for Serverless Spark batches and interactive sessions.

This module defines the resource type variants and the small immutable value
objects passed between name parsing, time window resolution, filter building
and log retrieval.
"""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResourceType(str, Enum):
    """Kinds of Serverless Spark workloads that produce logs."""

    BATCH = "batch"
    SESSION = "session"

    @property
    def collection(self) -> str:
        """Collection segment used in fully-qualified resource names."""
        return _COLLECTIONS[self]

    @property
    def monitored_resource(self) -> str:
        """Cloud Logging monitored resource type."""
        return _MONITORED_RESOURCES[self]

    @property
    def id_label(self) -> str:
        """Resource label holding the short id in Cloud Logging."""
        return f"{self.value}_id"

    @property
    def terminal_states(self) -> FrozenSet[str]:
        """Lifecycle states after which no further transition happens."""
        return _TERMINAL_STATES[self]


_COLLECTIONS = {
    ResourceType.BATCH: "batches",
    ResourceType.SESSION: "sessions",
}

_MONITORED_RESOURCES = {
    ResourceType.BATCH: "cloud_dataproc_batch",
    ResourceType.SESSION: "cloud_dataproc_session",
}

_TERMINAL_STATES = {
    ResourceType.BATCH: frozenset({"SUCCEEDED", "FAILED", "CANCELLED"}),
    ResourceType.SESSION: frozenset({"SUCCEEDED", "FAILED", "CANCELLED", "TERMINATED"}),
}


class ResourceIdentifier(BaseModel):
    """Identity of one batch or session."""

    model_config = ConfigDict(frozen=True)

    project: str
    location: str
    resource_type: ResourceType
    id: str

    @property
    def name(self) -> str:
        """Fully-qualified resource name."""
        return (
            f"projects/{self.project}/locations/{self.location}/"
            f"{self.resource_type.collection}/{self.id}"
        )


class TimeWindow(BaseModel):
    """Time range a log query covers. Either bound may be unknown."""

    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ResourceMetadataSnapshot(BaseModel):
    """Lifecycle fields of a batch or session used to default a time window."""

    model_config = ConfigDict(frozen=True)

    create_time: Optional[datetime] = None
    state: str = "STATE_UNSPECIFIED"
    state_time: Optional[datetime] = None


class LogQueryParams(BaseModel):
    """Caller parameters for a log query."""

    filter: Optional[str] = Field(default=None, description="Extra Cloud Logging filter line")
    newest_first: bool = Field(default=False, description="Newest entries first; oldest first otherwise")
    start_time: Optional[str] = Field(default=None, description="RFC3339 start; defaults to creation time")
    end_time: Optional[str] = Field(default=None, description="RFC3339 end; defaults to now or terminal state time")
    verbose: bool = Field(default=False, description="Include insertId, trace, spanId, httpRequest, labels, operation, sourceLocation")
    limit: Optional[int] = Field(default=None, description="Maximum number of entries")

    @field_validator("filter", "start_time", "end_time")
    @classmethod
    def blank_as_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value
