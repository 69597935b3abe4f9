"""Data models for Serverless Spark log retrieval."""

from .resource import (
    LogQueryParams,
    ResourceIdentifier,
    ResourceMetadataSnapshot,
    ResourceType,
    TimeWindow,
)

__all__ = [
    "LogQueryParams",
    "ResourceIdentifier",
    "ResourceMetadataSnapshot",
    "ResourceType",
    "TimeWindow",
]
