"""
Exception hierarchy for Serverless Spark log retrieval.

Input problems (bad names, ids, timestamps) also subclass ValueError so the
API layer can answer them with 400; backend failures are answered with 502.
"""

from typing import Optional


class ServerlessSparkError(Exception):
    """Base class for all errors raised by this service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MalformedResourceName(ServerlessSparkError, ValueError):
    """A fully-qualified batch or session name did not have the expected shape."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"failed to parse {kind} name: {name}")
        self.kind = kind
        self.name = name


class InvalidResourceId(ServerlessSparkError, ValueError):
    """A short batch or session id was empty or contained a path separator."""

    def __init__(self, field: str, resource_id: str):
        if not resource_id:
            message = f"missing required parameter: {field}"
        else:
            message = f"{field} must be a short name without '/': {resource_id}"
        super().__init__(message)
        self.field = field
        self.resource_id = resource_id


class InvalidTimeFormat(ServerlessSparkError, ValueError):
    """A caller-supplied time bound is not a valid RFC3339 timestamp."""

    def __init__(self, field: str, value: str, reason: Optional[str] = None):
        message = f"{field} must be in RFC3339 format: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.field = field
        self.value = value


class MetadataFetchFailed(ServerlessSparkError):
    """Looking up batch or session details to resolve a time window failed."""


class LogFetchFailed(ServerlessSparkError):
    """Iterating Cloud Logging entries failed."""


class InvalidBatchSpec(ServerlessSparkError, ValueError):
    """A batch definition could not be read as a Dataproc ``Batch``."""

    def __init__(self, reason: str):
        super().__init__(f"invalid batch definition: {reason}")
        self.reason = reason


class DataprocRequestFailed(ServerlessSparkError):
    """A Dataproc batch, session or operation call failed."""
