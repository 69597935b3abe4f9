"""
Resource log service for Serverless Spark batches and sessions.

This module turns caller parameters into a single Cloud Logging query:
it validates the short resource id, resolves the time window (looking the
resource up only when a bound is missing), builds the resource filter and
collects the bounded entry stream.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from config.settings import get_settings
from integrations.gcp_dataproc import GCPDataprocClient, get_dataproc_client
from integrations.gcp_logging import GCPLoggingClient, get_logging_client
from models.resource import LogQueryParams, ResourceIdentifier, ResourceType, TimeWindow
from utils.exceptions import MetadataFetchFailed
from utils.formatters import utc_now
from utils.log_filters import build_log_filter
from utils.time_windows import needs_metadata, parse_caller_window, resolve_time_window
from utils.validators import normalize_limit, validate_resource_id


class ResourceLogService:
    """Fetches logs for a batch or session identified by its short id."""

    def __init__(
        self,
        logging_client: GCPLoggingClient,
        dataproc_client: GCPDataprocClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.logging_client = logging_client
        self.dataproc_client = dataproc_client
        self.clock = clock
        self.default_limit = get_settings().DEFAULT_LOG_LIMIT

    def identify(self, resource_type: ResourceType, resource_id: str) -> ResourceIdentifier:
        return ResourceIdentifier(
            project=self.dataproc_client.project_id,
            location=self.dataproc_client.location,
            resource_type=resource_type,
            id=resource_id,
        )

    async def resolve_window(
        self,
        resource_type: ResourceType,
        resource_id: str,
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> TimeWindow:
        """
        Validate caller bounds and fill missing ones from the resource.

        Raises:
            InvalidTimeFormat: If a caller bound is not RFC3339
            MetadataFetchFailed: If the resource lookup fails
        """
        window = parse_caller_window(start_time, end_time)
        if not needs_metadata(window):
            return window

        try:
            metadata = await self.dataproc_client.get_metadata(resource_type, resource_id)
        except Exception as e:
            logger.error(f"Error getting {resource_type.value} {resource_id} details: {e}")
            raise MetadataFetchFailed(
                f"failed to get {resource_type.value} details to determine time range: {e}"
            ) from e

        return resolve_time_window(resource_type, window, metadata, now=self.clock)

    async def get_logs(
        self,
        resource_type: ResourceType,
        resource_id: str,
        params: Optional[LogQueryParams] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get log entries for a batch or session.

        Args:
            resource_type: Batch or session
            resource_id: Short id, e.g. ``my-batch``
            params: Filter, ordering, window, verbosity and limit

        Returns:
            Projected log entries, at most ``limit`` of them

        Raises:
            InvalidResourceId: If the id is empty or fully qualified
            InvalidTimeFormat: If a caller bound is not RFC3339
            MetadataFetchFailed: If the resource lookup fails
            LogFetchFailed: If the log query fails
        """
        params = params or LogQueryParams()
        validate_resource_id(resource_type.id_label, resource_id)
        limit = normalize_limit(params.limit, self.default_limit)

        window = await self.resolve_window(
            resource_type, resource_id, params.start_time, params.end_time
        )
        log_filter = build_log_filter(
            self.identify(resource_type, resource_id), window, params.filter
        )

        logger.info(
            f"Getting logs for {resource_type.value} {resource_id} "
            f"(limit={limit}, newest_first={params.newest_first}, verbose={params.verbose})"
        )
        return await self.logging_client.fetch_log_entries(
            log_filter,
            newest_first=params.newest_first,
            limit=limit,
            verbose=params.verbose,
        )

    async def get_batch_logs(self, batch_id: str, params: Optional[LogQueryParams] = None) -> List[Dict[str, Any]]:
        return await self.get_logs(ResourceType.BATCH, batch_id, params)

    async def get_session_logs(self, session_id: str, params: Optional[LogQueryParams] = None) -> List[Dict[str, Any]]:
        return await self.get_logs(ResourceType.SESSION, session_id, params)


def get_resource_log_service() -> ResourceLogService:
    """FastAPI dependency: service bound to the shared Google clients."""
    return ResourceLogService(get_logging_client(), get_dataproc_client())
