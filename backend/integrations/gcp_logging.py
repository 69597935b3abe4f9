"""
GCP Cloud Logging integration for Serverless Spark workloads.

This module runs a single filtered Cloud Logging query and streams the
matching entries back lazily, stopping as soon as the requested number of
entries has been produced.
"""

import asyncio
from functools import lru_cache
from typing import Any, AsyncIterator, Dict, List, Optional

from google.cloud import logging
from google.oauth2 import service_account
from loguru import logger

from config.settings import get_settings
from integrations.log_entries import project_log_entry
from utils.exceptions import LogFetchFailed
from utils.validators import normalize_limit

# Cloud Logging caps a single page at 1000 entries
MAX_PAGE_SIZE = 1000

_EXHAUSTED = object()


class GCPLoggingClient:
    """GCP Cloud Logging integration client."""

    def __init__(self, project_id: Optional[str] = None, client: Optional[Any] = None):
        """
        Initialize the GCP Logging client.

        Args:
            project_id: Project to query; defaults to the configured project
            client: Pre-built ``google.cloud.logging.Client``
        """
        settings = get_settings()
        self.project_id = project_id or settings.GCP_PROJECT_ID
        self.default_limit = settings.DEFAULT_LOG_LIMIT
        self.deadline_seconds = settings.LOG_QUERY_DEADLINE_SECONDS
        self.client = client if client is not None else self._initialize_client(settings)

    def _initialize_client(self, settings) -> Any:
        """Initialize the Cloud Logging client from settings."""
        if settings.GCP_CREDENTIALS_PATH:
            credentials = service_account.Credentials.from_service_account_file(
                settings.GCP_CREDENTIALS_PATH
            )
            client = logging.Client(project=self.project_id, credentials=credentials)
        else:
            # Application Default Credentials
            client = logging.Client(project=self.project_id)

        logger.info(f"Initialized GCP Logging client for project: {self.project_id}")
        return client

    async def iter_log_entries(
        self,
        log_filter: str,
        newest_first: bool = False,
        limit: Optional[int] = None,
        verbose: bool = False,
        deadline_seconds: Optional[float] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Stream projected log entries matching a filter.

        Entries are pulled from the backend one at a time and never more than
        one page ahead, so memory stays bounded by ``limit``. Cancelling the
        consuming task stops the iteration at the next pull; passing a
        deadline ends it early, keeping what was already produced.

        Args:
            log_filter: Cloud Logging filter expression
            newest_first: Order newest entries first instead of oldest first
            limit: Maximum number of entries; non-positive or missing uses the default
            verbose: Include optional entry fields
            deadline_seconds: Stop pulling after this many seconds

        Yields:
            Projected log entry dictionaries

        Raises:
            LogFetchFailed: If the backend query or iteration fails
        """
        limit = normalize_limit(limit, self.default_limit)
        order_by = logging.DESCENDING if newest_first else logging.ASCENDING
        if deadline_seconds is None:
            deadline_seconds = self.deadline_seconds

        loop = asyncio.get_running_loop()
        deadline = loop.time() + deadline_seconds if deadline_seconds else None

        logger.info(
            f"Querying Cloud Logging in project {self.project_id} "
            f"(limit={limit}, order_by={order_by!r})"
        )
        logger.debug(f"Log filter:\n{log_filter}")

        try:
            entries = self.client.list_entries(
                resource_names=[f"projects/{self.project_id}"],
                filter_=log_filter,
                order_by=order_by,
                page_size=min(limit, MAX_PAGE_SIZE),
            )
            iterator = iter(entries)
        except Exception as e:
            logger.error(f"Error starting log query: {e}")
            raise LogFetchFailed(f"failed to query log entries: {e}") from e

        produced = 0
        while produced < limit:
            if deadline is not None and loop.time() >= deadline:
                logger.warning(
                    f"Log query deadline of {deadline_seconds}s reached after {produced} entries"
                )
                break

            try:
                entry = await asyncio.to_thread(next, iterator, _EXHAUSTED)
            except Exception as e:
                logger.error(f"Error iterating log entries after {produced} entries: {e}")
                raise LogFetchFailed(f"failed to iterate log entries: {e}") from e

            if entry is _EXHAUSTED:
                break

            produced += 1
            yield project_log_entry(entry, verbose=verbose)

        logger.info(f"Fetched {produced} log entries")

    async def fetch_log_entries(
        self,
        log_filter: str,
        newest_first: bool = False,
        limit: Optional[int] = None,
        verbose: bool = False,
        deadline_seconds: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """Collect ``iter_log_entries`` into a list."""
        return [
            entry
            async for entry in self.iter_log_entries(
                log_filter,
                newest_first=newest_first,
                limit=limit,
                verbose=verbose,
                deadline_seconds=deadline_seconds,
            )
        ]

    def close(self) -> None:
        """Release the underlying transport."""
        close = getattr(self.client, "close", None)
        if callable(close):
            close()


@lru_cache()
def get_logging_client() -> GCPLoggingClient:
    """Get the shared Cloud Logging client (cached)."""
    return GCPLoggingClient()
