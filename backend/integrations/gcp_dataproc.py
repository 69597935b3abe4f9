"""
GCP Dataproc Serverless integration for batches and interactive sessions.

This module wraps the regional Batch and Session controller clients, adds
console and log viewer deep links to every resource it returns, and exposes
the lifecycle snapshot used to default log time windows.
"""

import asyncio
import json
from functools import lru_cache
from typing import Any, Dict, List, Optional

from google.cloud import dataproc_v1
from google.oauth2 import service_account
from google.protobuf.json_format import MessageToDict, ParseError
from loguru import logger

from config.settings import get_settings
from models.resource import ResourceMetadataSnapshot, ResourceType, TimeWindow
from utils.console_urls import console_url, console_url_from_resource, logs_url, logs_url_from_resource
from utils.exceptions import DataprocRequestFailed, InvalidBatchSpec, MalformedResourceName
from utils.formatters import format_rfc3339
from utils.resource_names import parse_resource_name


def _state_name(state: Any) -> str:
    return getattr(state, "name", None) or str(state or "STATE_UNSPECIFIED")


def _to_dict(message: Any) -> Dict[str, Any]:
    """protojson-style dictionary (camelCase keys, enum names, RFC3339 times)."""
    return MessageToDict(type(message).pb(message))


class GCPDataprocClient:
    """Dataproc Serverless batch and session client."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        batch_client: Optional[Any] = None,
        session_client: Optional[Any] = None,
    ):
        settings = get_settings()
        self.project_id = project_id or settings.GCP_PROJECT_ID
        self.location = location or settings.GCP_LOCATION

        if batch_client is None or session_client is None:
            client_options = {"api_endpoint": f"{self.location}-dataproc.googleapis.com:443"}
            credentials = None
            if settings.GCP_CREDENTIALS_PATH:
                credentials = service_account.Credentials.from_service_account_file(
                    settings.GCP_CREDENTIALS_PATH
                )
            if batch_client is None:
                batch_client = dataproc_v1.BatchControllerClient(
                    credentials=credentials, client_options=client_options
                )
            if session_client is None:
                session_client = dataproc_v1.SessionControllerClient(
                    credentials=credentials, client_options=client_options
                )
            logger.info(
                f"Initialized Dataproc clients for project {self.project_id} in {self.location}"
            )

        self.batch_client = batch_client
        self.session_client = session_client

    @property
    def parent(self) -> str:
        return f"projects/{self.project_id}/locations/{self.location}"

    def resource_name(self, resource_type: ResourceType, resource_id: str) -> str:
        return f"{self.parent}/{resource_type.collection}/{resource_id}"

    def _get(self, resource_type: ResourceType, resource_id: str) -> Any:
        name = self.resource_name(resource_type, resource_id)
        if resource_type is ResourceType.BATCH:
            return self.batch_client.get_batch(name=name)
        return self.session_client.get_session(name=name)

    async def get_resource(self, resource_type: ResourceType, resource_id: str) -> Any:
        """Fetch the raw Dataproc ``Batch`` or ``Session`` message."""
        logger.info(f"Getting {resource_type.value}: {resource_id}")
        try:
            return await asyncio.to_thread(self._get, resource_type, resource_id)
        except Exception as e:
            logger.error(f"Error getting {resource_type.value} {resource_id}: {e}")
            raise DataprocRequestFailed(f"failed to get {resource_type.value}: {e}") from e

    async def get_metadata(self, resource_type: ResourceType, resource_id: str) -> ResourceMetadataSnapshot:
        """Lifecycle snapshot (create time, state, state time) of a resource."""
        resource = await self.get_resource(resource_type, resource_id)
        return ResourceMetadataSnapshot(
            create_time=getattr(resource, "create_time", None),
            state=_state_name(getattr(resource, "state", None)),
            state_time=getattr(resource, "state_time", None),
        )

    async def _describe(self, resource_type: ResourceType, resource_id: str) -> Dict[str, Any]:
        resource = await self.get_resource(resource_type, resource_id)
        return {
            "consoleUrl": console_url_from_resource(resource_type, resource),
            "logsUrl": logs_url_from_resource(resource_type, resource),
            resource_type.value: _to_dict(resource),
        }

    async def get_batch(self, batch_id: str) -> Dict[str, Any]:
        """Batch details with console and logs links."""
        return await self._describe(ResourceType.BATCH, batch_id)

    async def get_session(self, session_id: str) -> Dict[str, Any]:
        """Session details with console and logs links."""
        return await self._describe(ResourceType.SESSION, session_id)

    def summarize(self, resource_type: ResourceType, resource: Any) -> Dict[str, Any]:
        """Compact listing view of a batch or session."""
        create_time = getattr(resource, "create_time", None)
        summary = {
            "name": resource.name,
            "uuid": getattr(resource, "uuid", ""),
            "state": _state_name(getattr(resource, "state", None)),
            "creator": getattr(resource, "creator", ""),
            "createTime": format_rfc3339(create_time) if create_time else "",
        }
        if resource_type is ResourceType.BATCH:
            summary["operation"] = getattr(resource, "operation", "")
        summary["consoleUrl"] = console_url_from_resource(resource_type, resource)
        summary["logsUrl"] = logs_url_from_resource(resource_type, resource)
        return summary

    def _list_page(
        self,
        resource_type: ResourceType,
        page_size: Optional[int],
        page_token: Optional[str],
        filter_: Optional[str],
    ) -> Any:
        request: Dict[str, Any] = {"parent": self.parent}
        if page_size:
            request["page_size"] = page_size
        if page_token:
            request["page_token"] = page_token
        if filter_:
            request["filter"] = filter_

        if resource_type is ResourceType.BATCH:
            request["order_by"] = "create_time desc"
            pager = self.batch_client.list_batches(request=request)
        else:
            pager = self.session_client.list_sessions(request=request)

        # Only the first page; callers page with nextPageToken
        return next(iter(pager.pages))

    async def _list(
        self,
        resource_type: ResourceType,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        filter_: Optional[str] = None,
    ) -> Dict[str, Any]:
        logger.info(
            f"Listing {resource_type.collection} in {self.parent} "
            f"(page_size={page_size}, filter={filter_!r})"
        )
        try:
            page = await asyncio.to_thread(self._list_page, resource_type, page_size, page_token, filter_)
        except Exception as e:
            logger.error(f"Error listing {resource_type.collection}: {e}")
            raise DataprocRequestFailed(f"failed to list {resource_type.collection}: {e}") from e
        resources: List[Any] = list(getattr(page, resource_type.collection))
        return {
            resource_type.collection: [self.summarize(resource_type, r) for r in resources],
            "nextPageToken": page.next_page_token,
        }

    async def list_batches(
        self,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        filter_: Optional[str] = None,
    ) -> Dict[str, Any]:
        """One page of batches, newest first."""
        return await self._list(ResourceType.BATCH, page_size, page_token, filter_)

    async def list_sessions(
        self,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        filter_: Optional[str] = None,
    ) -> Dict[str, Any]:
        """One page of sessions."""
        return await self._list(ResourceType.SESSION, page_size, page_token, filter_)

    async def create_batch(self, batch: Dict[str, Any], batch_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Submit a batch workload.

        The call returns as soon as Dataproc accepts the batch; the logs link
        covers everything from its creation onwards.

        Args:
            batch: Batch definition in its JSON form, e.g.
                ``{"pysparkBatch": {"mainPythonFileUri": "gs://..."}}``
            batch_id: Optional short id; Dataproc generates one when omitted

        Returns:
            Operation metadata with console and logs links for the new batch

        Raises:
            InvalidBatchSpec: If the definition is not a valid ``Batch``
            DataprocRequestFailed: If Dataproc rejects the request
        """
        try:
            message = dataproc_v1.Batch.from_json(json.dumps(batch))
        except ParseError as e:
            raise InvalidBatchSpec(str(e)) from e

        request: Dict[str, Any] = {"parent": self.parent, "batch": message}
        if batch_id:
            request["batch_id"] = batch_id

        logger.info(f"Creating batch in {self.parent} (batch_id={batch_id!r})")
        try:
            operation = await asyncio.to_thread(self.batch_client.create_batch, request=request)
        except Exception as e:
            logger.error(f"Error creating batch: {e}")
            raise DataprocRequestFailed(f"failed to create batch: {e}") from e

        metadata = operation.metadata
        if metadata is None:
            raise DataprocRequestFailed("failed to get create batch op metadata: operation has no metadata")

        try:
            identifier = parse_resource_name(metadata.batch, ResourceType.BATCH)
        except MalformedResourceName as e:
            raise DataprocRequestFailed(
                f"error extracting batch details from name {metadata.batch!r}: {e}"
            ) from e

        # The batch has not finished, so the logs window stays open-ended
        window = TimeWindow(start=metadata.create_time or None)
        logger.info(f"Created batch {identifier.id}")
        return {
            "opMetadata": _to_dict(metadata),
            "consoleUrl": console_url(identifier),
            "logsUrl": logs_url(identifier, window),
        }

    async def cancel_operation(self, operation_id: str) -> str:
        """
        Cancel a long-running batch operation.

        Raises:
            DataprocRequestFailed: If the cancellation request fails
        """
        name = f"{self.parent}/operations/{operation_id}"
        logger.info(f"Cancelling operation {name}")
        try:
            await asyncio.to_thread(self.batch_client.cancel_operation, request={"name": name})
        except Exception as e:
            logger.error(f"Error cancelling operation {operation_id}: {e}")
            raise DataprocRequestFailed(f"failed to cancel operation: {e}") from e
        return f"Cancelled [{operation_id}]."

    def close(self) -> None:
        for client in (self.batch_client, self.session_client):
            transport = getattr(client, "transport", None)
            if transport is not None and callable(getattr(transport, "close", None)):
                transport.close()


@lru_cache()
def get_dataproc_client() -> GCPDataprocClient:
    """Get the shared Dataproc client (cached)."""
    return GCPDataprocClient()
