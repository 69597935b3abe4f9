"""
FastAPI router for Serverless Spark batch endpoints.

This module provides REST endpoints for listing batches, describing a batch
with its console and log viewer links, and reading a batch's Cloud Logging
entries.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Path
from loguru import logger

from integrations.gcp_dataproc import GCPDataprocClient, get_dataproc_client
from models.resource import LogQueryParams
from services.resource_logs import ResourceLogService, get_resource_log_service
from utils.validators import validate_resource_id

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def list_batches(
    page_size: Optional[int] = Query(default=None, alias="pageSize", gt=0, description="Maximum batches to return"),
    page_token: Optional[str] = Query(default=None, alias="pageToken", description="Token from a previous page"),
    filter: Optional[str] = Query(
        default=None,
        description=(
            "Filter expression, e.g. state = RUNNING AND create_time < \"2023-01-01T00:00:00Z\". "
            "Supported fields are batch_id, batch_uuid, state, create_time and labels."
        ),
    ),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """List batches, newest first."""
    return await dataproc.list_batches(page_size=page_size, page_token=page_token, filter_=filter)


@router.post("", response_model=Dict[str, Any])
async def create_batch(
    batch: Dict[str, Any] = Body(
        ...,
        description="Batch definition, e.g. {\"pysparkBatch\": {\"mainPythonFileUri\": \"gs://bucket/job.py\"}}",
    ),
    batch_id: Optional[str] = Query(default=None, alias="batchId", description="Short ID for the new batch"),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """Submit a batch and return its operation metadata with console and logs URLs."""
    if batch_id is not None:
        validate_resource_id("batch_id", batch_id)
    return await dataproc.create_batch(batch, batch_id=batch_id)


@router.get("/{batch_id}", response_model=Dict[str, Any])
async def get_batch(
    batch_id: str = Path(..., description="The short batch ID (e.g. 'my-batch')"),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """Get a batch with its console and logs URLs."""
    validate_resource_id("batch_id", batch_id)
    return await dataproc.get_batch(batch_id)


@router.get("/{batch_id}/logs", response_model=List[Dict[str, Any]])
async def get_batch_logs(
    batch_id: str = Path(..., description="The short batch ID (e.g. 'my-batch')"),
    filter: Optional[str] = Query(default=None, description="Cloud Logging filter appended to the batch filter"),
    newest_first: bool = Query(default=False, alias="newestFirst", description="Newest logs first; oldest first by default"),
    start_time: Optional[str] = Query(default=None, alias="startTime", description="RFC3339 start; defaults to the batch creation time"),
    end_time: Optional[str] = Query(default=None, alias="endTime", description="RFC3339 end; defaults to now, or the batch end time if it finished"),
    verbose: bool = Query(default=False, description="Include insertId, trace, spanId, httpRequest, labels, operation, sourceLocation"),
    limit: Optional[int] = Query(default=None, description="Maximum number of log entries to return; DEFAULT_LOG_LIMIT when omitted"),
    service: ResourceLogService = Depends(get_resource_log_service),
):
    """Get Cloud Logging entries for a batch."""
    logger.info(f"Batch logs requested for {batch_id}")
    params = LogQueryParams(
        filter=filter,
        newest_first=newest_first,
        start_time=start_time,
        end_time=end_time,
        verbose=verbose,
        limit=limit,
    )
    return await service.get_batch_logs(batch_id, params)
