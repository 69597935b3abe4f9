"""
FastAPI router for Serverless Spark interactive session endpoints.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Path
from loguru import logger

from integrations.gcp_dataproc import GCPDataprocClient, get_dataproc_client
from models.resource import LogQueryParams
from services.resource_logs import ResourceLogService, get_resource_log_service
from utils.validators import validate_resource_id

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def list_sessions(
    page_size: Optional[int] = Query(default=None, alias="pageSize", gt=0),
    page_token: Optional[str] = Query(default=None, alias="pageToken"),
    filter: Optional[str] = Query(default=None, description="Session filter expression"),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """List sessions."""
    return await dataproc.list_sessions(page_size=page_size, page_token=page_token, filter_=filter)


@router.get("/{session_id}", response_model=Dict[str, Any])
async def get_session(
    session_id: str = Path(..., description="The short session ID (e.g. 'my-session')"),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """Get a session with its console and logs URLs."""
    validate_resource_id("session_id", session_id)
    return await dataproc.get_session(session_id)


@router.get("/{session_id}/logs", response_model=List[Dict[str, Any]])
async def get_session_logs(
    session_id: str = Path(..., description="The short session ID (e.g. 'my-session')"),
    filter: Optional[str] = Query(default=None, description="Cloud Logging filter appended to the session filter"),
    newest_first: bool = Query(default=False, alias="newestFirst"),
    start_time: Optional[str] = Query(default=None, alias="startTime", description="RFC3339 start; defaults to the session creation time"),
    end_time: Optional[str] = Query(default=None, alias="endTime", description="RFC3339 end; defaults to now, or the session end time if terminal"),
    verbose: bool = Query(default=False),
    limit: Optional[int] = Query(default=None),
    service: ResourceLogService = Depends(get_resource_log_service),
):
    """Get Cloud Logging entries for a session."""
    logger.info(f"Session logs requested for {session_id}")
    params = LogQueryParams(
        filter=filter,
        newest_first=newest_first,
        start_time=start_time,
        end_time=end_time,
        verbose=verbose,
        limit=limit,
    )
    return await service.get_session_logs(session_id, params)
