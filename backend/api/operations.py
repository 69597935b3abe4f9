"""
FastAPI router for Dataproc long-running operations.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path

from integrations.gcp_dataproc import GCPDataprocClient, get_dataproc_client
from utils.validators import validate_resource_id

router = APIRouter()


@router.post("/{operation_id}/cancel", response_model=Dict[str, Any])
async def cancel_operation(
    operation_id: str = Path(..., description="The short operation ID, as found at the end of a batch's operation name"),
    dataproc: GCPDataprocClient = Depends(get_dataproc_client),
):
    """Cancel a batch operation."""
    validate_resource_id("operation", operation_id)
    return {"message": await dataproc.cancel_operation(operation_id)}
