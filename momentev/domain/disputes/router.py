"""Dispute router"""

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import CreateDisputeRequest
from .service import DisputeService

router = APIRouter(prefix="/api/disputes", tags=["Disputes"])


def get_dispute_service(backend: BackendClient = Depends(get_backend)) -> DisputeService:
    """Dependency injection for DisputeService"""
    return DisputeService(backend)


@router.post("", response_model=ActionResult)
async def create_dispute(data: CreateDisputeRequest, service: DisputeService = Depends(get_dispute_service)):
    return await service.create_dispute(data)


@router.get("", response_model=ActionResult)
async def list_disputes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: str = Query("all"),
    service: DisputeService = Depends(get_dispute_service),
):
    return await service.list_disputes(page, limit, status)


@router.patch("/{dispute_id}/cancel", response_model=ActionResult)
async def cancel_dispute(dispute_id: str, service: DisputeService = Depends(get_dispute_service)):
    return await service.cancel_dispute(dispute_id)
