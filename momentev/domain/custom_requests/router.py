"""Custom request router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import CreateCustomRequest
from .service import CustomRequestService

router = APIRouter(prefix="/api/custom-requests", tags=["Custom Requests"])


def get_custom_request_service(backend: BackendClient = Depends(get_backend)) -> CustomRequestService:
    """Dependency injection for CustomRequestService"""
    return CustomRequestService(backend)


@router.post("", response_model=ActionResult)
async def create_custom_request(
    data: CreateCustomRequest, service: CustomRequestService = Depends(get_custom_request_service)
):
    return await service.create_custom_request(data)


@router.get("", response_model=ActionResult)
async def list_customer_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: CustomRequestService = Depends(get_custom_request_service),
):
    return await service.list_customer_requests(page, limit)


@router.delete("/{request_id}", response_model=ActionResult)
async def delete_customer_request(
    request_id: str,
    status: Optional[str] = Query(None),
    service: CustomRequestService = Depends(get_custom_request_service),
):
    return await service.delete_customer_request(request_id, status)
