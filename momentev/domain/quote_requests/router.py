"""Quote request router"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .service import QuoteRequestService

router = APIRouter(prefix="/api/quote-requests", tags=["Quote Requests"])


def get_quote_request_service(backend: BackendClient = Depends(get_backend)) -> QuoteRequestService:
    """Dependency injection for QuoteRequestService"""
    return QuoteRequestService(backend)


@router.get("/vendor/me", response_model=ActionResult)
async def list_vendor_quote_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[
        Literal["all", "new", "responded", "accepted", "completed", "expired", "closed"]
    ] = Query(None),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    search: Optional[str] = Query(None),
    service: QuoteRequestService = Depends(get_quote_request_service),
):
    return await service.list_vendor_quote_requests(page, limit, status, date_from, date_to, search)
