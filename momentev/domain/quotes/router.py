"""Quote router - vendor quote builder and customer responses"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import QuoteForm, QuoteResponseRequest
from .service import QuoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


def get_quote_service(backend: BackendClient = Depends(get_backend)) -> QuoteService:
    """Dependency injection for QuoteService"""
    return QuoteService(backend)


# ============================================================================
# VENDOR
# ============================================================================


@router.post("/drafts", response_model=ActionResult)
async def create_draft(form: QuoteForm, service: QuoteService = Depends(get_quote_service)):
    return await service.create_draft(form)


@router.patch("/drafts/{quote_id}", response_model=ActionResult)
async def update_draft(quote_id: str, form: QuoteForm, service: QuoteService = Depends(get_quote_service)):
    return await service.update_draft(quote_id, form)


@router.post("/send", response_model=ActionResult)
async def save_and_send(
    form: QuoteForm,
    draft_id: Optional[str] = Query(None, alias="draftId"),
    service: QuoteService = Depends(get_quote_service),
):
    return await service.save_and_send(form, draft_id)


@router.post("/{quote_id}/send", response_model=ActionResult)
async def send_quote(quote_id: str, service: QuoteService = Depends(get_quote_service)):
    return await service.send_quote(quote_id)


@router.post("/{quote_id}/withdraw", response_model=ActionResult)
async def withdraw_quote(quote_id: str, service: QuoteService = Depends(get_quote_service)):
    return await service.withdraw_quote(quote_id)


@router.post("/{quote_id}/revise", response_model=ActionResult)
async def revise_quote(quote_id: str, form: QuoteForm, service: QuoteService = Depends(get_quote_service)):
    return await service.revise_quote(quote_id, form)


@router.get("/vendor/me", response_model=ActionResult)
async def list_vendor_quotes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    quote_request_id: Optional[str] = Query(None, alias="quoteRequestId"),
    service: QuoteService = Depends(get_quote_service),
):
    return await service.list_vendor_quotes(page, limit, status, quote_request_id)


# ============================================================================
# CUSTOMER
# ============================================================================


@router.get("/me", response_model=ActionResult)
async def list_customer_quotes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    service: QuoteService = Depends(get_quote_service),
):
    return await service.list_customer_quotes(page, limit, status)


@router.post("/{quote_id}/respond", response_model=ActionResult)
async def respond_to_quote(
    quote_id: str, data: QuoteResponseRequest, service: QuoteService = Depends(get_quote_service)
):
    return await service.respond_to_quote(quote_id, data)
