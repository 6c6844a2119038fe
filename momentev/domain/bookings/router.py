"""Booking router - customer bookings and vendor decisions"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import (
    BookingFromQuoteRequest,
    CancelBookingRequest,
    CreateBookingRequest,
    VendorDecisionRequest,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def get_booking_service(backend: BackendClient = Depends(get_backend)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(backend)


@router.post("", response_model=ActionResult)
async def create_booking(data: CreateBookingRequest, service: BookingService = Depends(get_booking_service)):
    return await service.create_booking(data)


@router.post("/from-quote/{quote_id}", response_model=ActionResult)
async def create_booking_from_quote(
    quote_id: str,
    data: Optional[BookingFromQuoteRequest] = Body(None),
    service: BookingService = Depends(get_booking_service),
):
    return await service.create_booking_from_quote(quote_id, data.location if data else None)


@router.get("", response_model=ActionResult)
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_bookings(page, limit)


@router.get("/vendor/me", response_model=ActionResult)
async def list_vendor_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_vendor_bookings(page, limit)


@router.get("/{booking_id}", response_model=ActionResult)
async def get_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    return await service.get_booking(booking_id)


@router.post("/{booking_id}/cancel", response_model=ActionResult)
async def cancel_booking(
    booking_id: str,
    data: Optional[CancelBookingRequest] = Body(None),
    service: BookingService = Depends(get_booking_service),
):
    return await service.cancel_booking(booking_id, data.status if data else None)


@router.post("/{booking_id}/vendor/decision", response_model=ActionResult)
async def decide_vendor_booking(
    booking_id: str,
    data: VendorDecisionRequest,
    service: BookingService = Depends(get_booking_service),
):
    return await service.decide_vendor_booking(booking_id, data.decision)
