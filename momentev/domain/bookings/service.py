"""Booking service - customer bookings and vendor decisions"""

import logging
from typing import Optional

from pydantic import ValidationError

from ...backend import BackendClient
from ...schemas import ActionResult
from .schemas import BookingAmounts, CreateBookingRequest, StatusBadge

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "pending": "Pending",
    "pending_payment": "Pending Payment",
    "confirmed": "Confirmed",
    "completed": "Completed",
    "cancelled": "Cancelled",
    "rejected": "Rejected",
}

CANCELLABLE_STATUSES = {"pending_payment"}


def status_badge(status: Optional[str]) -> StatusBadge:
    """Badge for a booking status; unknown statuses display as pending"""
    if status not in STATUS_LABELS:
        status = "pending"
    return StatusBadge(status=status, label=STATUS_LABELS[status])


def can_cancel(status: Optional[str]) -> bool:
    return status in CANCELLABLE_STATUSES


def decorate_booking(booking):
    """Attach the derived ``statusBadge`` and ``canCancel`` fields to a backend booking"""
    if not isinstance(booking, dict):
        return booking

    status = booking.get("status")
    decorated = {
        **booking,
        "statusBadge": status_badge(status).model_dump(),
        "canCancel": can_cancel(status),
    }
    if isinstance(booking.get("amounts"), dict):
        try:
            decorated["amounts"] = BookingAmounts(**booking["amounts"]).model_dump()
        except ValidationError as e:
            logger.warning(f"⚠️ Booking {booking.get('_id')} has unreadable amounts, passing them through: {e}")
    return decorated


def decorate_booking_list(payload):
    """Decorate every booking of a paginated list (or a bare list)"""
    if isinstance(payload, list):
        return [decorate_booking(b) for b in payload]
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return {**payload, "data": [decorate_booking(b) for b in payload["data"]]}
    return payload


class BookingService:
    """Service layer for booking operations"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def create_booking(self, data: CreateBookingRequest) -> ActionResult:
        logger.info(f"📥 Creating booking with vendor {data.vendorId}")
        result = await self.backend.post(
            "/bookings",
            json=data.model_dump(),
            default_error="Failed to create booking",
        )
        if result.success:
            result.data = decorate_booking(result.data)
            logger.info("✅ Booking created")
        return result

    async def create_booking_from_quote(self, quote_id: str, location: Optional[str] = None) -> ActionResult:
        body = {"location": {"addressText": location}} if location else None
        result = await self.backend.post(
            f"/bookings/from-quote/{quote_id}",
            json=body,
            default_error="Failed to create booking from quote",
        )
        if result.success:
            result.data = decorate_booking(result.data)
            logger.info(f"✅ Booking created from quote {quote_id}")
        return result

    async def list_bookings(self, page: int = 1, limit: int = 10) -> ActionResult:
        result = await self.backend.get(
            "/bookings", params={"page": page, "limit": limit}, default_error="Failed to fetch bookings"
        )
        if result.success:
            result.data = decorate_booking_list(result.data)
        return result

    async def get_booking(self, booking_id: str) -> ActionResult:
        result = await self.backend.get(
            f"/bookings/{booking_id}",
            error_messages={404: "Booking not found"},
            default_error="Failed to fetch booking",
        )
        if result.success:
            result.data = decorate_booking(result.data)
        return result

    async def cancel_booking(self, booking_id: str, status: Optional[str] = None) -> ActionResult:
        """Cancel a booking awaiting payment.

        When the caller knows the booking status the rule is applied before
        any backend call; otherwise the backend decides.
        """
        if status is not None and not can_cancel(status):
            return ActionResult.fail("Only bookings awaiting payment can be cancelled")

        result = await self.backend.post(
            f"/bookings/{booking_id}/cancel", default_error="Failed to cancel booking"
        )
        if result.success:
            result.data = decorate_booking(result.data)
            logger.info(f"✅ Booking {booking_id} cancelled")
        return result

    async def list_vendor_bookings(self, page: int = 1, limit: int = 10) -> ActionResult:
        result = await self.backend.get(
            "/bookings/vendor/me",
            params={"page": page, "limit": limit},
            default_error="Failed to fetch vendor bookings",
        )
        if result.success:
            result.data = decorate_booking_list(result.data)
        return result

    async def decide_vendor_booking(self, booking_id: str, decision: str) -> ActionResult:
        result = await self.backend.post(
            f"/bookings/{booking_id}/vendor/decision",
            json={"decision": decision},
            default_error="Failed to process decision",
        )
        if not result.success:
            field_errors = result.fieldErrors or {}
            formatted = {f"{field}: {messages[0]}" for field, messages in field_errors.items()}
            decision_errors = field_errors.get("decision")
            # No backend message: surface the bare decision field error
            if decision_errors and result.error in formatted:
                result.error = decision_errors[0]
            return result

        logger.info(f"✅ Booking {booking_id} {decision} by vendor")
        result.data = decorate_booking(result.data)
        return result
