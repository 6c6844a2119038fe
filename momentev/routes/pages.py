"""
Page data for the role scoped areas

The route guard has already redirected anonymous and wrong-role visitors by
the time these handlers run, so each one only assembles what its page shows.
"""

import asyncio
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..backend import BackendClient, get_backend
from ..domain.bookings.service import BookingService
from ..domain.quote_requests.service import QuoteRequestService
from ..domain.users.service import UserService
from ..shared.validators import parse_date

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

UPCOMING_STATUSES = {"pending", "pending_payment", "confirmed"}
UPCOMING_LIMIT = 5
DASHBOARD_BOOKINGS_LIMIT = 100
BOOKING_STAT_KEYS = ("pending", "confirmed", "completed", "cancelled")


def _items(payload) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def booking_start(booking: dict) -> Optional[date]:
    details = booking.get("eventDetails") or {}
    start = details.get("startDate") if isinstance(details, dict) else None
    try:
        return parse_date(start, "Invalid start date")
    except ValueError:
        return None


def upcoming_bookings(bookings: list, today: Optional[date] = None, limit: int = UPCOMING_LIMIT) -> list:
    """Open bookings that have not started yet, soonest first"""
    today = today or date.today()
    upcoming = []
    for booking in bookings:
        if not isinstance(booking, dict) or booking.get("status") not in UPCOMING_STATUSES:
            continue
        start = booking_start(booking)
        if start is None or start < today:
            continue
        upcoming.append((start, booking))

    upcoming.sort(key=lambda pair: pair[0])
    return [booking for _, booking in upcoming[:limit]]


def booking_stats(bookings: list) -> dict:
    stats = {"total": len(bookings)}
    for key in BOOKING_STAT_KEYS:
        stats[key] = sum(1 for b in bookings if isinstance(b, dict) and b.get("status") == key)
    return stats


# ============================================================================
# DASHBOARDS
# ============================================================================


@router.get("/client/dashboard")
async def client_dashboard(backend: BackendClient = Depends(get_backend)):
    profile, bookings = await asyncio.gather(
        UserService(backend).get_profile(),
        BookingService(backend).list_bookings(page=1, limit=DASHBOARD_BOOKINGS_LIMIT),
    )
    if not bookings.success:
        logger.warning(f"⚠️ Client dashboard bookings unavailable: {bookings.error}")

    return {
        "profile": profile.data if profile.success else None,
        "upcomingBookings": upcoming_bookings(_items(bookings.data)) if bookings.success else [],
        "error": profile.error if not profile.success else None,
    }


@router.get("/vendor/dashboard")
async def vendor_dashboard(backend: BackendClient = Depends(get_backend)):
    profile, bookings, quote_requests = await asyncio.gather(
        UserService(backend).get_profile(),
        BookingService(backend).list_vendor_bookings(page=1, limit=DASHBOARD_BOOKINGS_LIMIT),
        QuoteRequestService(backend).list_vendor_quote_requests(status="new"),
    )
    if not bookings.success:
        logger.warning(f"⚠️ Vendor dashboard bookings unavailable: {bookings.error}")

    return {
        "profile": profile.data if profile.success else None,
        "bookingStats": booking_stats(_items(bookings.data) if bookings.success else []),
        "openQuoteRequests": _items(quote_requests.data) if quote_requests.success else [],
        "error": profile.error if not profile.success else None,
    }


# ============================================================================
# AUTH PAGES
# ============================================================================


@router.get("/client/auth/{page}")
async def client_auth_page(page: str, from_path: Optional[str] = Query(None, alias="from")):
    return {"page": page, "role": "customer", "from": from_path}


@router.get("/vendor/auth/{page}")
async def vendor_auth_page(page: str, from_path: Optional[str] = Query(None, alias="from")):
    return {"page": page, "role": "vendor", "from": from_path}
