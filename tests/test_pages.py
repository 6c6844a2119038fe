"""Tests for the dashboard page data and auth page routes."""

from __future__ import annotations

from datetime import date

import httpx
import pytest
from httpx import AsyncClient
from respx import MockRouter

from momentev.routes.pages import booking_stats, upcoming_bookings

from .conftest import BACKEND

TODAY = date(2026, 6, 1)


def booking(booking_id: str, status: str, start: str | None) -> dict:
    return {"_id": booking_id, "status": status, "eventDetails": {"startDate": start}}


class TestUpcomingBookings:
    def test_filters_and_sorts(self):
        bookings = [
            booking("late", "confirmed", "2026-08-01T10:00:00Z"),
            booking("past", "confirmed", "2026-05-01"),
            booking("soon", "pending", "2026-06-02"),
            booking("done", "completed", "2026-07-01"),
            booking("today", "pending_payment", "2026-06-01"),
            booking("undated", "confirmed", None),
        ]

        result = upcoming_bookings(bookings, today=TODAY)

        assert [b["_id"] for b in result] == ["today", "soon", "late"]

    def test_limit(self):
        bookings = [booking(f"b{i}", "confirmed", f"2026-06-{10 + i}") for i in range(8)]

        assert len(upcoming_bookings(bookings, today=TODAY)) == 5
        assert upcoming_bookings(bookings, today=TODAY, limit=2)[-1]["_id"] == "b1"


class TestBookingStats:
    def test_counts_by_status(self):
        bookings = [
            {"status": "pending"},
            {"status": "pending"},
            {"status": "confirmed"},
            {"status": "cancelled"},
            {"status": "pending_payment"},
        ]

        assert booking_stats(bookings) == {
            "total": 5,
            "pending": 2,
            "confirmed": 1,
            "completed": 0,
            "cancelled": 1,
        }

    def test_empty(self):
        assert booking_stats([])["total"] == 0


class TestDashboards:
    @pytest.mark.asyncio
    async def test_client_dashboard(self, customer_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(
            return_value=httpx.Response(200, json={"data": {"_id": "cust-3", "firstName": "Ada"}})
        )
        respx_mock.get(f"{BACKEND}/bookings").mock(
            return_value=httpx.Response(
                200,
                json={"data": {"data": [booking("b1", "confirmed", "2999-01-01")], "total": 1}},
            )
        )

        response = await customer_client.get("/client/dashboard")

        body = response.json()
        assert body["profile"]["firstName"] == "Ada"
        assert [b["_id"] for b in body["upcomingBookings"]] == ["b1"]
        assert body["error"] is None

    @pytest.mark.asyncio
    async def test_client_dashboard_survives_booking_failure(
        self, customer_client: AsyncClient, respx_mock: MockRouter
    ):
        respx_mock.get(f"{BACKEND}/users/profile").mock(
            return_value=httpx.Response(200, json={"data": {"_id": "cust-3"}})
        )
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(500))

        body = (await customer_client.get("/client/dashboard")).json()

        assert body["upcomingBookings"] == []
        assert body["profile"] == {"_id": "cust-3"}

    @pytest.mark.asyncio
    async def test_vendor_dashboard(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(
            return_value=httpx.Response(200, json={"data": {"_id": "user-1"}})
        )
        respx_mock.get(f"{BACKEND}/bookings/vendor/me").mock(
            return_value=httpx.Response(
                200,
                json={"data": {"data": [{"_id": "b1", "status": "pending"}, {"_id": "b2", "status": "completed"}]}},
            )
        )
        quote_requests = respx_mock.get(f"{BACKEND}/quote-requests/vendor/me").mock(
            return_value=httpx.Response(200, json={"data": {"data": [{"_id": "qr1", "status": "new"}], "total": 1}})
        )

        body = (await vendor_client.get("/vendor/dashboard")).json()

        assert body["bookingStats"]["total"] == 2
        assert body["bookingStats"]["pending"] == 1
        assert body["openQuoteRequests"] == [{"_id": "qr1", "status": "new"}]
        assert quote_requests.calls.last.request.url.params["status"] == "new"


class TestAuthPages:
    @pytest.mark.asyncio
    async def test_anonymous_visitor_sees_login(self, client: AsyncClient):
        response = await client.get("/vendor/auth/login", params={"from": "/vendor/bookings"})

        assert response.json() == {"page": "login", "role": "vendor", "from": "/vendor/bookings"}
