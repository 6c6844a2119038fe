"""Unit tests for BackendClient: auth, refresh-and-retry and error folding."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi import Response
from respx import MockRouter

from momentev.backend import (
    SESSION_EXPIRED,
    TOO_MANY_REQUESTS,
    BackendClient,
    extract_error_message,
    get_field_errors,
)

from .conftest import BACKEND, make_request, make_token

FIELD_ERROR_BODY = {
    "message": "Validation failed",
    "errors": {"body": {"fieldErrors": {"title": ["Required"], "guestCount": "Too small"}}},
}


class TestErrorExtraction:
    def test_field_errors_are_normalised_to_lists(self):
        assert get_field_errors(FIELD_ERROR_BODY) == {"title": ["Required"], "guestCount": ["Too small"]}

    def test_message_wins_by_default(self):
        assert extract_error_message(FIELD_ERROR_BODY, "fallback") == "Validation failed"

    def test_field_error_preferred_on_request(self):
        assert extract_error_message(FIELD_ERROR_BODY, "fallback", prefer_field_errors=True) == "title: Required"

    def test_error_key_then_fallback(self):
        assert extract_error_message({"error": "Nope"}, "fallback") == "Nope"
        assert extract_error_message({}, "fallback") == "fallback"
        assert extract_error_message(None, "fallback") == "fallback"


class TestRequest:
    @pytest.mark.asyncio
    async def test_success_unwraps_data(self, backend: BackendClient, respx_mock: MockRouter):
        route = respx_mock.get(f"{BACKEND}/bookings").mock(
            return_value=httpx.Response(200, json={"data": [{"_id": "b1"}], "message": "ok"})
        )

        result = await backend.get("/bookings", params={"page": 1, "status": None})

        assert result.success
        assert result.data == [{"_id": "b1"}]
        assert result.message == "ok"
        request = route.calls.last.request
        assert request.headers["Authorization"].startswith("Bearer ")
        assert request.url.params.get("page") == "1"
        assert "status" not in request.url.params

    @pytest.mark.asyncio
    async def test_unwrap_disabled_keeps_pagination(self, backend: BackendClient, respx_mock: MockRouter):
        body = {"data": [], "total": 0, "page": 1, "limit": 10}
        respx_mock.get(f"{BACKEND}/service-categories").mock(return_value=httpx.Response(200, json=body))

        result = await backend.get("/service-categories", unwrap=False)

        assert result.data == body

    @pytest.mark.asyncio
    async def test_backend_message_is_returned(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.post(f"{BACKEND}/bookings").mock(return_value=httpx.Response(400, json=FIELD_ERROR_BODY))

        result = await backend.post("/bookings", json={})

        assert not result.success
        assert result.error == "Validation failed"
        assert result.fieldErrors == {"title": ["Required"], "guestCount": ["Too small"]}
        assert "status_code" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_status_in_fallback_message(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(500))

        result = await backend.get("/bookings", default_error="Failed to fetch bookings")

        assert result.error == "Failed to fetch bookings (500)"

    @pytest.mark.asyncio
    async def test_status_specific_messages(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings/b1").mock(return_value=httpx.Response(404, json={"message": "x"}))

        result = await backend.get("/bookings/b1", error_messages={404: "Booking not found"})

        assert result.error == "Booking not found"

    @pytest.mark.asyncio
    async def test_rate_limited(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(429, json={"message": "slow"}))

        result = await backend.get("/bookings")

        assert result.error == TOO_MANY_REQUESTS

    @pytest.mark.asyncio
    async def test_invalid_json(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(200, text="<html>"))

        result = await backend.get("/bookings")

        assert result.error == "Invalid JSON response from server"

    @pytest.mark.asyncio
    async def test_timeout(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings").mock(side_effect=httpx.ReadTimeout("slow"))

        result = await backend.get("/bookings")

        assert result.error == "Request timed out"

    @pytest.mark.asyncio
    async def test_network_error(self, backend: BackendClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/bookings").mock(side_effect=httpx.ConnectError("refused"))

        result = await backend.get("/bookings")

        assert result.error == "Network error"

    @pytest.mark.asyncio
    async def test_backend_not_configured(self, http_client):
        client = BackendClient(http_client, make_request(), base_url="")

        result = await client.get("/bookings")

        assert result.error == "Backend not configured"


class TestSessionHandling:
    @pytest.mark.asyncio
    async def test_anonymous_call_is_refused_without_network(self, http_client, respx_mock: MockRouter):
        client = BackendClient(http_client, make_request())

        result = await client.get("/bookings")

        assert result.error == "Not authenticated"
        assert not respx_mock.calls

    @pytest.mark.asyncio
    async def test_public_call_sends_no_token(self, http_client, respx_mock: MockRouter):
        route = respx_mock.get(f"{BACKEND}/vendors/search").mock(return_value=httpx.Response(200, json={}))
        client = BackendClient(http_client, make_request())

        result = await client.get("/vendors/search", auth=False)

        assert result.success
        assert "Authorization" not in route.calls.last.request.headers

    @pytest.mark.asyncio
    async def test_optional_auth_sends_token_when_present(
        self, backend: BackendClient, respx_mock: MockRouter
    ):
        route = respx_mock.get(f"{BACKEND}/events").mock(return_value=httpx.Response(200, json=[]))

        await backend.get("/events", auth=False, optional_auth=True)

        assert route.calls.last.request.headers["Authorization"].startswith("Bearer ")

    @pytest.mark.asyncio
    async def test_refresh_and_retry_once(self, http_client, respx_mock: MockRouter):
        fresh = make_token("customer")
        refresh = respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(
            return_value=httpx.Response(200, json={"data": {"token": fresh}})
        )
        bookings = respx_mock.get(f"{BACKEND}/bookings").mock(
            side_effect=[httpx.Response(401), httpx.Response(200, json={"data": []})]
        )
        response = Response()
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}), response)

        result = await client.get("/bookings")

        assert result.success
        assert refresh.call_count == 1
        assert bookings.call_count == 2
        assert bookings.calls.last.request.headers["Authorization"] == f"Bearer {fresh}"
        assert any(c.startswith("auth-token=") for c in response.headers.getlist("set-cookie"))

    @pytest.mark.asyncio
    async def test_second_401_is_not_retried(self, http_client, respx_mock: MockRouter):
        respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(
            return_value=httpx.Response(200, json={"data": {"token": "fresh"}})
        )
        bookings = respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(401))
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}))

        result = await client.get("/bookings")

        assert not result.success
        assert result.error == "Request failed after token refresh"
        assert bookings.call_count == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_expires_session(self, http_client, respx_mock: MockRouter):
        respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(return_value=httpx.Response(401))
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(401))
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}))

        result = await client.get("/bookings")

        assert result.error == SESSION_EXPIRED

    @pytest.mark.asyncio
    async def test_missing_access_token_is_refreshed_first(self, http_client, respx_mock: MockRouter):
        respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(
            return_value=httpx.Response(200, json={"data": {"token": "fresh"}})
        )
        route = respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(200, json={"data": []}))
        client = BackendClient(http_client, make_request({"refresh-token": "r1"}))

        result = await client.get("/bookings")

        assert result.success
        assert route.calls.last.request.headers["Authorization"] == "Bearer fresh"

    @pytest.mark.asyncio
    async def test_concurrent_401s_share_one_refresh(self, http_client, respx_mock: MockRouter):
        refresh = respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(
            return_value=httpx.Response(200, json={"data": {"token": "fresh"}})
        )

        def stale_is_refused(request: httpx.Request) -> httpx.Response:
            if request.headers["Authorization"] == "Bearer stale":
                return httpx.Response(401)
            return httpx.Response(200, json={"data": []})

        respx_mock.get(f"{BACKEND}/bookings").mock(side_effect=stale_is_refused)
        respx_mock.get(f"{BACKEND}/quotes/me").mock(side_effect=stale_is_refused)
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}))

        bookings, quotes = await asyncio.gather(client.get("/bookings"), client.get("/quotes/me"))

        assert bookings.success and quotes.success
        assert refresh.call_count == 1

    @pytest.mark.asyncio
    async def test_failed_refresh_is_not_repeated(self, http_client, respx_mock: MockRouter):
        refresh = respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(return_value=httpx.Response(401))
        respx_mock.get(f"{BACKEND}/bookings").mock(return_value=httpx.Response(401))
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}))

        first = await client.get("/bookings")
        second = await client.get("/bookings")

        assert first.error == second.error == SESSION_EXPIRED
        assert refresh.call_count == 1

    @pytest.mark.asyncio
    async def test_refused_refreshed_token_refreshes_again(self, http_client, respx_mock: MockRouter):
        refresh = respx_mock.post(f"{BACKEND}/auth/refresh-token").mock(
            side_effect=[
                httpx.Response(200, json={"data": {"token": "fresh-1"}}),
                httpx.Response(200, json={"data": {"token": "fresh-2"}}),
            ]
        )
        client = BackendClient(http_client, make_request({"auth-token": "stale", "refresh-token": "r1"}))

        assert await client.refresh(failed_token="stale") == "fresh-1"
        assert await client.refresh(failed_token="stale") == "fresh-1"
        assert await client.refresh(failed_token="fresh-1") == "fresh-2"
        assert refresh.call_count == 2
