"""Tests for the double-submit CSRF middleware."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from momentev.csrf import CSRF_COOKIE_NAME, CSRF_HEADER_NAME, CSRFMiddleware
from momentev.main import get_csrf_token


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(CSRFMiddleware)
    app.add_api_route("/csrf-token", get_csrf_token, methods=["GET"])

    @app.get("/api/things")
    async def read_things():
        return {"ok": True}

    @app.post("/api/things")
    async def create_thing():
        return {"ok": True}

    @app.post("/health/ping")
    async def ping():
        return {"ok": True}

    return app


def issued_cookies(response) -> list[str]:
    """Values of every csrf_token cookie the response sets, in order"""
    prefix = f"{CSRF_COOKIE_NAME}="
    return [
        header[len(prefix) :].split(";", 1)[0]
        for header in response.headers.get_list("set-cookie")
        if header.startswith(prefix)
    ]


@pytest.fixture
async def csrf_client():
    async with AsyncClient(transport=ASGITransport(app=build_app()), base_url="http://test") as ac:
        yield ac


class TestCSRFMiddleware:
    @pytest.mark.asyncio
    async def test_safe_request_receives_cookie(self, csrf_client: AsyncClient):
        response = await csrf_client.get("/api/things")

        assert response.status_code == 200
        assert CSRF_COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_missing_cookie(self, csrf_client: AsyncClient):
        response = await csrf_client.post("/api/things")

        assert response.status_code == 403
        assert response.json()["error"].startswith("CSRF token missing")

    @pytest.mark.asyncio
    async def test_missing_header(self, csrf_client: AsyncClient):
        csrf_client.cookies.set(CSRF_COOKIE_NAME, "token-a")

        response = await csrf_client.post("/api/things")

        assert response.status_code == 403
        assert response.json()["error"].startswith("CSRF token header missing")

    @pytest.mark.asyncio
    async def test_mismatch(self, csrf_client: AsyncClient):
        csrf_client.cookies.set(CSRF_COOKIE_NAME, "token-a")

        response = await csrf_client.post("/api/things", headers={CSRF_HEADER_NAME: "token-b"})

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": "CSRF token invalid. Please refresh the page and try again.",
        }

    @pytest.mark.asyncio
    async def test_matching_token(self, csrf_client: AsyncClient):
        csrf_client.cookies.set(CSRF_COOKIE_NAME, "token-a")

        response = await csrf_client.post("/api/things", headers={CSRF_HEADER_NAME: "token-a"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_exempt_path(self, csrf_client: AsyncClient):
        response = await csrf_client.post("/health/ping")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_token_endpoint_sets_a_single_cookie(self, csrf_client: AsyncClient):
        response = await csrf_client.get("/csrf-token")

        assert issued_cookies(response) == [response.json()["csrf_token"]]

    @pytest.mark.asyncio
    async def test_token_from_endpoint_authorises_next_write(self, csrf_client: AsyncClient):
        issued = await csrf_client.get("/csrf-token")
        csrf_client.cookies.clear()
        csrf_client.cookies.set(CSRF_COOKIE_NAME, issued_cookies(issued)[-1])

        response = await csrf_client.post("/api/things", headers={CSRF_HEADER_NAME: issued.json()["csrf_token"]})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_token_endpoint_reuses_existing_cookie(self, csrf_client: AsyncClient):
        csrf_client.cookies.set(CSRF_COOKIE_NAME, "token-a")

        response = await csrf_client.get("/csrf-token")

        assert response.json() == {"csrf_token": "token-a"}
        assert issued_cookies(response) == []
