"""
Shared fixtures for the Momentev web API tests.

The backend is never reached: respx intercepts every outgoing httpx call and
the app is driven in-process through ASGITransport.
"""

from __future__ import annotations

import os

os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["CSRF_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"

import time  # noqa: E402

import httpx  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from starlette.requests import Request  # noqa: E402

from momentev.backend import BackendClient  # noqa: E402
from momentev.main import app  # noqa: E402

BACKEND = "http://backend.test/api/v1"


def make_token(role: str = "customer", **claims) -> str:
    """Unsigned-for-our-purposes JWT carrying a role claim"""
    payload = {"sub": "user-1", "role": role, "exp": int(time.time()) + 3600, **claims}
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def make_request(cookies: dict | None = None, path: str = "/") -> Request:
    """Bare starlette request carrying the given cookies"""
    headers = []
    if cookies:
        header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        headers.append((b"cookie", header.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": headers,
        "query_string": b"",
    }
    return Request(scope)


@pytest.fixture
def customer_token() -> str:
    return make_token("customer")


@pytest.fixture
def vendor_token() -> str:
    return make_token("vendor")


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
async def client(http_client):
    """Anonymous client against the app"""
    app.state.http_client = http_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def customer_client(http_client, customer_token):
    app.state.http_client = http_client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={"auth-token": customer_token, "refresh-token": "refresh-customer"},
    ) as ac:
        yield ac


@pytest.fixture
async def vendor_client(http_client, vendor_token):
    app.state.http_client = http_client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={"auth-token": vendor_token, "refresh-token": "refresh-vendor"},
    ) as ac:
        yield ac


@pytest.fixture
async def backend(http_client, customer_token) -> BackendClient:
    """BackendClient for a signed-in customer, outside any route"""
    return BackendClient(http_client, make_request({"auth-token": customer_token, "refresh-token": "r1"}))
