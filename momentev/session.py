"""
Cookie session helpers

The browser never sees the backend tokens: both live in HTTP-only cookies
set by this service. The access token is short lived; the refresh token is
exchanged for a new one against the backend when it expires.
"""

import logging
from typing import Optional

import httpx
import jwt
from fastapi import Request, Response
from pydantic import BaseModel

from .config import (
    ACCESS_TOKEN_MAX_AGE,
    AUTH_TOKEN_COOKIE,
    BACKEND_URL,
    IS_PRODUCTION,
    REFRESH_TOKEN_COOKIE,
    REFRESH_TOKEN_MAX_AGE,
    REMEMBER_ME_MAX_AGE,
    REQUEST_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

CUSTOMER_ROLE = "customer"
VENDOR_ROLE = "vendor"


class AuthTokens(BaseModel):
    token: str = ""
    refreshToken: str = ""


class RefreshResult(BaseModel):
    success: bool
    token: Optional[str] = None
    error: Optional[str] = None
    # True when the backend could not be reached at all
    unreachable: bool = False


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": IS_PRODUCTION,
        "samesite": "lax",
        "path": "/",
    }


def set_access_token_cookie(response: Response, token: str) -> None:
    """Store a (new) access token"""
    response.set_cookie(AUTH_TOKEN_COOKIE, token, max_age=ACCESS_TOKEN_MAX_AGE, **_cookie_options())


def set_auth_cookies(
    response: Response, token: str, refresh_token: str, remember: bool = False
) -> None:
    """Store both tokens; "remember me" extends the refresh cookie to 30 days"""
    set_access_token_cookie(response, token)
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=REMEMBER_ME_MAX_AGE if remember else REFRESH_TOKEN_MAX_AGE,
        **_cookie_options(),
    )


def clear_auth_cookies(response: Response) -> None:
    for name in (AUTH_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, **_cookie_options())


def get_auth_cookies(request: Request) -> Optional[AuthTokens]:
    token = request.cookies.get(AUTH_TOKEN_COOKIE)
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)

    if not token and not refresh_token:
        return None

    return AuthTokens(token=token or "", refreshToken=refresh_token or "")


def get_access_token(request: Request) -> Optional[str]:
    """Access token for this request.

    A token refreshed earlier in the same request (by the route guard or a
    previous backend call) wins over the incoming cookie.
    """
    refreshed = getattr(request.state, "access_token", None)
    if refreshed:
        return refreshed
    return request.cookies.get(AUTH_TOKEN_COOKIE) or None


def get_refresh_token(request: Request) -> Optional[str]:
    return request.cookies.get(REFRESH_TOKEN_COOKIE) or None


async def refresh_access_token(
    http: httpx.AsyncClient, refresh_token: str, backend_url: Optional[str] = None
) -> RefreshResult:
    """Exchange a refresh token for a new access token"""
    base_url = BACKEND_URL if backend_url is None else backend_url
    if not base_url:
        return RefreshResult(success=False, error="Backend not configured")

    try:
        response = await http.post(
            f"{base_url}/api/v1/auth/refresh-token",
            json={"refreshToken": refresh_token},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as e:
        logger.error(f"❌ Token refresh request failed: {e}")
        return RefreshResult(success=False, error="Token refresh failed", unreachable=True)

    if not response.is_success:
        logger.warning(f"⚠️ Token refresh rejected by backend: {response.status_code}")
        return RefreshResult(success=False, error="Token refresh failed")

    try:
        body = response.json()
    except ValueError:
        body = None

    new_token = ((body or {}).get("data") or {}).get("token") if isinstance(body, dict) else None
    if not new_token:
        return RefreshResult(success=False, error="No token in response")

    logger.info("🔄 Access token refreshed")
    return RefreshResult(success=True, token=new_token)


async def try_refresh_token(
    request: Request,
    response: Optional[Response],
    http: httpx.AsyncClient,
    backend_url: Optional[str] = None,
) -> RefreshResult:
    """Refresh using the stored refresh token and persist the result on the response"""
    refresh_token = get_refresh_token(request)
    if not refresh_token:
        return RefreshResult(success=False, error="No refresh token available")

    result = await refresh_access_token(http, refresh_token, backend_url=backend_url)
    if result.success and result.token:
        if response is not None:
            set_access_token_cookie(response, result.token)
        request.state.access_token = result.token
    return result


def decode_token(token: Optional[str]) -> Optional[dict]:
    """Read the JWT payload without verifying the signature.

    Verification happens on the backend; the claims are only used here to
    pick a redirect target.
    """
    if not token:
        return None
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None


def get_token_role(token: Optional[str]) -> Optional[str]:
    payload = decode_token(token)
    if not payload:
        return None
    role = payload.get("role")
    if not isinstance(role, str) or not role:
        return None
    return role.lower()


def login_path_for(path: str) -> str:
    if path.startswith("/vendor"):
        return "/vendor/auth/log-in"
    return "/client/auth/log-in"


def dashboard_path_for(role: Optional[str]) -> str:
    if role == VENDOR_ROLE:
        return "/vendor/dashboard"
    return "/client/dashboard"


def is_role_allowed(role: Optional[str], path: str) -> bool:
    if path.startswith("/client") and role == CUSTOMER_ROLE:
        return True
    if path.startswith("/vendor") and role == VENDOR_ROLE:
        return True
    return False
