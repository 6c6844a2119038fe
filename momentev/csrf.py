"""
CSRF Protection Middleware

Double-submit cookie pattern. The session lives in cookies, so every
state-changing request must echo the csrf_token cookie in the X-CSRF-Token
header. The browser obtains the value from GET /csrf-token.
"""
import logging
import secrets
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 86400

PROTECTED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Prefixes that never carry a cookie session
EXEMPT_PREFIXES = (
    "/health",
    "/docs",
    "/openapi.json",
    "/csrf-token",
)


def generate_csrf_token() -> str:
    """Generate a cryptographically secure CSRF token"""
    return secrets.token_urlsafe(32)


def is_path_exempt(path: str) -> bool:
    return path.startswith(EXEMPT_PREFIXES)


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="strict",
        max_age=CSRF_COOKIE_MAX_AGE,
        path="/",
    )


def sets_csrf_cookie(response: Response) -> bool:
    """True when the handler already issued a csrf_token cookie on ``response``"""
    prefix = f"{CSRF_COOKIE_NAME}=".encode()
    return any(
        name == b"set-cookie" and value.startswith(prefix) for name, value in response.raw_headers
    )


def _reject(request: Request, reason: str, detail: str) -> JSONResponse:
    logger.warning(f"🚫 CSRF: {reason} for {request.method} {request.url.path}")
    return JSONResponse(status_code=403, content={"success": False, "error": detail})


class CSRFMiddleware(BaseHTTPMiddleware):
    """
    Reject state-changing requests whose X-CSRF-Token header does not match
    the csrf_token cookie, and hand out the cookie when it is missing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)

        if request.method in PROTECTED_METHODS and not is_path_exempt(request.url.path):
            csrf_header = request.headers.get(CSRF_HEADER_NAME)

            if not csrf_cookie:
                return _reject(request, "missing cookie", "CSRF token missing. Please refresh the page and try again.")
            if not csrf_header:
                return _reject(
                    request, "missing header", "CSRF token header missing. Please refresh the page and try again."
                )
            if not secrets.compare_digest(csrf_cookie, csrf_header):
                return _reject(request, "token mismatch", "CSRF token invalid. Please refresh the page and try again.")

        response = await call_next(request)

        if not csrf_cookie and not sets_csrf_cookie(response):
            set_csrf_cookie(response, generate_csrf_token())

        return response
