"""
Route guard middleware for the role scoped page areas

/client/* belongs to customers and /vendor/* to vendors. Auth pages under
/client/auth/* and /vendor/auth/* are public but bounce signed-in users to
their dashboard. A missing access token is recovered from the refresh token
before the page handler runs.
"""

import logging
import re
from typing import Callable
from urllib.parse import urlencode

import httpx
from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import AUTH_TOKEN_COOKIE, BACKEND_URL, REFRESH_TOKEN_COOKIE
from .session import (
    clear_auth_cookies,
    dashboard_path_for,
    get_token_role,
    is_role_allowed,
    login_path_for,
    refresh_access_token,
    set_access_token_cookie,
)

logger = logging.getLogger(__name__)

PROTECTED_PATTERNS = [
    re.compile(r"^/client/(?!auth).*"),
    re.compile(r"^/vendor/(?!auth).*"),
]

AUTH_PAGE_PATTERNS = [
    re.compile(r"^/client/auth/.*"),
    re.compile(r"^/vendor/auth/.*"),
]


def is_protected_path(path: str) -> bool:
    return any(pattern.match(path) for pattern in PROTECTED_PATTERNS)


def is_auth_path(path: str) -> bool:
    return any(pattern.match(path) for pattern in AUTH_PAGE_PATTERNS)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=307)


def _login_redirect(path: str, include_from: bool = True) -> RedirectResponse:
    url = login_path_for(path)
    if include_from:
        url = f"{url}?{urlencode({'from': path})}"
    return _redirect(url)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirect anonymous or wrong-role visitors away from page areas"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        protected = is_protected_path(path)
        auth_page = is_auth_path(path)

        if not protected and not auth_page:
            return await call_next(request)

        auth_token = request.cookies.get(AUTH_TOKEN_COOKIE)
        refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
        has_session = bool(auth_token or refresh_token)
        role = get_token_role(auth_token) if auth_token else None

        if protected:
            if not has_session:
                logger.info(f"🔒 Anonymous request to {path}, redirecting to login")
                return _login_redirect(path)

            if not auth_token and refresh_token:
                if not BACKEND_URL:
                    logger.warning(f"⚠️ BACKEND_URL is not set, serving {path} without a session refresh")
                    return await call_next(request)
                return await self._refresh_and_continue(request, call_next, path, refresh_token)

            if role and not is_role_allowed(role, path):
                logger.info(f"🔒 Role '{role}' not allowed on {path}")
                return _redirect(dashboard_path_for(role))

        if auth_page and has_session and role:
            return _redirect(dashboard_path_for(role))

        return await call_next(request)

    async def _refresh_and_continue(
        self, request: Request, call_next: Callable, path: str, refresh_token: str
    ) -> Response:
        http: httpx.AsyncClient = request.app.state.http_client
        result = await refresh_access_token(http, refresh_token)
        if result.unreachable:
            return _login_redirect(path, include_from=False)

        if not result.success or not result.token:
            logger.info(f"🔒 Session refresh failed for {path}: {result.error}")
            response = _login_redirect(path)
            clear_auth_cookies(response)
            return response

        role = get_token_role(result.token)
        if role and not is_role_allowed(role, path):
            response = _redirect(dashboard_path_for(role))
        else:
            # Handlers read the fresh token from request.state
            request.state.access_token = result.token
            response = await call_next(request)

        set_access_token_cookie(response, result.token)
        return response
