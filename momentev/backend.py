"""
Backend API client

Every action in this service is a thin wrapper around the Momentev REST API.
BackendClient centralises the parts each action needs: bearer auth from the
cookie session, a single refresh-and-retry on 401, the request timeout, JSON
parsing and error message extraction.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx
from fastapi import Request, Response
from starlette.requests import HTTPConnection

from .config import BACKEND_URL, REQUEST_TIMEOUT_SECONDS
from .schemas import ActionResult
from .session import get_access_token, get_refresh_token, try_refresh_token

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

TOO_MANY_REQUESTS = "Too many requests. Please wait a moment and try again."
SESSION_EXPIRED = "Session expired. Please login again."


def get_field_errors(body: Any) -> Optional[dict[str, list[str]]]:
    """Pull ``errors.body.fieldErrors`` out of a backend error body"""
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if not isinstance(errors, dict):
        return None
    errors_body = errors.get("body")
    if not isinstance(errors_body, dict):
        return None
    field_errors = errors_body.get("fieldErrors")
    if not isinstance(field_errors, dict):
        return None

    cleaned = {}
    for field, messages in field_errors.items():
        if isinstance(messages, str):
            messages = [messages]
        if isinstance(messages, list) and messages:
            cleaned[field] = [str(m) for m in messages]
    return cleaned or None


def first_field_error(field_errors: Optional[dict[str, list[str]]]) -> Optional[str]:
    if not field_errors:
        return None
    field, messages = next(iter(field_errors.items()))
    return f"{field}: {messages[0]}"


def extract_error_message(
    body: Any, fallback: str, prefer_field_errors: bool = False
) -> str:
    """Best human readable message from a backend error body"""
    if not isinstance(body, dict):
        return fallback

    field_message = first_field_error(get_field_errors(body))
    if prefer_field_errors and field_message:
        return field_message

    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value

    return field_message or fallback


def clean_params(params: Optional[dict]) -> Optional[dict]:
    """Drop unset and empty query parameters"""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


class BackendClient:
    """Session aware client for the Momentev REST API.

    One instance per browser request. A refreshed access token is written back
    to the outgoing response as a cookie so the browser keeps it.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        connection: Optional[HTTPConnection] = None,
        response: Optional[Response] = None,
        base_url: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self.http = http
        self.connection = connection
        self.response = response
        self.base_url = (BACKEND_URL if base_url is None else base_url).rstrip("/")
        self.timeout = timeout
        # One refresh per client: concurrent callers share its outcome
        self._refresh_lock = asyncio.Lock()
        self._refreshed_token: Optional[str] = None
        self._refresh_failed = False

    @property
    def access_token(self) -> Optional[str]:
        if self.connection is None:
            return None
        return get_access_token(self.connection)

    @property
    def is_authenticated(self) -> bool:
        if self.connection is None:
            return False
        return bool(self.access_token or get_refresh_token(self.connection))

    def url(self, path: str, versioned: bool = True) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{API_PREFIX if versioned else ''}{path}"

    async def refresh(self, failed_token: Optional[str] = None) -> Optional[str]:
        """Exchange the refresh cookie for a new access token.

        ``failed_token`` is the token the caller just had refused. When another
        call on this client already replaced it, that newer token is returned
        instead of spending the refresh token a second time.
        """
        if self.connection is None:
            return None

        async with self._refresh_lock:
            if self._refresh_failed:
                return None
            if self._refreshed_token and self._refreshed_token != failed_token:
                return self._refreshed_token

            result = await try_refresh_token(
                self.connection, self.response, self.http, backend_url=self.base_url
            )
            if not result.success or not result.token:
                logger.warning(f"⚠️ Session refresh failed: {result.error}")
                self._refresh_failed = True
                return None
            self._refreshed_token = result.token
            return result.token

    async def _send(self, method: str, url: str, token: Optional[str], **kwargs) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return await self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
        files: Any = None,
        data: Optional[dict] = None,
        auth: bool = True,
        optional_auth: bool = False,
        versioned: bool = True,
        error_messages: Optional[dict[int, str]] = None,
        default_error: str = "Request failed",
        prefer_field_errors: bool = False,
        unwrap: bool = True,
    ) -> ActionResult:
        """Call the backend and fold the outcome into an ActionResult.

        ``auth`` requires a session; ``optional_auth`` never does and sends
        the bearer token only when one is present. ``unwrap=False`` keeps the
        whole body as data, for endpoints returning a top level paginated list.
        """
        if not self.base_url:
            logger.error("❌ BACKEND_URL is not configured")
            return ActionResult.fail("Backend not configured")

        if optional_auth:
            auth = False

        token = None
        refreshed = False
        if auth or optional_auth:
            token = self.access_token
            if not token and auth:
                token = await self.refresh()
                refreshed = True
                if not token:
                    return ActionResult.fail("Not authenticated", status_code=401)

        url = self.url(path, versioned)
        kwargs = {"params": clean_params(params)}
        if json is not None:
            kwargs["json"] = json
        if files is not None:
            kwargs["files"] = files
        if data is not None:
            kwargs["data"] = data

        try:
            response = await self._send(method, url, token, **kwargs)

            if response.status_code == 401 and auth:
                if refreshed:
                    return ActionResult.fail(SESSION_EXPIRED, status_code=401)
                logger.info(f"🔄 {method} {path} returned 401, refreshing session")
                token = await self.refresh(failed_token=token)
                if not token:
                    return ActionResult.fail(SESSION_EXPIRED, status_code=401)
                response = await self._send(method, url, token, **kwargs)
                return self._to_result(
                    response,
                    error_messages,
                    "Request failed after token refresh",
                    prefer_field_errors,
                    unwrap,
                    with_status=False,
                )

            return self._to_result(response, error_messages, default_error, prefer_field_errors, unwrap)
        except httpx.TimeoutException:
            logger.error(f"❌ {method} {path} timed out after {self.timeout}s")
            return ActionResult.fail("Request timed out")
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            return ActionResult.fail("Network error")

    def _to_result(
        self,
        response: httpx.Response,
        error_messages: Optional[dict[int, str]],
        default_error: str,
        prefer_field_errors: bool,
        unwrap: bool = True,
        with_status: bool = True,
    ) -> ActionResult:
        status = response.status_code

        if not response.is_success and error_messages and status in error_messages:
            return ActionResult.fail(error_messages[status], status_code=status)

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                logger.error(f"❌ Non-JSON response from {response.request.url.path} ({status})")
                return ActionResult.fail("Invalid JSON response from server", status_code=status)

        if response.is_success:
            if isinstance(body, dict):
                message = body.get("message") if isinstance(body.get("message"), str) else None
                data = body["data"] if unwrap and "data" in body else body
                return ActionResult.ok(data, message=message, status_code=status)
            return ActionResult.ok(body, status_code=status)

        if status == 429:
            return ActionResult.fail(TOO_MANY_REQUESTS, status_code=status)

        fallback = f"{default_error} ({status})" if with_status else default_error
        error = extract_error_message(body, fallback, prefer_field_errors)
        logger.warning(f"⚠️ Backend {response.request.method} {response.request.url.path} -> {status}: {error}")
        return ActionResult.fail(error, fieldErrors=get_field_errors(body), status_code=status)

    async def get(self, path: str, **kwargs) -> ActionResult:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> ActionResult:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> ActionResult:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> ActionResult:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> ActionResult:
        return await self.request("DELETE", path, **kwargs)


def get_http_client(request: HTTPConnection) -> httpx.AsyncClient:
    """Shared AsyncClient created in the application lifespan"""
    return request.app.state.http_client


def get_backend(request: Request, response: Response) -> BackendClient:
    """Dependency injection for BackendClient"""
    return BackendClient(get_http_client(request), request, response)
