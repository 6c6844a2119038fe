"""
Hybrid in-memory + Redis rate limiting

Counters live in process memory and are mirrored to Redis every few seconds,
so several workers converge on a shared count without a Redis round trip per
request. Used on the credential endpoints (login, register, password) and on
anonymous support requests.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import RATE_LIMIT_ENABLED
from .redis_client import get_redis_client

logger = logging.getLogger(__name__)

SYNC_INTERVAL_SECONDS = 10
CLEANUP_INTERVAL_SECONDS = 60

# {key: {"count": int, "reset_time": int, "last_sync": int}}
windows: dict[str, dict] = {}
windows_lock = Lock()
_last_cleanup = 0


def _cleanup_expired(now: int) -> None:
    global _last_cleanup
    if now - _last_cleanup < CLEANUP_INTERVAL_SECONDS:
        return

    expired = [key for key, entry in windows.items() if now >= entry["reset_time"]]
    for key in expired:
        del windows[key]
    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit windows")
    _last_cleanup = now


def _load_window(key: str, window_seconds: int, client: redis.Redis, now: int) -> dict:
    """Start a window, seeded from Redis when another worker already counted"""
    try:
        stored = client.get(key)
        ttl = client.ttl(key)
        if stored and ttl and ttl > 0:
            return {"count": int(stored), "reset_time": now + ttl, "last_sync": now}
    except Exception as e:
        logger.warning(f"⚠️ Could not read rate limit window from Redis, counting locally: {e}")
    return {"count": 0, "reset_time": now + window_seconds, "last_sync": now}


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """Count one request against ``key``.

    Returns:
        Tuple of (is_allowed, current_count, seconds_until_reset)
    """
    try:
        now = int(time.time())

        with windows_lock:
            _cleanup_expired(now)

            entry = windows.get(key)
            if entry is None:
                entry = windows[key] = _load_window(key, window_seconds, client, now)

            if now >= entry["reset_time"]:
                entry.update(count=0, reset_time=now + window_seconds, last_sync=0)

            is_allowed = entry["count"] < limit
            if is_allowed:
                entry["count"] += 1

            if now - entry["last_sync"] >= SYNC_INTERVAL_SECONDS:
                try:
                    client.set(key, entry["count"], ex=max(entry["reset_time"] - now, 1))
                    entry["last_sync"] = now
                except Exception as e:
                    logger.warning(f"⚠️ Failed to sync rate limit window to Redis: {e}")

            return is_allowed, entry["count"], max(0, entry["reset_time"] - now)

    except Exception as e:
        logger.error(f"❌ Rate limit check failed, denying request: {e}")
        return False, limit, 0


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def rate_limit_dependency(
    request: Request,
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
    use_ip: bool = True,
    redis_client: Optional[redis.Redis] = None,
):
    """Raise 429 once ``limit`` requests were seen in ``window_seconds``"""
    if not RATE_LIMIT_ENABLED:
        return

    try:
        client = redis_client or get_redis_client()
        key = f"{key_prefix}:{client_ip(request) if use_ip else 'global'}"

        is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, client)

        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                    "retry_after": ttl,
                    "limit": limit,
                    "window_seconds": window_seconds,
                },
                headers={"Retry-After": str(ttl)},
            )

        request.state.rate_limit_remaining = limit - current_count
        request.state.rate_limit_reset = int(time.time()) + ttl

    except HTTPException:
        raise
    except Exception as e:
        # Fail closed
        logger.error(f"❌ Rate limiting unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiting service temporarily unavailable",
        ) from e


def create_rate_limiter(
    limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True
):
    """
    Create a rate limiter dependency with specific parameters

    Example usage:
        login_limiter = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(login_limiter)):
            ...
    """

    async def rate_limiter(request: Request):
        return await rate_limit_dependency(request, limit, window_seconds, key_prefix, use_ip)

    return rate_limiter
