"""Shared Redis connection for the response cache and rate limiter"""

import logging
from typing import Optional

import redis

from .config import REDIS_DB, REDIS_HOST, REDIS_PASSWORD, REDIS_PORT, REDIS_SSL, REDIS_URL

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


def _mask_url(url: str) -> str:
    if "@" not in url:
        return "****"
    scheme = url.split(":")[0]
    return f"{scheme}:****@{url.split('@', 1)[1]}"


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client, raising when Redis is unreachable"""
    global redis_client

    if redis_client is not None:
        return redis_client

    options = {
        "decode_responses": True,
        "socket_connect_timeout": 5,
        "socket_timeout": 5,
        "retry_on_timeout": True,
        "health_check_interval": 30,
        "max_connections": 20,
    }

    if REDIS_URL:
        logger.info(f"📡 Connecting to Redis via URL: {_mask_url(REDIS_URL)}")
        client = redis.from_url(REDIS_URL, **options)
    else:
        logger.info(
            f"📡 Connecting to Redis at {REDIS_HOST}:{REDIS_PORT} "
            f"(db={REDIS_DB}, ssl={'on' if REDIS_SSL else 'off'})"
        )
        client = redis.Redis(
            host=REDIS_HOST,
            port=REDIS_PORT,
            password=REDIS_PASSWORD,
            db=REDIS_DB,
            ssl=REDIS_SSL,
            **options,
        )

    try:
        client.ping()
    except Exception as e:
        logger.error(f"❌ Failed to connect to Redis: {e}")
        raise

    logger.info("✅ Redis connected")
    redis_client = client
    return redis_client
