"""
Redis response cache

Public catalogue reads (service categories, specialties, events) are served
from Redis for a few minutes. Every operation fails open: a Redis outage
degrades to calling the backend directly.
"""
import json
import logging
from functools import wraps
from typing import Any, Callable, Optional

from .config import CACHE_ENABLED, CATALOG_CACHE_TTL
from .redis_client import get_redis_client
from .schemas import ActionResult

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with JSON serialization"""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.redis_client = None

    def _get_client(self):
        """Lazy load Redis client"""
        if not self.enabled:
            return None
        if self.redis_client is None:
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = CATALOG_CACHE_TTL) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            return True
        except Exception as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g. 'catalog:vendor-specialties:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if keys:
                deleted = client.delete(*keys)
                logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except Exception as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0


# Global cache instance
cache = Cache(enabled=CACHE_ENABLED)


def cached(key_prefix: str, ttl: int = CATALOG_CACHE_TTL, key_builder: Optional[Callable] = None):
    """
    Cache the data of successful ActionResults returned by an async service method

    Args:
        key_prefix: Prefix for cache key (e.g., 'catalog:categories')
        ttl: Time to live in seconds
        key_builder: Optional function building the key from the method arguments

    Example:
        @cached(key_prefix="catalog:category")
        async def get_category(self, category_id: str) -> ActionResult:
            ...
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if key_builder:
                cache_key = key_builder(*args, **kwargs)
            else:
                # Default: skip `self`, join positional and keyword arguments
                parts = [str(a) for a in args[1:]]
                parts += [f"{k}={v}" for k, v in sorted(kwargs.items())]
                cache_key = ":".join([key_prefix] + parts) if parts else f"{key_prefix}:default"

            cached_value = cache.get(cache_key)
            if cached_value is not None:
                return ActionResult.ok(cached_value)

            result = await func(*args, **kwargs)
            if result.success and result.data is not None:
                cache.set(cache_key, result.data, ttl)
            return result

        return wrapper

    return decorator


def get_cache_stats() -> dict:
    """Cache statistics for the Redis health endpoint"""
    client = cache._get_client()
    if not client:
        return {"available": False}

    try:
        info = client.info()
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "available": True,
            "used_memory": info.get("used_memory_human"),
            "connected_clients": info.get("connected_clients"),
            "hit_rate": (hits / max(hits + misses, 1)) * 100,
        }
    except Exception as e:
        logger.error(f"❌ Failed to get cache stats: {e}")
        return {"available": False, "error": str(e)}
