from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Optional

from redis import asyncio as aioredis

from storefront.core.config import get_settings

logger = logging.getLogger(__name__)
_settings = get_settings()


class CacheClient:
    """Thin async Redis wrapper; the connection is opened lazily on first use."""

    def __init__(self) -> None:
        self._redis = aioredis.from_url(str(_settings.redis_url), decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._redis.set(key, value, ex=ttl)

    async def ping(self) -> bool:
        return await self._redis.ping()


_cache = CacheClient()


async def get_redis_client() -> CacheClient:
    """Returns the shared Redis cache client for health checks and other uses."""
    return _cache


async def cached_json(key: str, ttl: Optional[int], producer: Callable[[], Awaitable[Any]]) -> Any:
    """Return the cached JSON value for ``key`` or produce, store and return it.

    A TTL of 0 or None bypasses the cache. Redis failures are logged and never
    fail the caller.
    """
    if ttl:
        try:
            cached = await _cache.get(key)
            if cached:
                return json.loads(cached)
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)

    result = await producer()

    if ttl:
        try:
            await _cache.set(key, json.dumps(result), ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    return result


__all__ = ["cached_json", "get_redis_client"]
