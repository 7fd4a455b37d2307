"""Fast cache for short id mappings (Redis).

Entries are plain ``short_id -> original_url`` strings keyed by the bare
short id. A missing key reads as None; any Redis failure raises CacheError
rather than masquerading as a miss.
"""

import redis.asyncio as redis
from redis.exceptions import RedisError

from shortener.exceptions import CacheError

__all__ = ["URLCache"]

CACHE_ERRORS = (RedisError, OSError)


class URLCache:
    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None):
        self._client = client
        self._ttl_seconds = ttl_seconds

    async def get(self, short_id: str) -> str | None:
        try:
            value = await self._client.get(short_id)
        except CACHE_ERRORS as exc:
            raise CacheError(f"Failed to read cache for '{short_id}': {exc}") from exc
        # An empty string is treated like an absent entry.
        return value or None

    async def set(self, short_id: str, original_url: str) -> None:
        try:
            await self._client.set(short_id, original_url, ex=self._ttl_seconds)
        except CACHE_ERRORS as exc:
            raise CacheError(f"Failed to write cache for '{short_id}': {exc}") from exc

    async def ping(self) -> None:
        try:
            await self._client.ping()
        except CACHE_ERRORS as exc:
            raise CacheError(f"Redis unavailable: {exc}") from exc
