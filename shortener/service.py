"""Business logic layer for URL shortening operations.

This module provides short id generation and the mapping service that keeps
the durable store (PostgreSQL) and the fast cache (Redis) consistent using
the cache-aside pattern.

Flow Diagram — create()
=======================
::
    ┌─────────────┐
    │ POST        │
    │ /shorten    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Generate    │
    │ short id    │
    │ (nanoid)    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Insert into │──── fails ──▶ StorageError
    │ PostgreSQL  │              (cache untouched)
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Mirror into │──── fails ──▶ CacheError
    │ Redis       │              (row already stored)
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Return      │
    │ short id    │
    └─────────────┘

Flow Diagram — resolve()
========================
::
    ┌─────────────┐
    │ GET /:id    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check Redis │──── error ──▶ CacheError
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Query   │  │ Return  │
│PostgreSQL│ │ cached  │
└────┬────┘  │ URL     │
     │       └─────────┘
  FOUND?
 ┌───┴────┐
 │ NO     │ YES
 ▼        ▼
NotFound ┌─────────┐
Error    │ Cache   │
         │ result, │
         │ return  │
         └─────────┘

How to Use
===========
**Step 1 — Build the service**::
    service = URLShorteningService(URLStore(sessions), URLCache(redis_client))

**Step 2 — Shorten**::
    short_id = await service.create("https://example.com/a/b")

**Step 3 — Resolve**::
    try:
        original_url = await service.resolve(short_id)
    except NotFoundError:
        ...

Key Behaviours
===============
- Short ids are 7 characters from the URL-safe nanoid alphabet.
- No uniqueness pre-check: a collision surfaces as StorageError.
- The store write always completes before the cache write.
- The cache is always consulted before the store.
- A cache miss that hits the store repopulates the cache.
- No retries, no rollback across the two stores.
"""

import logging
from typing import Callable

from nanoid import generate
from prometheus_client import Counter

from shortener.cache import URLCache
from shortener.enums import RequestStatus
from shortener.exceptions import NotFoundError, ShortenerError
from shortener.store import URLStore

__all__ = ["ALPHABET", "SHORT_ID_LENGTH", "generate_short_id", "URLShorteningService"]

ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
SHORT_ID_LENGTH = 7

URL_CREATION_REQUESTS_TOTAL = Counter(
    "url_shortener_creation_requests_total",
    "Total URL creation requests",
    ["status"],
)
URL_LOOKUP_REQUESTS_TOTAL = Counter(
    "url_shortener_lookup_requests_total",
    "Total URL lookup requests",
    ["status"],
)
CACHE_HITS_TOTAL = Counter(
    "url_shortener_cache_hits_total",
    "Total cache hits for URL lookups",
)
CACHE_MISSES_TOTAL = Counter(
    "url_shortener_cache_misses_total",
    "Total cache misses for URL lookups",
)
DATABASE_READS_TOTAL = Counter(
    "url_shortener_database_reads_total",
    "Total database read operations",
)
DATABASE_WRITES_TOTAL = Counter(
    "url_shortener_database_writes_total",
    "Total database write operations",
)


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
    return generate(ALPHABET, length)


class URLShorteningService:
    """Create and resolve short id mappings over the store and cache.

    The service holds no per-request state; one instance is shared by all
    requests and every suspension point is a store or cache call.
    """

    def __init__(
        self,
        store: URLStore,
        cache: URLCache,
        id_generator: Callable[[], str] = generate_short_id,
        logger: logging.Logger | None = None,
    ):
        self._store = store
        self._cache = cache
        self._generate_id = id_generator
        self._logger = logger or logging.getLogger("urlshortener")

    async def create(self, original_url: str) -> str:
        """Store a new mapping and mirror it into the cache.

        Raises:
            StorageError: The store write failed; nothing was cached.
            CacheError: The cache write failed after the row was stored.
        """
        short_id = self._generate_id()
        try:
            await self._store.insert(short_id, original_url)
            DATABASE_WRITES_TOTAL.inc()
            await self._cache.set(short_id, original_url)
        except ShortenerError as exc:
            URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"URL creation failed for {short_id}: {exc}")
            raise

        URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"URL created: {short_id} -> {original_url}")
        return short_id

    async def resolve(self, short_id: str) -> str:
        """Return the original URL for ``short_id``, cache first.

        Raises:
            NotFoundError: No mapping exists for ``short_id``.
            CacheError: Redis failed on read or repopulation.
            StorageError: PostgreSQL failed on the fallback read.
        """
        try:
            original_url = await self._cache.get(short_id)
            if original_url is not None:
                CACHE_HITS_TOTAL.inc()
                URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
                self._logger.debug(f"Cache hit for {short_id}")
                return original_url

            CACHE_MISSES_TOTAL.inc()
            self._logger.debug(f"Cache miss for {short_id}, querying database")
            original_url = await self._store.get_original_url(short_id)
            DATABASE_READS_TOTAL.inc()
            if original_url is None:
                URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
                raise NotFoundError(short_id)

            await self._cache.set(short_id, original_url)
        except NotFoundError:
            raise
        except ShortenerError as exc:
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"URL lookup failed for {short_id}: {exc}")
            raise

        URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.debug(f"Database hit and cached for {short_id}")
        return original_url
