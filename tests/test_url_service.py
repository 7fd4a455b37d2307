"""Mapping service tests: cache-aside reads, write-through creates, failures.

The store is a real SQLAlchemy store over SQLite; Redis is mocked so the
tests can inspect, evict and break the cache.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from shortener.cache import URLCache
from shortener.exceptions import CacheError, NotFoundError, StorageError
from shortener.service import ALPHABET, URLShorteningService
from shortener.store import URLStore


@pytest.fixture
def store_reads(store: URLStore, monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Spy on durable store reads."""
    spy = AsyncMock(wraps=store.get_original_url)
    monkeypatch.setattr(store, "get_original_url", spy)
    return spy


# ============================================================================
# CREATE
# ============================================================================


@pytest.mark.asyncio
async def test_create_returns_seven_char_url_safe_id(url_service: URLShorteningService) -> None:
    short_id = await url_service.create("https://example.com/a/b")
    assert len(short_id) == 7
    assert all(c in ALPHABET for c in short_id)


@pytest.mark.asyncio
async def test_create_writes_store_and_cache(
    url_service: URLShorteningService, store: URLStore, redis_data: dict[str, str]
) -> None:
    short_id = await url_service.create("https://example.com/a/b")

    assert await store.get_original_url(short_id) == "https://example.com/a/b"
    # Write-through on create: no resolve needed to warm the cache
    assert redis_data[short_id] == "https://example.com/a/b"


@pytest.mark.asyncio
async def test_create_does_not_validate_url(url_service: URLShorteningService) -> None:
    short_id = await url_service.create("definitely not a url")
    assert await url_service.resolve(short_id) == "definitely not a url"


@pytest.mark.asyncio
async def test_create_uses_injected_id_generator(store: URLStore, cache: URLCache) -> None:
    service = URLShorteningService(store, cache, id_generator=lambda: "fixed01")
    assert await service.create("https://example.com") == "fixed01"


@pytest.mark.asyncio
async def test_create_store_failure_skips_cache(
    url_service: URLShorteningService,
    store: URLStore,
    mock_redis: AsyncMock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(store, "insert", AsyncMock(side_effect=StorageError("database down")))

    with pytest.raises(StorageError, match="database down"):
        await url_service.create("https://example.com")

    mock_redis.set.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_cache_failure_keeps_stored_mapping(
    store: URLStore, cache: URLCache, mock_redis: AsyncMock
) -> None:
    service = URLShorteningService(store, cache, id_generator=lambda: "fixed02")
    mock_redis.set.side_effect = RedisConnectionError("Connection refused")

    with pytest.raises(CacheError):
        await service.create("https://example.com/partial")

    # No rollback: the store already holds the mapping
    assert await store.get_original_url("fixed02") == "https://example.com/partial"


@pytest.mark.asyncio
async def test_create_collision_raises_storage_error(store: URLStore, cache: URLCache) -> None:
    service = URLShorteningService(store, cache, id_generator=lambda: "same_id")
    await service.create("https://example.com/first")

    with pytest.raises(StorageError):
        await service.create("https://example.com/second")

    assert await service.resolve("same_id") == "https://example.com/first"


@pytest.mark.asyncio
async def test_concurrent_creates_are_independent(url_service: URLShorteningService) -> None:
    first, second = await asyncio.gather(
        url_service.create("https://example.com/one"),
        url_service.create("https://example.com/two"),
    )

    assert first != second
    assert await url_service.resolve(first) == "https://example.com/one"
    assert await url_service.resolve(second) == "https://example.com/two"


# ============================================================================
# RESOLVE
# ============================================================================


@pytest.mark.asyncio
async def test_round_trip(url_service: URLShorteningService) -> None:
    short_id = await url_service.create("https://example.com/a/b")
    assert await url_service.resolve(short_id) == "https://example.com/a/b"


@pytest.mark.asyncio
async def test_resolve_unknown_id_raises_not_found(url_service: URLShorteningService) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await url_service.resolve("nothere")
    assert exc_info.value.short_id == "nothere"


@pytest.mark.asyncio
async def test_resolve_cache_hit_skips_store(
    url_service: URLShorteningService, store_reads: AsyncMock
) -> None:
    short_id = await url_service.create("https://example.com")

    assert await url_service.resolve(short_id) == "https://example.com"
    store_reads.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolve_after_eviction_repopulates_cache(
    url_service: URLShorteningService,
    store_reads: AsyncMock,
    redis_data: dict[str, str],
) -> None:
    short_id = await url_service.create("https://example.com/evicted")
    redis_data.clear()

    assert await url_service.resolve(short_id) == "https://example.com/evicted"
    store_reads.assert_awaited_once_with(short_id)
    assert redis_data[short_id] == "https://example.com/evicted"

    # Second resolve is served from the cache
    assert await url_service.resolve(short_id) == "https://example.com/evicted"
    assert store_reads.await_count == 1


@pytest.mark.asyncio
async def test_resolve_cache_read_error_is_hard_failure(
    url_service: URLShorteningService,
    store_reads: AsyncMock,
    mock_redis: AsyncMock,
) -> None:
    short_id = await url_service.create("https://example.com")
    mock_redis.get.side_effect = RedisConnectionError("Connection refused")

    with pytest.raises(CacheError):
        await url_service.resolve(short_id)
    store_reads.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolve_store_error_raises_storage_error(
    url_service: URLShorteningService, store: URLStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(store, "get_original_url", AsyncMock(side_effect=StorageError("timeout")))

    with pytest.raises(StorageError):
        await url_service.resolve("Ab3dE9x")


@pytest.mark.asyncio
async def test_resolve_repopulation_failure_raises_cache_error(
    url_service: URLShorteningService,
    store: URLStore,
    mock_redis: AsyncMock,
) -> None:
    await store.insert("stored1", "https://example.com/stored")
    mock_redis.set.side_effect = RedisConnectionError("Connection refused")

    with pytest.raises(CacheError):
        await url_service.resolve("stored1")
