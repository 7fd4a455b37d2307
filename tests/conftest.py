"""Shared pytest fixtures for store, cache, service and API tests.

The durable store runs against a throwaway SQLite file through aiosqlite and
Redis is replaced by an AsyncMock backed by a plain dict.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
import redis.asyncio as redis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from shortener.cache import URLCache
from shortener.config import Settings
from shortener.database import close_db, create_engine, create_session_factory, init_db
from shortener.dependencies import get_health_reporter, get_url_service
from shortener.health import HealthReporter
from shortener.main import app
from shortener.service import URLShorteningService
from shortener.store import URLStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        APP_ENV="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'shortener.db'}",
        HEALTH_CHECK_TIMEOUT_SECONDS=0.5,
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def store(engine: AsyncEngine) -> URLStore:
    return URLStore(create_session_factory(engine))


@pytest.fixture
def redis_data() -> dict[str, str]:
    """Backing dict for the mocked Redis client."""
    return {}


@pytest.fixture
def mock_redis(redis_data: dict[str, str]) -> AsyncMock:
    async def _get(key: str) -> str | None:
        return redis_data.get(key)

    async def _set(key: str, value: str, ex: int | None = None) -> bool:
        redis_data[key] = value
        return True

    client = AsyncMock(spec=redis.Redis)
    client.get = AsyncMock(side_effect=_get)
    client.set = AsyncMock(side_effect=_set)
    client.ping = AsyncMock(return_value=True)
    return client


@pytest.fixture
def cache(mock_redis: AsyncMock) -> URLCache:
    return URLCache(mock_redis)


@pytest.fixture
def url_service(store: URLStore, cache: URLCache) -> URLShorteningService:
    return URLShorteningService(store, cache)


@pytest.fixture
def health_reporter(store: URLStore, cache: URLCache, settings: Settings) -> HealthReporter:
    return HealthReporter(store, cache, timeout_seconds=settings.HEALTH_CHECK_TIMEOUT_SECONDS)


@pytest_asyncio.fixture
async def client(
    url_service: URLShorteningService, health_reporter: HealthReporter
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_url_service] = lambda: url_service
    app.dependency_overrides[get_health_reporter] = lambda: health_reporter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
