"""Service wiring and FastAPI dependency functions.

The ServiceManager owns every connection handle the service uses. It is
created per application, initialized in the lifespan startup hook and
cleaned up on shutdown, and stored on ``app.state`` so request handlers
reach it through the dependency functions below rather than module globals.
"""

import logging
from functools import partial

import redis.asyncio as redis
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from shortener.cache import URLCache
from shortener.config import Settings
from shortener.database import close_db, create_engine, create_session_factory, init_db
from shortener.health import HealthReporter
from shortener.redis import close_redis, create_redis
from shortener.service import URLShorteningService, generate_short_id
from shortener.store import URLStore

__all__ = ["ServiceManager", "get_service_manager", "get_url_service", "get_health_reporter"]


# ============================================================================
# SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Owner of the engine, Redis client and the services built on them."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._initialized = False
        self.engine: AsyncEngine | None = None
        self.redis: redis.Redis | None = None

    async def initialize(self) -> None:
        """Acquire shared resources once at startup."""
        if self._initialized:
            return

        self.logger = self._setup_logger()
        self.engine = create_engine(self.settings)
        self.redis = create_redis(self.settings)
        try:
            await init_db(self.engine)
        except Exception:
            await self.cleanup()
            raise

        store = URLStore(create_session_factory(self.engine))
        cache = URLCache(self.redis, ttl_seconds=self.settings.CACHE_TTL_SECONDS)
        self.url_service = URLShorteningService(
            store,
            cache,
            id_generator=partial(generate_short_id, self.settings.SHORT_ID_LENGTH),
            logger=self.logger,
        )
        self.health_reporter = HealthReporter(
            store,
            cache,
            timeout_seconds=self.settings.HEALTH_CHECK_TIMEOUT_SECONDS,
            logger=self.logger,
        )
        self._initialized = True
        self.logger.info(f"{self.settings.APP_NAME} services initialized")

    def _setup_logger(self) -> logging.Logger:
        """Setup logger once."""
        logger = logging.getLogger("urlshortener")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(self.settings.LOG_LEVEL.upper())
        return logger

    async def cleanup(self) -> None:
        """Release shared resources at shutdown."""
        try:
            if self.redis is not None:
                await close_redis(self.redis)
        finally:
            self.redis = None
            if self.engine is not None:
                await close_db(self.engine)
            self.engine = None
            self._initialized = False


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_service_manager(request: Request) -> ServiceManager:
    return request.app.state.service_manager


def get_url_service(manager: ServiceManager = Depends(get_service_manager)) -> URLShorteningService:
    return manager.url_service


def get_health_reporter(manager: ServiceManager = Depends(get_service_manager)) -> HealthReporter:
    return manager.health_reporter
