"""Configuration management for the URL shortener service.

This module provides centralized configuration using Pydantic BaseSettings
with environment variable support and caching.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from shortener.config import get_settings

**Step 2 — Read values**::
    settings = get_settings()
    print(settings.PORT, settings.DATABASE_URL)

Key Behaviours
===============
- Settings are cached after first access.
- Environment variables (and a local .env file) override defaults.
- CACHE_TTL_SECONDS is unset by default: cache entries never expire.

Classes:
    Settings:  Pydantic model for all configuration values.
"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "url-shortener"
    APP_ENV: str = "development"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # PostgreSQL (durable store)
    DATABASE_URL: str = "postgresql+asyncpg://urlshortener:urlshortener@db:5432/urlshortener"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_TIMEOUT_SECONDS: float = 5.0

    # Redis (fast cache)
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_SOCKET_TIMEOUT_SECONDS: float = 5.0
    CACHE_TTL_SECONDS: int | None = None

    # Short id config
    SHORT_ID_LENGTH: int = 7

    HEALTH_CHECK_TIMEOUT_SECONDS: float = 2.0

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
