"""Database engine and session management for the URL shortener.

This module builds the SQLAlchemy async engine and session factory used by
the durable store. Nothing is created at import time: the service manager
constructs the engine at startup and disposes it at shutdown.

Flow Diagram — Database Lifecycle
=================================
::
    ┌─────────────┐
    │ create_     │
    │ engine()    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ init_db()   │
    │ create_all  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ session     │
    │ per store   │
    │ call        │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ close_db()  │
    │ dispose()   │
    └─────────────┘

How to Use
===========
**Step 1 — Build on startup**::
    engine = create_engine(settings)
    sessions = create_session_factory(engine)
    await init_db(engine)

**Step 2 — Cleanup on shutdown**::
    await close_db(engine)

Key Behaviours
===============
- Connection pooling with pre-ping for PostgreSQL.
- asyncpg connect and command timeouts come from DATABASE_TIMEOUT_SECONDS.
- SQL echo is enabled only in the development environment.

Classes:
    Base:  SQLAlchemy declarative base for all models.

Functions:
    create_engine():  Builds the async engine from settings.
    create_session_factory():  Builds the async session factory.
    init_db():  Creates all tables.
    close_db():  Disposes the engine.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from shortener.config import Settings

__all__ = ["Base", "create_engine", "create_session_factory", "init_db", "close_db"]


class Base(DeclarativeBase):
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    url = make_url(settings.DATABASE_URL)
    options: dict = {"echo": settings.APP_ENV == "development"}

    # SQLite (local runs) brings its own pool class.
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    if url.get_driver_name() == "asyncpg":
        options["connect_args"] = {
            "timeout": settings.DATABASE_TIMEOUT_SECONDS,
            "command_timeout": settings.DATABASE_TIMEOUT_SECONDS,
        }

    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    await engine.dispose()
