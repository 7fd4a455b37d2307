"""Durable store for short id mappings (PostgreSQL via SQLAlchemy async).

Every call opens its own session from the shared session factory, so
concurrent requests never share a session. Driver and connection failures
are translated into StorageError with the original exception chained.

Functions:
    URLStore.insert():  Persist a new mapping.
    URLStore.get_original_url():  Fetch the URL for a short id, or None.
    URLStore.ping():  Trivial round-trip for health probes.
"""

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortener.exceptions import StorageError
from shortener.models import URL

__all__ = ["URLStore"]

# asyncpg timeouts and socket failures are not always wrapped by SQLAlchemy.
STORE_ERRORS = (SQLAlchemyError, OSError)


class URLStore:
    """Authoritative storage for the urls table."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions

    async def insert(self, short_id: str, original_url: str) -> None:
        try:
            async with self._sessions() as session:
                session.add(URL(short_id=short_id, original_url=original_url))
                await session.commit()
        except STORE_ERRORS as exc:
            raise StorageError(f"Failed to store mapping for '{short_id}': {exc}") from exc

    async def get_original_url(self, short_id: str) -> str | None:
        try:
            async with self._sessions() as session:
                result = await session.execute(
                    select(URL.original_url).where(URL.short_id == short_id)
                )
                return result.scalar_one_or_none()
        except STORE_ERRORS as exc:
            raise StorageError(f"Failed to read mapping for '{short_id}': {exc}") from exc

    async def ping(self) -> None:
        try:
            async with self._sessions() as session:
                await session.execute(text("SELECT 1"))
        except STORE_ERRORS as exc:
            raise StorageError(f"Database unavailable: {exc}") from exc
