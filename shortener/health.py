"""Health, liveness and readiness checks for the URL shortener.

The reporter probes PostgreSQL (``SELECT 1``) and Redis (``PING``). Probes
run concurrently, each bounded by its own timeout, and every failure is
converted into a structured status. None of the checks raise.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from shortener.cache import URLCache
from shortener.enums import HealthStatus, ReadinessStatus, ServiceState
from shortener.schemas import HealthReport, LivenessReport, ReadinessReport, ServicesHealth
from shortener.store import URLStore

__all__ = ["HealthReporter", "utc_timestamp"]


def utc_timestamp() -> str:
    # fmt: off
    return datetime.now(tz=UTC) \
                   .isoformat(timespec="milliseconds") \
                   .replace("+00:00", "Z")
    # fmt: on


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class HealthReporter:
    def __init__(
        self,
        store: URLStore,
        cache: URLCache,
        timeout_seconds: float = 2.0,
        logger: logging.Logger | None = None,
    ):
        self._store = store
        self._cache = cache
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("urlshortener")

    async def report(self) -> HealthReport:
        db_error, cache_error = await self._probe_all()
        errors = [e for e in (db_error, cache_error) if e is not None]

        report = HealthReport(
            status=HealthStatus.UNHEALTHY if errors else HealthStatus.HEALTHY,
            timestamp=utc_timestamp(),
            error="; ".join(errors) if errors else None,
            services=ServicesHealth(
                database=ServiceState.ERROR if db_error else ServiceState.CONNECTED,
                redis=ServiceState.ERROR if cache_error else ServiceState.CONNECTED,
            ),
        )
        self._logger.info(f"Health check completed: {report.status.value}")
        return report

    @staticmethod
    def liveness() -> LivenessReport:
        return LivenessReport(timestamp=utc_timestamp())

    async def readiness(self) -> ReadinessReport:
        errors = [e for e in await self._probe_all() if e is not None]
        if errors:
            self._logger.warning(f"Readiness check failed: {'; '.join(errors)}")
            return ReadinessReport(
                status=ReadinessStatus.NOT_READY,
                timestamp=utc_timestamp(),
                error="; ".join(errors),
            )
        return ReadinessReport(status=ReadinessStatus.READY, timestamp=utc_timestamp())

    async def _probe_all(self) -> tuple[str | None, str | None]:
        db_error, cache_error = await asyncio.gather(
            self._probe("database", self._store.ping),
            self._probe("redis", self._cache.ping),
        )
        return db_error, cache_error

    async def _probe(self, name: str, ping: Callable[[], Awaitable[None]]) -> str | None:
        """Run one probe; return the error message, or None on success."""
        try:
            await asyncio.wait_for(ping(), timeout=self._timeout_seconds)
        except Exception as exc:
            self._logger.error(f"{name} health check failed: {_describe(exc)}")
            return _describe(exc)
        self._logger.debug(f"{name} health check passed")
        return None
