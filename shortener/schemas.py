"""Pydantic schemas for request/response validation in the URL shortener.

Schema Hierarchy
=================
::
    ShortenRequest (Input)
    └─ original_url: str (not validated for shape)

    ShortenResponse (Output)
    └─ short_id: str

    HealthReport (Output)
    ├─ status: healthy | unhealthy
    ├─ timestamp: str (ISO-8601, UTC, "Z" suffix)
    ├─ error: str | None (only when unhealthy)
    └─ services: ServicesHealth
        ├─ database: connected | error
        └─ redis: connected | error

    LivenessReport (Output)
    ├─ status: alive
    └─ timestamp: str

    ReadinessReport (Output)
    ├─ status: ready | not ready
    ├─ timestamp: str
    └─ error: str | None (only when not ready)

Key Behaviours
===============
- Any string is accepted as original_url, including an empty one.
- Reports are serialized with ``exclude_none`` so ``error`` only appears
  on failure.
"""

from pydantic import BaseModel

from shortener.enums import HealthStatus, LivenessStatus, ReadinessStatus, ServiceState

__all__ = [
    "ShortenRequest",
    "ShortenResponse",
    "ServicesHealth",
    "HealthReport",
    "LivenessReport",
    "ReadinessReport",
]


class ShortenRequest(BaseModel):
    original_url: str


class ShortenResponse(BaseModel):
    short_id: str


class ServicesHealth(BaseModel):
    database: ServiceState
    redis: ServiceState


class HealthReport(BaseModel):
    status: HealthStatus
    timestamp: str
    error: str | None = None
    services: ServicesHealth

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY


class LivenessReport(BaseModel):
    status: LivenessStatus = LivenessStatus.ALIVE
    timestamp: str


class ReadinessReport(BaseModel):
    status: ReadinessStatus
    timestamp: str
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is ReadinessStatus.READY
