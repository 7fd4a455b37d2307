"""Shared enums for the URL shortener service.

Using enums instead of string literals keeps status values consistent
between the health reporter, the response schemas and the tests.
"""

from enum import StrEnum

__all__ = ["HealthStatus", "ServiceState", "ReadinessStatus", "LivenessStatus", "RequestStatus"]


class HealthStatus(StrEnum):
    """Aggregate health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ServiceState(StrEnum):
    """Per-collaborator connectivity reported by the health check."""

    CONNECTED = "connected"
    ERROR = "error"


class ReadinessStatus(StrEnum):
    READY = "ready"
    NOT_READY = "not ready"


class LivenessStatus(StrEnum):
    ALIVE = "alive"


class RequestStatus(StrEnum):
    """Request status values for metrics and logging."""

    SUCCESS = "success"
    ERROR = "error"
    NOT_FOUND = "not_found"
