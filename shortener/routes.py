"""FastAPI route definitions for the URL shortener HTTP surface.

API Endpoint Overview
=====================
::
    GET  /health
        └─ HealthReport (200) or (503)

    GET  /health/liveness
        └─ LivenessReport (200)

    GET  /health/readiness
        └─ ReadinessReport (200) or (503)

    POST /shorten
        ├─ ShortenRequest (request body)
        └─ ShortenResponse (200), 422 on a malformed body, 500 on store/cache failure

    GET  /:short_id
        └─ 302 Redirect, 404 "Not found", or 500

Key Behaviours
===============
- Health routes are registered before the catch-all redirect route.
- Liveness never touches PostgreSQL or Redis.
- NotFoundError and infrastructure errors are turned into responses by the
  exception handlers registered in shortener.main.
- Redirects use 302 Found.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse

from shortener.dependencies import get_health_reporter, get_url_service
from shortener.health import HealthReporter
from shortener.schemas import HealthReport, LivenessReport, ReadinessReport, ShortenRequest, ShortenResponse
from shortener.service import URLShorteningService

__all__ = ["router"]

router = APIRouter()


@router.get("/health", response_model=HealthReport, tags=["health"])
async def health_check(reporter: HealthReporter = Depends(get_health_reporter)) -> JSONResponse:
    report = await reporter.report()
    return JSONResponse(
        status_code=200 if report.is_healthy else 503,
        content=report.model_dump(mode="json", exclude_none=True),
    )


@router.get("/health/liveness", response_model=LivenessReport, tags=["health"])
async def liveness_check() -> LivenessReport:
    return HealthReporter.liveness()


@router.get("/health/readiness", response_model=ReadinessReport, tags=["health"])
async def readiness_check(reporter: HealthReporter = Depends(get_health_reporter)) -> JSONResponse:
    report = await reporter.readiness()
    return JSONResponse(
        status_code=200 if report.is_ready else 503,
        content=report.model_dump(mode="json", exclude_none=True),
    )


@router.post("/shorten", response_model=ShortenResponse, tags=["urls"])
async def shorten_url(
    payload: ShortenRequest,
    service: URLShorteningService = Depends(get_url_service),
) -> ShortenResponse:
    short_id = await service.create(payload.original_url)
    return ShortenResponse(short_id=short_id)


@router.get("/{short_id}", tags=["redirect"])
async def redirect_to_url(
    short_id: str,
    service: URLShorteningService = Depends(get_url_service),
) -> RedirectResponse:
    original_url = await service.resolve(short_id)
    return RedirectResponse(url=original_url, status_code=302)
