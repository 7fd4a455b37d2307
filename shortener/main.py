"""FastAPI application entry point for the URL shortener service.

Application Lifecycle Diagram
=============================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ create_app()│
    │ handlers,   │
    │ /metrics,   │
    │ routes      │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ initialize()│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ cleanup()   │
    └─────────────┘

How to Use
===========
**Run with uvicorn**::
    uvicorn shortener.main:app --host 0.0.0.0 --port 3000

**Or through the console script**::
    shortener

**Make API calls**::
    curl -X POST http://localhost:3000/shorten \
         -H "Content-Type: application/json" \
         -d '{"original_url": "https://example.com"}'
    curl -i http://localhost:3000/Ab3dE9x

Key Behaviours
===============
- Tables are created on startup; the engine and Redis client are released on
  shutdown even if the application fails while serving.
- NotFoundError becomes 404 "Not found"; other service errors become 500.
- Prometheus metrics are exposed at /metrics.
"""

__all__ = ["app", "create_app"]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_fastapi_instrumentator import Instrumentator

from shortener.config import Settings, get_settings
from shortener.dependencies import ServiceManager
from shortener.exceptions import NotFoundError, ShortenerError
from shortener.routes import router

logger = logging.getLogger("urlshortener")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    manager: ServiceManager = app.state.service_manager
    # Startup
    await manager.initialize()
    try:
        yield
    finally:
        # Shutdown
        await manager.cleanup()


async def not_found_handler(request: Request, exc: NotFoundError) -> PlainTextResponse:
    return PlainTextResponse("Not found", status_code=404)


async def service_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="URL shortener with a PostgreSQL store and a Redis cache",
        lifespan=lifespan,
    )
    app.state.service_manager = ServiceManager(settings)

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ShortenerError, service_error_handler)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(app).expose(app)

    app.include_router(router)
    return app


app = create_app()
