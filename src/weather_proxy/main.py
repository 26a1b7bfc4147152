"""Application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from weather_proxy import __version__
from weather_proxy.api.dependencies import ServiceContext
from weather_proxy.api.routes import NOT_FOUND_MESSAGE, api_router, health_router
from weather_proxy.config import Settings, get_settings
from weather_proxy.middleware.logging import LoggingMiddleware, configure_logging

logger = structlog.get_logger()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as flat {error, message} bodies."""
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)

    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Not found", "message": NOT_FOUND_MESSAGE},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "message": str(exc.detail)},
        headers=exc.headers,
    )


def create_app(
    settings: Settings | None = None,
    services: ServiceContext | None = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    services = services or ServiceContext.from_settings(settings)

    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await services.startup()
        logger.info(
            "Weather proxy started",
            cache_connected=services.cache.is_connected(),
            cache_ttl_seconds=settings.cache_ttl_seconds,
        )
        try:
            yield
        finally:
            await services.shutdown()

    app = FastAPI(
        title="Weather Cache Proxy",
        description="Caching proxy for Visual Crossing weather data",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(api_router)
    app.include_router(health_router)

    # Mount Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    return app


def run() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "weather_proxy.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
