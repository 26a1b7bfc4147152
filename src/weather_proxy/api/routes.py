"""API route definitions."""

from datetime import UTC, datetime
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from weather_proxy.api.dependencies import CacheDep, WeatherServiceDep
from weather_proxy.api.schemas import ErrorResponse, HealthResponse, WeatherSnapshot
from weather_proxy.services.coordinates import CoordinateValidationError, validate_coordinates
from weather_proxy.services.visual_crossing import (
    CredentialMissingError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)

logger = structlog.get_logger()

# API router for weather endpoints
api_router = APIRouter(tags=["weather"])

# Health router for health checks
health_router = APIRouter(tags=["health"])

NOT_FOUND_MESSAGE = "Endpoint not found. Use GET /weather?lat={lat}&lon={lon}"


def error_detail(error: str, message: str, details: object | None = None) -> dict[str, Any]:
    """Build an error body for HTTPException detail."""
    return ErrorResponse(error=error, message=message, details=details).model_dump(
        exclude_none=True
    )


@api_router.get(
    "/weather",
    response_model=WeatherSnapshot,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid coordinates"},
        500: {"model": ErrorResponse, "description": "Configuration or internal error"},
        502: {"model": ErrorResponse, "description": "Upstream API error"},
        504: {"model": ErrorResponse, "description": "Upstream timeout"},
    },
)
async def get_weather(
    weather_service: WeatherServiceDep,
    lat: Annotated[str | None, Query(description="Latitude, -90 to 90")] = None,
    lon: Annotated[str | None, Query(description="Longitude, -180 to 180")] = None,
) -> WeatherSnapshot:
    """Get current, hourly and daily weather for coordinates.

    Coordinates are rounded to 2 decimals; responses for the same rounded
    cell are served from cache until the TTL expires.
    """
    try:
        coord = validate_coordinates(lat, lon)
    except CoordinateValidationError as e:
        logger.info("Rejected coordinates", lat=lat, lon=lon, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(str(e), "Please provide valid lat and lon parameters"),
        ) from e

    try:
        return await weather_service.get_weather(coord)

    except CredentialMissingError as e:
        logger.error("Upstream API key not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("API key not configured", str(e)),
        ) from e

    except UpstreamTimeoutError as e:
        logger.error("Upstream timeout", lat=lat, lon=lon, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=error_detail("Request timeout", "Weather API took too long to respond"),
        ) from e

    except UpstreamHTTPError as e:
        logger.error(
            "Upstream API error",
            lat=lat,
            lon=lon,
            status_code=e.status_code,
            error=str(e),
        )
        status_code = e.status_code if 400 <= e.status_code < 600 else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(
            status_code=status_code,
            detail=error_detail("Weather API error", str(e), e.body),
        ) from e

    except UpstreamError as e:
        logger.error("Upstream request failed", lat=lat, lon=lon, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Internal server error", str(e)),
        ) from e

    except Exception as e:
        logger.exception("Weather request failed", lat=lat, lon=lon)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Internal server error", str(e)),
        ) from e


@health_router.get("/health", response_model=HealthResponse)
async def health(cache: CacheDep) -> HealthResponse:
    """Report liveness and cache connectivity."""
    return HealthResponse(
        status="ok",
        cacheConnected=cache.is_connected(),
        timestamp=datetime.now(UTC),
    )
