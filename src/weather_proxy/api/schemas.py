"""API request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Rounded location and the upstream's resolution of it."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude, rounded to 2 decimals")
    lon: float = Field(..., ge=-180, le=180, description="Longitude, rounded to 2 decimals")
    address: str | None = Field(default=None, description="Resolved address")
    timezone: str | None = Field(default=None, description="IANA timezone of the location")


class CurrentConditions(BaseModel):
    """Current weather conditions."""

    model_config = ConfigDict(frozen=True)

    temp: float | None = Field(default=None, description="Temperature in Celsius")
    feelsLike: float | None = Field(default=None, description="Feels-like temperature")  # noqa: N815
    humidity: float | None = Field(default=None, description="Relative humidity in %")
    windSpeed: float | None = Field(default=None, description="Wind speed in km/h")  # noqa: N815
    condition: str | None = Field(default=None, description="Conditions summary")
    icon: str | None = Field(default=None, description="Icon identifier")
    precipProb: float = Field(default=0, description="Precipitation probability in %")  # noqa: N815


class HourlyForecast(BaseModel):
    """Single hour of forecast."""

    model_config = ConfigDict(frozen=True)

    time: str = Field(..., description="Local date and time, YYYY-MM-DDTHH:MM:SS")
    temp: float | None = None
    precipProb: float = 0  # noqa: N815
    condition: str | None = None
    icon: str | None = None
    humidity: float | None = None
    windSpeed: float | None = None  # noqa: N815


class DailyForecast(BaseModel):
    """Single day of forecast."""

    model_config = ConfigDict(frozen=True)

    date: str | None = Field(default=None, description="Local date, YYYY-MM-DD")
    tempMax: float | None = None  # noqa: N815
    tempMin: float | None = None  # noqa: N815
    precipProb: float = 0  # noqa: N815
    condition: str | None = None
    icon: str | None = None
    humidity: float | None = None
    windSpeed: float | None = None  # noqa: N815


class WeatherSnapshot(BaseModel):
    """Weather API response."""

    model_config = ConfigDict(frozen=True)

    location: Location
    current: CurrentConditions
    hourly: list[HourlyForecast] = Field(default_factory=list, max_length=48)
    daily: list[DailyForecast] = Field(default_factory=list, max_length=7)
    cached: bool = Field(..., description="Whether this response was served from cache")
    timestamp: datetime = Field(..., description="Time this response was built")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error summary")
    message: str = Field(..., description="Error message")
    details: Any | None = Field(default=None, description="Upstream error payload")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")
    cacheConnected: bool = Field(..., description="Whether the cache store is connected")  # noqa: N815
    timestamp: datetime = Field(..., description="Time of the check")
