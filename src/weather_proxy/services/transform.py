"""Mapping of Visual Crossing payloads onto the snapshot schema."""

from datetime import UTC, datetime
from typing import Any

from weather_proxy.api.schemas import (
    CurrentConditions,
    DailyForecast,
    HourlyForecast,
    Location,
    WeatherSnapshot,
)
from weather_proxy.services.coordinates import Coordinate

MAX_HOURLY = 48
MAX_DAILY = 7


def _hourly(days: list[dict[str, Any]]) -> list[HourlyForecast]:
    hourly: list[HourlyForecast] = []
    for day in days:
        for hour in day.get("hours") or []:
            if len(hourly) >= MAX_HOURLY:
                return hourly
            hourly.append(
                HourlyForecast(
                    time=f"{day.get('datetime')}T{hour.get('datetime')}",
                    temp=hour.get("temp"),
                    precipProb=hour.get("precipprob") or 0,
                    condition=hour.get("conditions"),
                    icon=hour.get("icon"),
                    humidity=hour.get("humidity"),
                    windSpeed=hour.get("windspeed"),
                )
            )
    return hourly


def _daily(days: list[dict[str, Any]]) -> list[DailyForecast]:
    return [
        DailyForecast(
            date=day.get("datetime"),
            tempMax=day.get("tempmax"),
            tempMin=day.get("tempmin"),
            precipProb=day.get("precipprob") or 0,
            condition=day.get("conditions"),
            icon=day.get("icon"),
            humidity=day.get("humidity"),
            windSpeed=day.get("windspeed"),
        )
        for day in days[:MAX_DAILY]
    ]


def transform_weather(
    raw: dict[str, Any],
    coord: Coordinate,
    cached: bool,
    retrieved_at: datetime | None = None,
) -> WeatherSnapshot:
    """Build a snapshot from a raw Visual Crossing timeline response.

    Hourly records are collected across day buckets in order and cut off
    after the first 48; daily records are the first 7 days.

    Args:
        raw: Decoded upstream response body
        coord: Rounded coordinate the data was fetched for
        cached: Value for the snapshot's cached flag
        retrieved_at: Snapshot timestamp, defaults to now

    Returns:
        Weather snapshot
    """
    current = raw.get("currentConditions") or {}
    days = raw.get("days") or []

    return WeatherSnapshot(
        location=Location(
            lat=coord.latitude,
            lon=coord.longitude,
            address=raw.get("resolvedAddress"),
            timezone=raw.get("timezone"),
        ),
        current=CurrentConditions(
            temp=current.get("temp"),
            feelsLike=current.get("feelslike"),
            humidity=current.get("humidity"),
            windSpeed=current.get("windspeed"),
            condition=current.get("conditions"),
            icon=current.get("icon"),
            precipProb=current.get("precipprob") or 0,
        ),
        hourly=_hourly(days),
        daily=_daily(days),
        cached=cached,
        timestamp=retrieved_at or datetime.now(UTC),
    )
