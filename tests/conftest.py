"""Test fixtures."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from cachetools import TLRUCache
from fastapi import FastAPI
from fastapi.testclient import TestClient

from weather_proxy.api.dependencies import ServiceContext
from weather_proxy.config import Settings
from weather_proxy.main import create_app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with per-key expiry."""

    def __init__(self, clock: FakeClock) -> None:
        self._store: TLRUCache[str, tuple[str, int]] = TLRUCache(
            maxsize=1024,
            ttu=lambda _key, value, now: now + value[1],
            timer=clock,
        )
        self.closed = False

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        entry = self._store.get(key)
        return entry[0] if entry is not None else None

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._store[key] = (value, ttl)
        return True

    async def aclose(self) -> None:
        self.closed = True

    def keys(self) -> list[str]:
        return list(self._store.keys())

    def stored(self, key: str) -> str | None:
        entry = self._store.get(key)
        return entry[0] if entry is not None else None

    def put(self, key: str, value: str, ttl: int) -> None:
        self._store[key] = (value, ttl)


class BrokenRedis:
    """Redis double whose commands fail with a configurable error."""

    def __init__(self, error: Exception, ping_error: Exception | None = None) -> None:
        self.error = error
        self.ping_error = ping_error
        self.closed = False

    async def ping(self) -> bool:
        if self.ping_error is not None:
            raise self.ping_error
        return True

    async def get(self, key: str) -> str | None:
        raise self.error

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        raise self.error

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        visual_crossing_api_key="test-key",
        redis_url=None,
        upstream_timeout_seconds=1.0,
        cache_ttl_seconds=600,
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture
def clock() -> FakeClock:
    """Create controllable clock for cache expiry."""
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    """Create in-memory Redis double."""
    return FakeRedis(clock)


@pytest.fixture
def app(settings: Settings, fake_redis: FakeRedis) -> FastAPI:
    """Create test application backed by the Redis double."""
    services = ServiceContext.from_settings(settings, cache_client=fake_redis)
    return create_app(settings, services)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create test client with lifespan events."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def uncached_client(settings: Settings) -> Iterator[TestClient]:
    """Create test client for an app without any cache configured."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_timeline() -> Callable[..., dict[str, Any]]:
    """Factory for Visual Crossing timeline payloads."""

    def factory(hours_per_day: list[int] | None = None, days: int | None = None) -> dict[str, Any]:
        if hours_per_day is None:
            hours_per_day = [24] * (days or 3)
        return {
            "resolvedAddress": "Tokyo, Japan",
            "timezone": "Asia/Tokyo",
            "currentConditions": {
                "datetime": "12:00:00",
                "temp": 18.4,
                "feelslike": 17.9,
                "humidity": 62.0,
                "windspeed": 11.2,
                "conditions": "Partially cloudy",
                "icon": "partly-cloudy-day",
                "precipprob": None,
            },
            "days": [
                {
                    "datetime": f"2024-05-{day + 1:02d}",
                    "tempmax": 22.0 + day,
                    "tempmin": 14.0 + day,
                    "precipprob": 10.0 * day,
                    "conditions": "Clear",
                    "icon": "clear-day",
                    "humidity": 55.0,
                    "windspeed": 9.0,
                    "hours": [
                        {
                            "datetime": f"{hour:02d}:00:00",
                            "temp": 15.0 + hour / 10,
                            "precipprob": hour,
                            "conditions": "Clear",
                            "icon": "clear-night",
                            "humidity": 70.0,
                            "windspeed": 5.0,
                        }
                        for hour in range(count)
                    ],
                }
                for day, count in enumerate(hours_per_day)
            ],
        }

    return factory
