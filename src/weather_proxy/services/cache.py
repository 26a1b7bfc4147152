"""Redis-backed cache store for weather snapshots."""

from __future__ import annotations

from typing import Any

import structlog
from prometheus_client import Counter, Gauge
from redis import asyncio as aioredis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from weather_proxy.config import Settings

logger = structlog.get_logger()

# Metrics
cache_hits = Counter("cache_hits_total", "Total cache hits")
cache_misses = Counter("cache_misses_total", "Total cache misses")
cache_errors = Counter("cache_errors_total", "Total cache store errors", ["operation"])
cache_connected_gauge = Gauge("cache_connected", "Whether the cache store is connected")

# Errors after which the connection is considered lost for good
CONNECTION_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


class CacheStore:
    """Best-effort key/value cache on top of Redis.

    The store is connected once at startup. A missing URL or a failed
    connection leaves it disconnected for the rest of the process, and the
    service keeps answering from upstream. No call on this class raises.
    """

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        """Initialize store with settings and an optional pre-built client."""
        self._url = settings.redis_url
        self._socket_timeout = settings.cache_socket_timeout_seconds
        self._client: Any | None = client
        self._connected = False

    def _build_client(self) -> Any:
        return aioredis.from_url(
            self._url,
            decode_responses=True,
            socket_connect_timeout=self._socket_timeout,
            socket_timeout=self._socket_timeout,
            retry=Retry(NoBackoff(), 0),
            retry_on_timeout=False,
        )

    async def connect(self) -> None:
        """Open the connection to the store, or stay disconnected."""
        if self._client is None:
            if not self._url:
                logger.warning("No REDIS_URL provided, running without cache")
                return
            try:
                self._client = self._build_client()
            except (ValueError, RedisError) as e:
                logger.warning("Invalid Redis URL, running without cache", error=str(e))
                return

        try:
            await self._client.ping()
        except Exception as e:
            logger.warning("Redis connection failed, running without cache", error=str(e))
            await self._discard_client()
            return

        self._set_connected(True)
        logger.info("Redis connected")

    async def close(self) -> None:
        """Close the underlying connection."""
        self._set_connected(False)
        await self._discard_client()

    def is_connected(self) -> bool:
        """Return live connection state."""
        return self._connected

    async def get(self, key: str) -> str | None:
        """Get the stored value for key, or None on miss or failure."""
        if not self._connected:
            return None

        try:
            value: str | None = await self._client.get(key)
        except Exception as e:
            self._record_error("get", key, e)
            return None

        if value is None:
            cache_misses.inc()
            logger.info("Cache miss", cache_key=key)
            return None

        cache_hits.inc()
        logger.info("Cache hit", cache_key=key)
        return value

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Store value under key for ttl_seconds, replacing any previous entry."""
        if not self._connected:
            return False

        try:
            await self._client.setex(key, ttl_seconds, value)
        except Exception as e:
            self._record_error("set", key, e)
            return False

        logger.info("Cached response", cache_key=key, ttl_seconds=ttl_seconds)
        return True

    def _record_error(self, operation: str, key: str, error: Exception) -> None:
        cache_errors.labels(operation=operation).inc()
        logger.warning(
            "Cache operation failed",
            operation=operation,
            cache_key=key,
            error=str(error),
        )
        if isinstance(error, CONNECTION_ERRORS):
            self._set_connected(False)

    def _set_connected(self, connected: bool) -> None:
        self._connected = connected
        cache_connected_gauge.set(1 if connected else 0)

    async def _discard_client(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            await client.aclose()
        except Exception as e:
            logger.warning("Error closing Redis client", error=str(e))
