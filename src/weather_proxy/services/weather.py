"""Weather service orchestrating cache and upstream client."""

from datetime import UTC, datetime

import structlog
from pydantic import ValidationError

from weather_proxy.api.schemas import WeatherSnapshot
from weather_proxy.services.cache import CacheStore
from weather_proxy.services.coordinates import Coordinate, cache_key, round_coordinate
from weather_proxy.services.transform import transform_weather
from weather_proxy.services.visual_crossing import VisualCrossingClient

logger = structlog.get_logger()


class WeatherService:
    """Service for fetching weather data with caching."""

    def __init__(
        self,
        cache: CacheStore,
        client: VisualCrossingClient,
        ttl_seconds: int,
    ) -> None:
        """Initialize service with cache, client and entry TTL."""
        self._cache = cache
        self._client = client
        self._ttl_seconds = ttl_seconds

    async def get_weather(self, coord: Coordinate) -> WeatherSnapshot:
        """Get weather snapshot for a validated coordinate.

        Checks cache first, fetches from upstream on cache miss and stores
        the result. Cache failures only cost an upstream call.

        Args:
            coord: Validated, unrounded coordinate

        Returns:
            Weather snapshot with cached flag and timestamp of this response

        Raises:
            CredentialMissingError: If a fetch is needed and no API key is set
            UpstreamError: If the upstream fetch fails
        """
        rounded = round_coordinate(coord)
        key = cache_key(rounded)

        cached = await self._lookup(key)
        if cached is not None:
            return cached

        logger.info(
            "Fetching from upstream",
            lat=rounded.latitude,
            lon=rounded.longitude,
            cache_key=key,
        )
        raw = await self._client.fetch_timeline(rounded)
        snapshot = transform_weather(raw, rounded, cached=False)

        if self._cache.is_connected():
            await self._cache.set_with_expiry(
                key, snapshot.model_dump_json(), self._ttl_seconds
            )

        return snapshot

    async def _lookup(self, key: str) -> WeatherSnapshot | None:
        if not self._cache.is_connected():
            return None

        payload = await self._cache.get(key)
        if payload is None:
            return None

        try:
            stored = WeatherSnapshot.model_validate_json(payload)
        except ValidationError as e:
            logger.warning("Discarding undecodable cache entry", cache_key=key, error=str(e))
            return None

        return stored.model_copy(update={"cached": True, "timestamp": datetime.now(UTC)})
