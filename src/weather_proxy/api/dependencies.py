"""FastAPI dependencies."""

from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, Request

from weather_proxy.config import Settings
from weather_proxy.services.cache import CacheStore
from weather_proxy.services.visual_crossing import VisualCrossingClient
from weather_proxy.services.weather import WeatherService


@dataclass
class ServiceContext:
    """Process-wide collaborators shared by all requests."""

    settings: Settings
    cache: CacheStore
    client: VisualCrossingClient
    weather: WeatherService = field(init=False)

    def __post_init__(self) -> None:
        self.weather = WeatherService(self.cache, self.client, self.settings.cache_ttl_seconds)

    @classmethod
    def from_settings(cls, settings: Settings, cache_client: Any | None = None) -> "ServiceContext":
        """Build the context, optionally around a pre-built Redis client."""
        return cls(
            settings=settings,
            cache=CacheStore(settings, client=cache_client),
            client=VisualCrossingClient(settings),
        )

    async def startup(self) -> None:
        """Connect long-lived resources."""
        await self.cache.connect()

    async def shutdown(self) -> None:
        """Release long-lived resources."""
        await self.cache.close()


def get_services(request: Request) -> ServiceContext:
    """Get the service context owned by the application."""
    services: ServiceContext = request.app.state.services
    return services


def get_cache_store(services: Annotated[ServiceContext, Depends(get_services)]) -> CacheStore:
    """Get cache store instance."""
    return services.cache


def get_weather_service(
    services: Annotated[ServiceContext, Depends(get_services)],
) -> WeatherService:
    """Get weather service instance."""
    return services.weather


# Type aliases for dependency injection
CacheDep = Annotated[CacheStore, Depends(get_cache_store)]
WeatherServiceDep = Annotated[WeatherService, Depends(get_weather_service)]
