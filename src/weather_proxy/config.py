"""Application configuration management."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Server settings
    app_host: str = Field(default="0.0.0.0", description="Server bind host")
    app_port: int = Field(
        default=3000,
        description="Server bind port",
        validation_alias=AliasChoices("app_port", "port"),
    )

    # Upstream API settings
    visual_crossing_api_key: str | None = Field(
        default=None,
        description="Visual Crossing API key, required for live fetches",
    )
    upstream_url: str = Field(
        default=(
            "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
        ),
        description="Visual Crossing Timeline API base URL",
    )
    upstream_timeout_seconds: float = Field(
        default=10.0,
        description="Upstream request timeout in seconds",
        ge=0.1,
        le=60.0,
    )

    # Cache settings
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL; caching is disabled when unset",
    )
    cache_ttl_seconds: int = Field(
        default=600,
        description="Cache TTL in seconds",
        ge=1,
        le=86400,
        validation_alias=AliasChoices("cache_ttl_seconds", "cache_ttl"),
    )
    cache_socket_timeout_seconds: float = Field(
        default=2.0,
        description="Redis connect and command timeout in seconds",
        gt=0,
        le=30.0,
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
