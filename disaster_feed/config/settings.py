"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the disaster-feed application.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., REDIS_URL).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # Redis (response cache + broadcast fan-out)
    redis_url: RedisDsn = Field(default="redis://localhost:6379/0")

    # Response cache
    cache_backend: Literal["redis", "memory"] = "memory"
    cache_ttl_seconds: int = Field(default=3600, ge=1)
    cache_key_prefix: str = "disaster_feed:"

    # Social providers (tried in this order when configured)
    twitter_bearer_token: str | None = None
    bluesky_access_token: str | None = None

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8001
    api_keys: str | None = None  # comma-separated; unset = dev mode
    cors_origins: str = "*"
    cors_allow_credentials: bool = False

    # Rate limiting
    rate_limit_enabled: bool = False
    rate_limit_default: str = "200/minute"
    rate_limit_mock: str = "1000/minute"
    rate_limit_storage_uri: str = "memory://"

    # WebSocket broadcaster
    ws_enabled: bool = True
    ws_max_connections: int = Field(default=500, ge=1)
    ws_heartbeat_seconds: int = Field(default=30, ge=1)
    broadcast_use_redis: bool = False

    # Observability
    metrics_port: int = 9100

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def twitter_configured(self) -> bool:
        """Check if the Twitter API is configured."""
        return bool(self.twitter_bearer_token)

    @property
    def bluesky_configured(self) -> bool:
        """Check if the Bluesky API is configured."""
        return bool(self.bluesky_access_token)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
