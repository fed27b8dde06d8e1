"""Configuration for official update retrieval."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OfficialUpdatesConfig(BaseSettings):
    """Settings for live scraping.

    Overridable via environment variables prefixed with OFFICIAL_.
    """

    model_config = SettingsConfigDict(
        env_prefix="OFFICIAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    scraping_enabled: bool = Field(
        default=False,
        description="Scrape source websites; fixtures are used when disabled",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "Mozilla/5.0 (compatible; DisasterResponseBot/1.0)"
    max_content_length: int = Field(
        default=500,
        ge=1,
        description="Scraped content is truncated to this many characters",
    )

