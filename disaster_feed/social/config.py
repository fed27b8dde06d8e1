"""Configuration for social report providers."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SocialConfig(BaseSettings):
    """Settings for social providers.

    Overridable via environment variables prefixed with SOCIAL_.
    Provider credentials live in the main Settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOCIAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    request_timeout_seconds: float = Field(default=15.0, gt=0)
    default_query: str = Field(
        default="disaster OR emergency",
        description="Provider search query when no keywords are given",
    )
