"""
Client configuration using Pydantic Settings.

Loads defaults for the S5 connection from environment variables.
Explicit constructor arguments always take precedence.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://s5.host/api/v1"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # S5 API
    S5_BASE_URL: str = DEFAULT_BASE_URL
    S5_API_KEY: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
