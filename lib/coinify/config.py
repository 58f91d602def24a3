"""
Configuration settings for the Coinify API client.
Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

DEFAULT_API_BASE_URL = "https://api.coinify.com"
REQUEST_TIMEOUT = 30.0  # Seconds


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Coinify API credentials (https://coinify.com/merchant/api)
    coinify_api_key: str = ""
    coinify_api_secret: str = ""  # Set via env: COINIFY_API_SECRET

    # Endpoint
    coinify_api_base_url: str = DEFAULT_API_BASE_URL  # No trailing slash
    coinify_request_timeout: float = REQUEST_TIMEOUT

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def has_credentials(self) -> bool:
        return bool(self.coinify_api_key and self.coinify_api_secret)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
