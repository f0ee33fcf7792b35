"""
Application configuration using pydantic-settings.

Loads configuration from environment variables with sensible defaults.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Language model
    openai_api_key: Optional[str] = None
    oracle_model: str = "gpt-4o"
    oracle_timeout_seconds: float = 120.0
    extraction_temperature: float = 0.1
    analysis_temperature: float = 0.2

    # Uploads
    max_upload_size_mb: int = 4
    max_text_chars: int = 500_000

    # Rate limiting
    rate_limit_enabled: bool = True
    extract_rate_limit: str = "30/hour"

    # Application
    debug: bool = False
    log_level: str = "INFO"

    @property
    def max_upload_size_bytes(self) -> int:
        """Get maximum upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
