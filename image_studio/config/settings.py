"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Provider credential (required by the relay service at startup)
    api_key: str | None = None

    # Model Configuration
    image_model: str = "imagen-3.0-generate-002"
    text_model: str = "gemini-2.5-flash"
    image_output_mime_type: str = "image/jpeg"

    # Retry Configuration
    provider_max_retries: int = 0  # Extra attempts for rate-limited provider calls

    # Relay Service Configuration
    relay_service_host: str = "0.0.0.0"
    relay_service_port: int = 8000

    # Client Configuration
    relay_base_url: str = "http://localhost:8000"
    relay_timeout_seconds: float | None = None  # None waits for the relay indefinitely

    # History Configuration
    history_dir: str = ".image_studio"
    history_storage_key: str = "pelv-image-gen-history"
    history_max_items: int = 50
    history_fallback_items: int = 10  # Slice persisted when the quota is exhausted
    history_quota_bytes: int = 5 * 1024 * 1024

    # Rate limit countdown
    rate_limit_cooldown_seconds: int = 60

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
