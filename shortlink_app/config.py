from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"

    # Short URLs are built as {base_url}/{short_code}
    base_url: str = "http://127.0.0.1:8000"

    # Short code generation
    short_code_length: int = 6
    custom_code_min_length: int = 3
    custom_code_max_length: int = 20
    max_retries: int = 100
    short_code_strategy: str = "random"  # Options: "random", "base62"
    short_code_salt: int = 1256  # Counter offset for the base62 strategy

    # Expiry and quotas
    default_validity_minutes: int = 30
    max_active_urls_per_creator: int = 5

    # Click location lookup
    locator_backend: str = "mock"  # Options: "mock", "static"
    static_location: str = "Unknown"

    # Audit events
    event_sink_backend: str = "logging"  # Options: "logging", "memory", "null"

    # Expired URL cleanup (disabled when retention is None)
    expired_retention_minutes: Optional[int] = None
    sweeper_interval_seconds: int = 60

    # Browser clients allowed to call the API
    cors_origins: List[str] = ["*"]

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
