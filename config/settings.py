"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (storage uploads)"
    )

    # ===================
    # ADMIN SESSION
    # ===================
    admin_token: Optional[str] = Field(
        None,
        description="Shared secret expected in the X-Admin-Token header"
    )

    # ===================
    # PEXELS
    # ===================
    pexels_api_key: Optional[str] = Field(
        None,
        description="Pexels API key for photo search"
    )
    pexels_api_url: str = Field(
        default="https://api.pexels.com/v1/search",
        description="Pexels search endpoint"
    )
    photo_search_timeout_seconds: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Timeout for the photo search request"
    )

    # ===================
    # IMPORT WIZARD
    # ===================
    photo_bucket: str = Field(
        default="product-photos",
        description="Storage bucket for catalog item photos"
    )
    wizard_session_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=24 * 60,
        description="Minutes an idle wizard session is kept in memory"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def pexels_configured(self) -> bool:
        """Check if the Pexels API key is set."""
        return bool(self.pexels_api_key)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
