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
    # SUPABASE (DESTINATION)
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
        description="Supabase service role key (required for reset operations)"
    )
    supabase_probe_table: str = Field(
        default="products",
        min_length=1,
        description="Table read by the connection probe"
    )
    reset_sentinel_id: str = Field(
        default="00000000-0000-0000-0000-000000000000",
        description="Id no row ever has; deletes use `id <> sentinel` to match every row"
    )

    # ===================
    # LEGACY STORE (FIREBASE)
    # ===================
    legacy_backend: str = Field(
        default="retired",
        pattern="^(firebase|retired)$",
        description="Legacy document store variant"
    )
    firebase_credentials_path: Optional[str] = Field(
        None,
        description="Path to the Firebase service account JSON"
    )
    firebase_project_id: Optional[str] = Field(
        None,
        description="Firebase project id"
    )
    firebase_storage_bucket: Optional[str] = Field(
        None,
        description="Default Firebase storage bucket"
    )
    firebase_probe_collection: str = Field(
        default="products",
        min_length=1,
        description="Collection read by the connection probe"
    )

    # ===================
    # LOCAL CACHE
    # ===================
    local_cache_path: str = Field(
        default="data/local_cache.json",
        description="JSON export of the client-side key-value cache"
    )
    local_cache_products_key: str = Field(
        default="products",
        description="Cache key holding product records"
    )
    local_cache_deliveries_key: str = Field(
        default="deliveries",
        description="Cache key holding delivery records"
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
    def admin_configured(self) -> bool:
        """Check if the service role key is available."""
        return bool(self.supabase_service_key)

    @property
    def default_bucket_name(self) -> Optional[str]:
        """Configured bucket, else the project's appspot bucket."""
        if self.firebase_storage_bucket:
            return self.firebase_storage_bucket
        if self.firebase_project_id:
            return f"{self.firebase_project_id}.appspot.com"
        return None


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
