"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="VL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Vehicle Locator API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied at startup.")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Geocoding
    google_maps_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("VL_GOOGLE_MAPS_API_KEY", "GOOGLE_MAPS_API_KEY"),
        description="Google Maps Geocoding API key. When absent only the fallback table is used.",
    )
    geocoding_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/geocode/json",
        description="Geocoding endpoint queried for ZIP lookups.",
    )
    geocoding_timeout_seconds: float = Field(default=12.0, gt=0.0)
    geocode_cache_ttl_hours: float = Field(default=24.0, gt=0.0)
    fallback_cache_ttl_ratio: float = Field(
        default=0.2,
        gt=0.0,
        le=1.0,
        description="Fraction of the cache TTL granted to entries resolved from the fallback table.",
    )
    batch_max_zips: int = Field(default=50, ge=1)
    batch_delay_seconds: float = Field(default=0.1, ge=0.0)

    # Vehicle listing
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    mock_inventory_size: int = Field(default=2_000, ge=0)
    mock_inventory_seed: int = Field(default=42)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("google_maps_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


settings = Settings()
