"""Application configuration."""

import os

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from clubcam.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    storage_bucket: str = "event-photos"
    nearby_radius_km: float = 25.0
    max_radius_km: float = 500.0
    fallback_latitude: float | None = None
    fallback_longitude: float | None = None
    download_timeout_seconds: float = 20.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def load_settings(**overrides: object) -> Settings:
    """Load settings, failing with ConfigurationError on missing backend values."""
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        missing = sorted(
            str(error["loc"][0]) for error in exc.errors() if error.get("loc")
        )
        raise ConfigurationError(
            f"Invalid Supabase configuration: {', '.join(missing)}"
        ) from exc
    if not settings.supabase_url.strip():
        raise ConfigurationError("Missing Supabase URL configuration")
    if not settings.supabase_anon_key.strip():
        raise ConfigurationError("Missing Supabase API key configuration")
    return settings
