"""Application configuration."""

import os
from enum import StrEnum

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class StorageBackend(StrEnum):
    """Where profiles, food entries and fasts are persisted."""

    LOCAL = "local"
    SUPABASE = "supabase"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: StorageBackend = StorageBackend.LOCAL
    supabase_url: str | None = None
    supabase_key: str | None = None
    local_storage_path: str = ".keto_tracker/storage.json"
    default_timezone: str = "UTC"
    debug_mode: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def require_supabase_credentials(settings: Settings) -> tuple[str, str]:
    """Return the Supabase URL and key, failing if either is unset."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_KEY are required for the supabase backend"
        )
    return settings.supabase_url, settings.supabase_key
