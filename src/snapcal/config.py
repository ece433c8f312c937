"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    local_storage_dir: Path = Path(".snapcal")
    local_storage_quota_bytes: int = 5 * 1024 * 1024
    entries_cache_ttl_seconds: int = 180
    settings_cache_ttl_seconds: int = 600
    retention_days: int = 7
    remote_list_limit: int = 200
    migration_chunk_size: int = 5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="SNAPCAL_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
