"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Variables are prefixed with ``UTERO_`` (e.g. ``UTERO_STORAGE_BACKEND``).
    """

    # --- App ---
    app_name: str = "Utero"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Storage ---
    storage_backend: str = "memory"  # memory | postgres
    database_url: str = ""  # postgres connection string for asyncpg
    storage_namespace: str = "utero"
    cycles_storage_key: str = "utero-cycles"
    logs_storage_key: str = "utero-logs"

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_prefix="UTERO_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
