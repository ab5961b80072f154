"""Application configuration via environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMS_",
    )

    # App
    app_name: str = "IMS Sync"
    debug: bool = False
    log_level: str = "INFO"
    secret_key: str = "change-me-in-production"

    # Local cache
    database_url: str = "sqlite:///./ims_cache.db"

    # Remote sheet store (Apps Script web app URL, empty = sync disabled)
    sync_endpoint_url: str = ""
    sync_timeout_seconds: float = 30.0
    sync_dispatcher: Literal["thread", "celery"] = "thread"
    sync_push_workers: int = 4
    sync_flush_timeout_seconds: float = 5.0

    # Celery (only used when sync_dispatcher == "celery")
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/0"

    # Privileged tenant, re-asserted on every startup
    admin_username: str = "admin"
    admin_password: str = "admin123"
    admin_company_name: str = "System Admin"

    # Auth
    access_token_expire_minutes: int = 60 * 24  # 24 hours


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
