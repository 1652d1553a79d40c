"""
Centralized configuration for the Tavern admin backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SMTP_*, SUPABASE_*).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Tavern Admin API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:8000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # User data layout
    data_root: Path = Path("data")
    default_user_handle: str = "default-user"
    template_user_handle: str = "default-template"

    # Account store
    account_store_backend: Literal["file", "supabase", "memory"] = "file"
    account_store_table: str = "kv_store"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # JWT signing secret shared with the chat frontend
    jwt_secret: str = ""

    # Inactive user cleanup
    scan_concurrency: int = 8
    min_confirmation_token_length: int = 8

    # Email notifications
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    email_from: str = ""


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
