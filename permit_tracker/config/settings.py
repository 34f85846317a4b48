"""
Application Settings.

All static configuration, from .env / environment variables.
Runtime-editable values live in the settings table instead.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # --- Database ---
    database_url: str = "sqlite:///permit_tracker.db"

    # --- Uploads ---
    upload_dir: str = "uploads"
    max_file_size: int = 10 * 1024 * 1024
    allowed_file_extensions: list[str] = [
        "pdf", "jpg", "jpeg", "png", "gif", "doc", "docx", "xls", "xlsx", "txt",
    ]

    # --- Backups ---
    backup_dir: str = "backups"
    backup_retention_days: int = 30

    # --- Auth (API key header; empty disables auth) ---
    api_key: str = ""
    admin_api_key: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Settings singleton."""
    return Settings()
