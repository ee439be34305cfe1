"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "StockDash Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # SQLite (local persistence)
    sqlite_path: Optional[str] = None  # Defaults to ./data/stockdash.db

    # Redis
    redis_url: str = "redis://localhost:6379"

    # CORS (Frontend URLs)
    allowed_origins: list[str] = [
        "https://stock-dashboard-1-lk6g.onrender.com",
        "http://localhost:5173",
    ]

    # Historical data
    history_start_date: str = "2020-01-01"  # Epoch for full-history fetches
    freshness_hours: float = 24.0
    stats_window: int = 252  # Trading days in a year
    fetch_timeout_seconds: float = 30.0

    # Composed series cache
    enable_series_cache: bool = True
    series_cache_ttl_seconds: int = 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
