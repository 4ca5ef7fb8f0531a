"""
Centralized configuration for the catalog API.

All environment variables and settings should be defined here
to avoid duplication across modules.
"""
import os
from functools import lru_cache

from nativedb.catalog.config import DEFAULT_CONFIG_PATH


class Settings:
    """Application settings loaded from environment variables."""

    # CORS - comma-separated list of allowed origins
    ALLOWED_ORIGINS: list = os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:8090,http://localhost:5173,http://127.0.0.1:8090"
    ).split(",")

    # Source config (catalog_sources.json)
    CONFIG_PATH: str = os.environ.get("NATIVEDB_CONFIG", str(DEFAULT_CONFIG_PATH))

    # Source to load at startup; empty means wait for POST /api/catalog/reload
    DEFAULT_SOURCE: str = os.environ.get("NATIVEDB_DEFAULT_SOURCE", "")

    # API key for protecting the reload endpoint (optional)
    API_KEY: str = os.environ.get("NATIVEDB_API_KEY", "")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
