"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from binder_scan.configs.base import BaseSettings
from binder_scan.configs.catalog import CatalogSettings
from binder_scan.configs.observability import ObservabilitySettings
from binder_scan.configs.server import ServerSettings
from binder_scan.configs.vision import VisionSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    service_name: str = "binder-scan-api"
    version: str = "0.1.0"

    # Aggregated settings
    vision: VisionSettings = Field(default_factory=VisionSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from binder_scan.configs import get_settings
        settings = get_settings()
        model = settings.vision.model
    """
    return Settings()
