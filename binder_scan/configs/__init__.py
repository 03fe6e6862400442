"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
Each concern (vision model, card catalogs, server, tracing) has its own
settings class with an environment prefix.
"""

from binder_scan.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
