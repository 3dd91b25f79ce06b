"""PhotoScout Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config, configure_logging
- Domain models: App, Logging, API and Cache settings
"""

from __future__ import annotations

from .loader import configure_logging, get_config, load_settings, reload_config
from .models import (
    APISettings,
    AppSettings,
    CacheSettings,
    InstagramSettings,
    LoggingSettings,
    SearchIndexSettings,
    TwitterSettings,
)
from .models.settings import Settings

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "InstagramSettings",
    "LoggingSettings",
    "SearchIndexSettings",
    "Settings",
    "TwitterSettings",
    "configure_logging",
    "get_config",
    "load_settings",
    "reload_config",
]
