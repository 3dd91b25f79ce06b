"""Configuration domain models."""

from __future__ import annotations

from .api_settings import (
    APISettings,
    InstagramSettings,
    SearchIndexSettings,
    TwitterSettings,
)
from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CacheSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "InstagramSettings",
    "LoggingSettings",
    "SearchIndexSettings",
    "Settings",
    "TwitterSettings",
]
