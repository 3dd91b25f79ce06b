"""
PhotoScout Constants Module

This module provides centralized constants for the PhotoScout application.
All magic values and configuration constants are defined here to ensure
consistency across the codebase.
"""

from .cache import Cache, CacheNamespace, CacheValidationConstants
from .discovery import DiscoveryPatterns, TwitterAPI
from .network import (
    HTTPMethods,
    HTTPStatusCodes,
    InstagramAPI,
    InstrumentationEvents,
    NetworkConfig,
)
from .search import (
    ImageVariants,
    SearchDocumentKeys,
    SearchIndex,
    SearchResponseKeys,
)
from .system import (
    BASE_DAY,
    BASE_HOUR,
    BASE_MINUTE,
    BASE_SECOND,
    Application,
    Environment,
    FileSystem,
    Logging,
)

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "Application",
    "Cache",
    "CacheNamespace",
    "CacheValidationConstants",
    "DiscoveryPatterns",
    "Environment",
    "FileSystem",
    "HTTPMethods",
    "HTTPStatusCodes",
    "ImageVariants",
    "InstagramAPI",
    "InstrumentationEvents",
    "Logging",
    "NetworkConfig",
    "SearchDocumentKeys",
    "SearchIndex",
    "SearchResponseKeys",
    "TwitterAPI",
]
