"""
Cache Configuration Constants

This module provides the response cache constants: TTLs per runtime
environment, namespaces per external service and validation limits.
"""

from __future__ import annotations

from .system import BASE_DAY, BASE_HOUR, BASE_MINUTE


class Cache:
    """Response cache configuration."""

    # Development/test TTL and the shorter production TTL
    TTL = BASE_HOUR  # 1 hour
    PRODUCTION_TTL = 3 * BASE_MINUTE  # 3 minutes

    # Volatile query parameters stripped from cache keys
    VOLATILE_PARAMS = ("access_token",)

    # Path segment marking a resource owned by the authenticated caller
    SELF_SEGMENT = "self"

    # Only these methods are ever cached
    CACHEABLE_METHODS = ("GET",)


class CacheNamespace:
    """Namespaces separating cached responses per external service."""

    INSTAGRAM = "instagram"
    SEARCH_INDEX = "indextank"
    TWITTER = "twitter"


class CacheValidationConstants:
    """Cache validation constants."""

    MIN_TTL = 1
    MAX_TTL = 365 * BASE_DAY  # 1 year maximum

    HASH_PREFIX_LOG_LENGTH = 16
    KEY_PREFIX_LOG_LENGTH = 80
