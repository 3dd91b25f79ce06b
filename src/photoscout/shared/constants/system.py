"""
System Constants

Application identity and runtime environment names.
"""

from __future__ import annotations

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Application:
    """Application identity constants."""

    NAME = "PhotoScout"
    VERSION = "0.1.0"
    LOGGER_NAME = "photoscout"


class Environment:
    """Runtime environment names.

    Only ``PRODUCTION`` changes behavior (it shortens the response cache TTL).
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

    ALL = (DEVELOPMENT, PRODUCTION, TEST)


class FileSystem:
    """File system locations."""

    HOME_DIR = ".photoscout"
    CACHE_DIRECTORY = "cache"
    CACHE_DATABASE = "responses.db"
    CONFIG_FILE = "config.toml"
    ENV_FILE = ".env"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
