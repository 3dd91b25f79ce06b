"""
Network Configuration Constants

This module contains all constants related to outbound HTTP requests.
"""

from __future__ import annotations

from .system import BASE_SECOND


class NetworkConfig:
    """Network configuration constants."""

    # Timeout settings
    CONNECT_TIMEOUT = 10 * BASE_SECOND
    READ_TIMEOUT = 30 * BASE_SECOND
    DEFAULT_TIMEOUT = 15 * BASE_SECOND

    # User agent
    USER_AGENT = "PhotoScout/0.1.0 (https://github.com/photoscout/photoscout)"


class HTTPMethods:
    """HTTP method names."""

    GET = "GET"


class HTTPStatusCodes:
    """HTTP status code boundaries."""

    OK = 200
    MULTIPLE_CHOICES = 300
    BAD_REQUEST = 400
    NOT_FOUND = 404


class InstagramAPI:
    """Instagram API constants."""

    BASE_URL = "https://api.instagram.com/v1"
    USER_PATH = "/users/{user_id}/"
    RECENT_MEDIA_PATH = "/users/{user_id}/media/recent/"
    RECENT_MEDIA_COUNT = 20

    PARAM_ACCESS_TOKEN = "access_token"
    PARAM_CLIENT_ID = "client_id"
    PARAM_COUNT = "count"
    PARAM_MAX_ID = "max_id"


class InstrumentationEvents:
    """Instrumentation event names."""

    HTTP_REQUEST = "request.http"
    INDEX_SEARCH = "search.index"
    PROFILE_DISCOVERY = "discovery.profile"
    SECONDARY_SEARCH = "discovery.secondary_network"
