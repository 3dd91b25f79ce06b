"""Shared model exports."""

from .http import CachedResponse, HTTPRequest, HTTPResponse
from .instagram import InstagramProfile, MediaFeed

__all__ = [
    "CachedResponse",
    "HTTPRequest",
    "HTTPResponse",
    "InstagramProfile",
    "MediaFeed",
]
