"""Cache key utilities for outbound HTTP request normalization.

This module derives stable cache keys from HTTP requests. Identical logical
requests produce identical keys regardless of the order in which query
parameters were supplied, and volatile credentials are stripped from the key
unless the request targets a resource owned by the authenticated caller.

Key Features:
    - Query parameters merged from the URL and the request, then sorted
    - Access token removal outside self-scoped paths
    - SHA-256 hash generation for indexed storage

Example:
    >>> normalize_request_key("https://api.example.com/v1/users/42/", {"access_token": "abc", "count": 20})
    '/v1/users/42/?count=20'
    >>> normalize_request_key("https://api.example.com/v1/users/self/feed", {"access_token": "abc"})
    '/v1/users/self/feed?access_token=abc'
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Union
from urllib.parse import parse_qsl, urlencode, urlsplit

from photoscout.shared.constants import Cache

QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]], None]


def _param_pairs(params: QueryParams) -> list[tuple[str, str]]:
    """Flatten query parameters into string pairs.

    Sequence values expand into repeated parameters; None values are dropped.
    """
    if not params:
        return []

    items: Iterable[tuple[str, Any]] = (
        params.items() if isinstance(params, Mapping) else params
    )

    pairs: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), str(v)) for v in value if v is not None)
        else:
            pairs.append((str(key), str(value)))
    return pairs


def canonical_query(
    url: str,
    params: QueryParams = None,
    *,
    drop: Iterable[str] = (),
) -> str:
    """Build a canonical, sorted query string.

    Args:
        url: Request URL, possibly carrying its own query string
        params: Additional request parameters
        drop: Parameter names to remove

    Returns:
        URL-encoded query string sorted by (name, value)
    """
    dropped = set(drop)
    pairs = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    pairs.extend(_param_pairs(params))
    kept = sorted((k, v) for k, v in pairs if k not in dropped)
    return urlencode(kept)


def is_self_scoped(path: str, segment: str = Cache.SELF_SEGMENT) -> bool:
    """Check whether a URL path addresses the authenticated caller's resource.

    Args:
        path: URL path, e.g. ``/v1/users/self/media/recent``
        segment: Path segment that marks caller-owned resources

    Returns:
        True if any path segment equals ``segment``
    """
    return segment in path.split("/")


class CacheKeyNormalizer:
    """Derives canonical cache keys from requests.

    The key is the request URI (path plus sorted query string). Outside
    self-scoped paths the volatile parameters are removed, so requests that
    differ only by access token share one cache entry. On self-scoped paths
    the token identifies the resource and stays in the key.

    Args:
        volatile_params: Query parameter names stripped from keys
        self_segment: Path segment marking caller-owned resources
    """

    def __init__(
        self,
        volatile_params: Iterable[str] = Cache.VOLATILE_PARAMS,
        self_segment: str = Cache.SELF_SEGMENT,
    ) -> None:
        self.volatile_params = tuple(volatile_params)
        self.self_segment = self_segment

    def normalize(self, url: str, params: QueryParams = None) -> str:
        """Return the canonical cache key for a request.

        Args:
            url: Request URL
            params: Request query parameters

        Returns:
            Cache key of the form ``<path>?<sorted query>`` (no ``?`` when
            the query is empty)
        """
        path = urlsplit(url).path or "/"
        drop: tuple[str, ...] = (
            () if is_self_scoped(path, self.self_segment) else self.volatile_params
        )
        query = canonical_query(url, params, drop=drop)
        return f"{path}?{query}" if query else path

    __call__ = normalize


def normalize_request_key(
    url: str,
    params: QueryParams = None,
    volatile_params: Iterable[str] = Cache.VOLATILE_PARAMS,
) -> str:
    """Convenience wrapper around CacheKeyNormalizer.normalize."""
    return CacheKeyNormalizer(volatile_params).normalize(url, params)


def hash_cache_key(key: str) -> str:
    """Generate the SHA-256 hash used to index a cache key.

    Args:
        key: Cache key string

    Returns:
        64 character hex digest
    """
    return hashlib.sha256(key.encode("utf-8")).hexdigest()
