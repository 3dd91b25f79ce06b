"""Response caching middleware.

Serves repeated GET requests from the ``ResponseStore`` and records successful
live responses into it. The store is best effort: when it is unavailable the
request goes straight downstream and the failure is only logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable

from photoscout.services.response_store import ResponseStore
from photoscout.shared.cache_utils import CacheKeyNormalizer
from photoscout.shared.constants import Cache, CacheValidationConstants
from photoscout.shared.errors import CacheUnavailable
from photoscout.shared.models.http import CachedResponse, HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)


class CachingMiddleware:
    """Read-through cache for idempotent requests.

    Behaviour per request:

    - method not cacheable: passed downstream, store untouched
    - hit: response rebuilt from the stored status, headers and body with
      ``from_cache=True``; downstream is not called
    - miss: downstream is called once; a 2xx response is written once

    Args:
        store: Response store shared with the rest of the application
        normalizer: Derives the cache key from URL and parameters
        methods: HTTP methods eligible for caching
    """

    def __init__(
        self,
        store: ResponseStore,
        normalizer: CacheKeyNormalizer | None = None,
        methods: Iterable[str] = Cache.CACHEABLE_METHODS,
    ) -> None:
        self.store = store
        self.normalizer = normalizer or CacheKeyNormalizer()
        self.methods = frozenset(method.upper() for method in methods)

    def __call__(
        self,
        request: HTTPRequest,
        call_next: Callable[[HTTPRequest], HTTPResponse],
    ) -> HTTPResponse:
        if request.method not in self.methods:
            return call_next(request)

        key = self.normalizer(request.url, request.params)

        cached = self._read(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key[: CacheValidationConstants.KEY_PREFIX_LOG_LENGTH])
            return cached.to_response(url=request.sanitized_url)

        response = call_next(request)
        if response.ok:
            self._write(key, response)
        return response

    def _read(self, key: str) -> CachedResponse | None:
        try:
            return self.store.read(key)
        except CacheUnavailable as e:
            logger.warning("Response cache read skipped: %s", e)
            return None

    def _write(self, key: str, response: HTTPResponse) -> None:
        try:
            self.store.write(key, CachedResponse.from_response(response))
        except CacheUnavailable as e:
            logger.warning("Response cache write skipped: %s", e)
