"""Request pipeline composition.

A pipeline is an ordered list of middlewares wrapped around a terminal
transport. The first middleware is the outermost one: it sees the request
first and the response last.

Example:
    >>> pipeline = build_pipeline(
    ...     RequestsTransport(),
    ...     store=store,
    ...     instrumenter=instrumenter,
    ...     namespace="instagram",
    ... )
    >>> pipeline.get("https://api.instagram.com/v1/users/42/").json()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from photoscout.services.http.caching import CachingMiddleware
from photoscout.services.http.instrumentation import InstrumentationMiddleware
from photoscout.services.http.status import RaiseForStatusMiddleware
from photoscout.services.response_store import ResponseStore
from photoscout.shared.cache_utils import CacheKeyNormalizer
from photoscout.shared.constants import HTTPMethods
from photoscout.shared.instrumentation import Instrumenter
from photoscout.shared.models.http import HTTPRequest, HTTPResponse
from photoscout.shared.protocols.services import Middleware, RequestExecutor

logger = logging.getLogger(__name__)


def compose(middlewares: Sequence[Middleware], terminal: RequestExecutor) -> RequestExecutor:
    """Fold middlewares around a terminal executor, first one outermost."""
    pipeline: Callable[[HTTPRequest], HTTPResponse] = terminal
    for middleware in reversed(middlewares):
        next_pipeline = pipeline

        def _wrapped(
            request: HTTPRequest,
            *,
            _mw: Middleware = middleware,
            _n: Callable[[HTTPRequest], HTTPResponse] = next_pipeline,
        ) -> HTTPResponse:
            return _mw(request, _n)

        pipeline = _wrapped
    return pipeline


class RequestPipeline:
    """An explicit middleware stack in front of a transport.

    Attributes:
        middlewares: Middlewares, outermost first
        transport: Terminal executor
        namespace: Service namespace stamped on requests that carry none
    """

    def __init__(
        self,
        middlewares: Sequence[Middleware],
        transport: RequestExecutor,
        namespace: str | None = None,
    ) -> None:
        self.middlewares = tuple(middlewares)
        self.transport = transport
        self.namespace = namespace
        self._handler = compose(self.middlewares, transport)

    def execute(self, request: HTTPRequest) -> HTTPResponse:
        """Run a request through every middleware and the transport."""
        if request.namespace is None and self.namespace is not None:
            request.namespace = self.namespace
        return self._handler(request)

    __call__ = execute

    def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        return self.execute(
            HTTPRequest(
                method=HTTPMethods.GET,
                url=url,
                params=dict(params or {}),
                headers=dict(headers or {}),
            )
        )

    def __repr__(self) -> str:
        names = " -> ".join(type(mw).__name__ for mw in self.middlewares)
        return f"RequestPipeline({names} -> {type(self.transport).__name__})"


def build_pipeline(
    transport: RequestExecutor,
    *,
    store: ResponseStore | None = None,
    instrumenter: Instrumenter | None = None,
    normalizer: CacheKeyNormalizer | None = None,
    namespace: str | None = None,
    outer: Sequence[Middleware] = (),
    raise_for_status: bool = True,
) -> RequestPipeline:
    """Assemble the standard pipeline.

    Order, outermost first: ``outer`` middlewares (credentials), then
    instrumentation, caching, status checking and finally the transport.
    Instrumentation sits outside caching so that cache hits are observed;
    status checking sits inside caching so that error responses are never
    stored.

    Args:
        transport: Terminal executor
        store: Response store; caching is skipped when None
        instrumenter: Event dispatcher; instrumentation is skipped when None
        normalizer: Cache key normalizer for the caching stage
        namespace: Service namespace for requests and events
        outer: Middlewares placed in front of everything else
        raise_for_status: Convert 4xx/5xx responses into UpstreamError

    Returns:
        The composed pipeline
    """
    middlewares: list[Middleware] = list(outer)
    if instrumenter is not None:
        middlewares.append(InstrumentationMiddleware(instrumenter, namespace=namespace))
    if store is not None:
        middlewares.append(CachingMiddleware(store, normalizer))
    if raise_for_status:
        middlewares.append(RaiseForStatusMiddleware())

    pipeline = RequestPipeline(middlewares, transport, namespace=namespace)
    logger.debug("Built %r", pipeline)
    return pipeline
