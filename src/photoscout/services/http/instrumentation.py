"""Request instrumentation middleware."""

from __future__ import annotations

from typing import Callable

from photoscout.shared.constants import InstrumentationEvents
from photoscout.shared.errors import UpstreamError
from photoscout.shared.instrumentation import Instrumenter
from photoscout.shared.models.http import HTTPRequest, HTTPResponse


class InstrumentationMiddleware:
    """Emits one event per request.

    The payload carries ``method``, the sanitized ``url``, the service
    ``namespace``, the response ``status`` and ``cache_hit``. Failed requests
    emit too, with the error class on the event. Requests and responses pass
    through unchanged.

    Args:
        instrumenter: Event dispatcher
        namespace: Fallback service namespace for requests without one
        event_name: Name of the emitted event
    """

    def __init__(
        self,
        instrumenter: Instrumenter,
        namespace: str | None = None,
        event_name: str = InstrumentationEvents.HTTP_REQUEST,
    ) -> None:
        self.instrumenter = instrumenter
        self.namespace = namespace
        self.event_name = event_name

    def __call__(
        self,
        request: HTTPRequest,
        call_next: Callable[[HTTPRequest], HTTPResponse],
    ) -> HTTPResponse:
        payload = {
            "method": request.method,
            "url": request.sanitized_url,
            "namespace": request.namespace or self.namespace,
        }
        with self.instrumenter.instrument(self.event_name, payload) as event:
            try:
                response = call_next(request)
            except UpstreamError as e:
                event["status"] = e.status_code
                event["cache_hit"] = False
                raise
            event["status"] = response.status
            event["cache_hit"] = response.from_cache
        return response
