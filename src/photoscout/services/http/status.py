"""Error-status handling for upstream responses."""

from __future__ import annotations

import logging
from typing import Any, Callable

import orjson

from photoscout.shared.constants import HTTPStatusCodes
from photoscout.shared.errors import create_upstream_error
from photoscout.shared.models.http import HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)


def extract_error_message(response: HTTPResponse) -> str | None:
    """Pull the provider's error message out of an error body.

    Understands the photo network envelope (``meta.error_message``) and the
    common ``error`` / ``message`` keys.
    """
    try:
        payload: Any = orjson.loads(response.body)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None

    meta = payload.get("meta")
    if isinstance(meta, dict) and meta.get("error_message"):
        return str(meta["error_message"])
    for key in ("error_message", "error", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class RaiseForStatusMiddleware:
    """Turns 4xx/5xx responses into ``UpstreamError``.

    Placed below the caching middleware, so error responses never reach the
    response store.
    """

    def __call__(
        self,
        request: HTTPRequest,
        call_next: Callable[[HTTPRequest], HTTPResponse],
    ) -> HTTPResponse:
        response = call_next(request)
        if response.status < HTTPStatusCodes.BAD_REQUEST:
            return response

        detail = extract_error_message(response) or f"HTTP {response.status}"
        raise create_upstream_error(
            f"{request.method} {request.sanitized_url} failed: {detail}",
            status_code=response.status,
            url=request.sanitized_url,
            operation="http_request",
        )
