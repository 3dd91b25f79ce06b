"""Terminal HTTP transport backed by requests."""

from __future__ import annotations

import logging

import requests
from requests.adapters import HTTPAdapter

from photoscout.shared.constants import NetworkConfig
from photoscout.shared.errors import (
    ErrorCode,
    ErrorContext,
    UpstreamError,
    create_upstream_error,
)
from photoscout.shared.models.http import HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)


class RequestsTransport:
    """Sends requests over a shared ``requests.Session``.

    The transport never retries and never interprets status codes: every
    response that arrives is returned as is. Connection failures and timeouts
    become ``UpstreamError`` with ``NETWORK_ERROR`` (or ``API_TIMEOUT``).

    Args:
        session: Session to reuse; a pooled session is created when omitted
        timeout: (connect, read) timeout in seconds
        user_agent: Value of the User-Agent header
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | tuple[float, float] = (
            NetworkConfig.CONNECT_TIMEOUT,
            NetworkConfig.READ_TIMEOUT,
        ),
        user_agent: str = NetworkConfig.USER_AGENT,
    ) -> None:
        self.session = session or self._create_session()
        self.timeout = timeout
        self.user_agent = user_agent

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=20, max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        headers = {"User-Agent": self.user_agent, **request.headers}
        try:
            raw = self.session.request(
                request.method,
                request.url,
                params=request.params or None,
                headers=headers,
                data=request.body,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise UpstreamError(
                ErrorCode.API_TIMEOUT,
                f"Request timed out: {request.sanitized_url}",
                ErrorContext(operation="http_request", url=request.sanitized_url),
                e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise create_upstream_error(
                f"Request failed: {e.__class__.__name__}",
                url=request.sanitized_url,
                operation="http_request",
                original_error=e,
            ) from e

        return HTTPResponse(
            status=raw.status_code,
            headers=dict(raw.headers),
            body=raw.content,
            url=request.sanitized_url,
        )

    def close(self) -> None:
        self.session.close()
        logger.debug("Closed HTTP session")
