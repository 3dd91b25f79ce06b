"""Client for an IndexTank-compatible full-text search service."""

from __future__ import annotations

import logging
from typing import Any

import orjson

from photoscout.shared.constants import SearchIndex, SearchResponseKeys
from photoscout.shared.errors import ErrorCode, ErrorContext, UpstreamError
from photoscout.shared.models.http import HTTPRequest
from photoscout.shared.protocols.services import RequestExecutor

logger = logging.getLogger(__name__)


class SearchIndexClient:
    """Queries one index over HTTP.

    Requests go through the given executor, usually a pipeline with
    instrumentation and caching in front of the transport.

    Args:
        executor: Request executor
        api_url: Base URL of the index service
        index_name: Name of the index to query
    """

    def __init__(
        self,
        executor: RequestExecutor,
        api_url: str,
        index_name: str = SearchIndex.DEFAULT_INDEX_NAME,
    ) -> None:
        self.executor = executor
        self.api_url = api_url.rstrip("/")
        self.index_name = index_name

    @property
    def search_url(self) -> str:
        return self.api_url + SearchIndex.SEARCH_PATH.format(index_name=self.index_name)

    def search(self, query_text: str, params: dict[str, Any]) -> dict[str, Any]:
        """Run a query against the index.

        Args:
            query_text: Query string
            params: Additional service parameters (len, start, fetch, ...)

        Returns:
            The decoded response with ``matches`` and ``results``

        Raises:
            UpstreamError: On error responses or a malformed body
        """
        request = HTTPRequest(
            method="GET",
            url=self.search_url,
            params={SearchIndex.PARAM_QUERY: query_text, **params},
        )
        response = self.executor(request)

        context = ErrorContext(operation="index_search", url=request.sanitized_url)
        try:
            data = response.json()
        except orjson.JSONDecodeError as e:
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                "Search service returned invalid JSON",
                context,
                e,
                status_code=response.status,
            ) from e

        if (
            not isinstance(data, dict)
            or SearchResponseKeys.MATCHES not in data
            or not isinstance(data.get(SearchResponseKeys.RESULTS), list)
        ):
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                "Search response lacks matches/results",
                context,
                status_code=response.status,
            )

        logger.debug(
            "Index %s: %s matches for %r",
            self.index_name,
            data[SearchResponseKeys.MATCHES],
            query_text,
        )
        return data
