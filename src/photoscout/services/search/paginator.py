"""Paginated search over the photo index."""

from __future__ import annotations

import logging
from typing import Any

from photoscout.services.search.models import SearchPage, SearchQuery, SearchRecord
from photoscout.shared.constants import (
    InstrumentationEvents,
    SearchIndex,
    SearchResponseKeys,
)
from photoscout.shared.errors import create_parsing_error, create_validation_error
from photoscout.shared.instrumentation import Instrumenter
from photoscout.shared.protocols.services import SearchServiceProtocol

logger = logging.getLogger(__name__)


class SearchPaginator:
    """Turns page-based searches into windowed index queries.

    Each call builds the query text (folding in the filter), asks the index
    for one window of documents and maps them onto ``SearchRecord`` objects.

    Args:
        index: Search service
        instrumenter: Event dispatcher; a private one is used when omitted
        default_per_page: Page size when the caller gives none

    Example:
        >>> paginator = SearchPaginator(index_client)
        >>> page = paginator.search("sunset", filter="nashville", page=2)
        >>> page.total_matches, len(page)
        (120, 32)
    """

    def __init__(
        self,
        index: SearchServiceProtocol,
        instrumenter: Instrumenter | None = None,
        default_per_page: int = SearchIndex.DEFAULT_PER_PAGE,
    ) -> None:
        self.index = index
        self.instrumenter = instrumenter or Instrumenter()
        self.default_per_page = default_per_page

    def search(
        self,
        query_text: str,
        *,
        filter: str | None = None,  # noqa: A002
        page: int = 1,
        per_page: int | None = None,
        **params: Any,
    ) -> SearchPage:
        """Search one page.

        Args:
            query_text: Free-text query
            filter: Photo filter name, appended as ``AND filter:<name>``
            page: 1-based page number
            per_page: Page size (default 32)
            **params: Passed verbatim to the service, overriding defaults
                (the window keys ``len`` and ``start`` are rejected)

        Returns:
            The requested page with the service's total match count

        Raises:
            DomainError: If page or per_page is below 1, or params carry a
                window key
            DataProcessingError: If a document cannot be mapped
            UpstreamError: If the service fails
        """
        per_page = self.default_per_page if per_page is None else per_page
        if page < 1:
            raise create_validation_error(
                f"page must be >= 1, got {page}", field="page", operation="search"
            )
        if per_page < 1:
            raise create_validation_error(
                f"per_page must be >= 1, got {per_page}",
                field="per_page",
                operation="search",
            )
        window_params = sorted(
            set(params) & {SearchIndex.PARAM_LENGTH, SearchIndex.PARAM_START}
        )
        if window_params:
            raise create_validation_error(
                f"Use page and per_page instead of {', '.join(window_params)}",
                field=window_params[0],
                operation="search",
            )

        query = SearchQuery.build(
            query_text,
            filter=filter,
            page=page,
            per_page=per_page,
            extra_params=params,
        )
        service_params = query.to_params()

        with self.instrumenter.instrument(
            InstrumentationEvents.INDEX_SEARCH,
            {"query": query.text, **service_params},
        ) as event:
            data = self.index.search(query.text, service_params)
            event["matches"] = data.get(SearchResponseKeys.MATCHES)

        try:
            total_matches = int(data[SearchResponseKeys.MATCHES])
            documents = data[SearchResponseKeys.RESULTS]
        except (KeyError, TypeError, ValueError) as e:
            raise create_parsing_error(
                "Search response lacks a usable match count or result list",
                field=SearchResponseKeys.MATCHES,
                operation="search",
                original_error=e,
            ) from e

        records = [SearchRecord.from_document(document) for document in documents]
        logger.debug(
            "Search %r page %d: %d of %d matches",
            query.text,
            page,
            len(records),
            total_matches,
        )
        return SearchPage(
            total_matches=total_matches,
            records=records,
            page=page,
            per_page=per_page,
        )
