"""Search query, page and record models.

``SearchRecord`` mirrors the shape of a photo network media object, so views
can render indexed photos and live media with the same templates.

Memoized fields (``user``, ``caption``, ``images``) use
``functools.cached_property`` and are not lock-protected: two threads reading
a field for the first time may both compute it. The computation is pure, so
either result is equivalent.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import cached_property
from typing import Any

from photoscout.shared.constants import ImageVariants, SearchDocumentKeys, SearchIndex
from photoscout.shared.errors import create_parsing_error

logger = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class SearchQuery:
    """One request to the search service.

    Attributes:
        text: Query text with any filter clause already appended
        filter: Filter name that was folded into ``text``
        page_size: Maximum number of records requested
        offset: Index of the first record requested
        extra_params: Pass-through parameters for the service
    """

    text: str
    filter: str | None = None
    page_size: int = SearchIndex.DEFAULT_PER_PAGE
    offset: int = 0
    extra_params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        query_text: str,
        filter: str | None = None,  # noqa: A002
        page: int = 1,
        per_page: int = SearchIndex.DEFAULT_PER_PAGE,
        extra_params: Mapping[str, Any] | None = None,
    ) -> SearchQuery:
        text = (
            SearchIndex.FILTER_TERM.format(query=query_text, filter=filter)
            if filter
            else query_text
        )
        return cls(
            text=text,
            filter=filter,
            page_size=per_page,
            offset=(page - 1) * per_page,
            extra_params=dict(extra_params or {}),
        )

    def to_params(self) -> dict[str, Any]:
        """Service parameters: window, projection, then pass-through overrides."""
        params: dict[str, Any] = {
            SearchIndex.PARAM_LENGTH: self.page_size,
            SearchIndex.PARAM_START: self.offset,
            SearchIndex.PARAM_FETCH: SearchIndex.FETCH_FIELDS,
        }
        params.update(self.extra_params)
        return params


@dataclass(frozen=True)
class UserStub:
    """Identity stub carrying only the username."""

    id: int | None
    full_name: str | None
    username: str | None


@dataclass(frozen=True)
class Caption:
    text: str


@dataclass(frozen=True)
class ImageVariant:
    url: str | None
    width: int
    height: int


def _taken_at(value: Any) -> datetime:
    """Posting time from an index timestamp; the epoch when it is unusable."""
    try:
        return datetime.fromtimestamp(int(float(value or 0)), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning("Unreadable search document timestamp: %r", value)
        return EPOCH


@dataclass(frozen=True)
class SearchRecord:
    """A photo document returned by the search index.

    Attributes:
        id: Document id
        caption_text: Caption, None when the photo has none
        thumbnail_url: Small image URL
        large_url: Full size image URL
        username: Owner's username
        taken_at: Time the photo was posted (UTC), the epoch when unknown
        filter_name: Name of the photo filter applied
    """

    id: str
    caption_text: str | None
    thumbnail_url: str | None
    large_url: str | None
    username: str | None
    taken_at: datetime
    filter_name: str | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> SearchRecord:
        """Map a raw index document onto a record.

        Only ``docid`` is required. Missing projected fields map to None and a
        missing or unreadable timestamp to the epoch.

        Raises:
            DataProcessingError: If ``docid`` is missing
        """
        try:
            return cls(
                id=str(document[SearchDocumentKeys.DOCID]),
                caption_text=document.get(SearchDocumentKeys.TEXT),
                thumbnail_url=document.get(SearchDocumentKeys.THUMBNAIL_URL),
                large_url=document.get(SearchDocumentKeys.BIG),
                username=document.get(SearchDocumentKeys.USERNAME),
                taken_at=_taken_at(document.get(SearchDocumentKeys.TIMESTAMP)),
                filter_name=document.get(SearchDocumentKeys.FILTER),
            )
        except KeyError as e:
            raise create_parsing_error(
                "Search document is missing field 'docid'",
                field=SearchDocumentKeys.DOCID,
                operation="map_search_document",
                original_error=e,
            ) from e

    @cached_property
    def user(self) -> UserStub:
        return UserStub(id=None, full_name=None, username=self.username)

    @cached_property
    def caption(self) -> Caption | None:
        if self.caption_text is None:
            return None
        return Caption(self.caption_text)

    @cached_property
    def images(self) -> dict[str, ImageVariant]:
        return {
            ImageVariants.THUMBNAIL: ImageVariant(
                self.thumbnail_url,
                ImageVariants.THUMBNAIL_SIZE,
                ImageVariants.THUMBNAIL_SIZE,
            ),
            ImageVariants.STANDARD_RESOLUTION: ImageVariant(
                self.large_url,
                ImageVariants.STANDARD_SIZE,
                ImageVariants.STANDARD_SIZE,
            ),
        }


IndexedPhoto = SearchRecord


@dataclass
class SearchPage:
    """One window of search results.

    ``total_matches`` is the count reported by the service for the whole
    query, not the length of ``records``.
    """

    total_matches: int
    records: list[SearchRecord] = field(default_factory=list)
    page: int = 1
    per_page: int = SearchIndex.DEFAULT_PER_PAGE

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(self.records)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_matches / self.per_page) if self.per_page else 0

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.page < self.total_pages else None

    @property
    def previous_page(self) -> int | None:
        return self.page - 1 if self.page > 1 else None
