"""
Search Index Constants

This module defines the field projection requested from the full-text index,
pagination defaults and the image variants derived from indexed photos.
"""

from __future__ import annotations


class SearchIndex:
    """Search index request constants."""

    SEARCH_PATH = "/v1/indexes/{index_name}/search"
    DEFAULT_INDEX_NAME = "photos"

    # Fields fetched for every hit (docid is always returned)
    FETCH_FIELDS = "text,thumbnail_url,username,timestamp,big,filter"

    DEFAULT_PER_PAGE = 32

    PARAM_QUERY = "q"
    PARAM_LENGTH = "len"
    PARAM_START = "start"
    PARAM_FETCH = "fetch"

    FILTER_TERM = "{query} AND filter:{filter}"


class SearchResponseKeys:
    """Keys of the index service response."""

    MATCHES = "matches"
    RESULTS = "results"


class SearchDocumentKeys:
    """Keys of a raw index document."""

    DOCID = "docid"
    TEXT = "text"
    THUMBNAIL_URL = "thumbnail_url"
    BIG = "big"
    USERNAME = "username"
    TIMESTAMP = "timestamp"
    FILTER = "filter"


class ImageVariants:
    """Fixed image variant names and dimensions."""

    THUMBNAIL = "thumbnail"
    STANDARD_RESOLUTION = "standard_resolution"

    THUMBNAIL_SIZE = 150
    STANDARD_SIZE = 612
