"""Full-text photo search."""

from .index_client import SearchIndexClient
from .models import (
    Caption,
    ImageVariant,
    IndexedPhoto,
    SearchPage,
    SearchQuery,
    SearchRecord,
    UserStub,
)
from .paginator import SearchPaginator

__all__ = [
    "Caption",
    "ImageVariant",
    "IndexedPhoto",
    "SearchIndexClient",
    "SearchPage",
    "SearchPaginator",
    "SearchQuery",
    "SearchRecord",
    "UserStub",
]
