"""API configuration models.

Settings for the three external services: the photo network API, the
full-text search index and the micro-blog network.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from photoscout.shared.constants import (
    InstagramAPI,
    NetworkConfig,
    SearchIndex,
    TwitterAPI,
)


class InstagramSettings(BaseModel):
    """Photo network API configuration.

    Security: client_id and access_token are masked in __repr__.
    """

    base_url: str = Field(default=InstagramAPI.BASE_URL, description="API root URL")
    client_id: str = Field(default="", repr=False, description="OAuth2 client id")
    access_token: str = Field(default="", repr=False, description="OAuth2 access token")
    timeout: float = Field(
        default=NetworkConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    recent_media_count: int = Field(
        default=InstagramAPI.RECENT_MEDIA_COUNT,
        gt=0,
        description="Page size of recent media requests",
    )

    def __repr__(self) -> str:
        masked_client = "****" if self.client_id else "[empty]"
        masked_token = "****" if self.access_token else "[empty]"
        return (
            f"InstagramSettings("
            f"base_url={self.base_url!r}, "
            f"client_id={masked_client}, "
            f"access_token={masked_token}, "
            f"timeout={self.timeout})"
        )


class SearchIndexSettings(BaseModel):
    """Full-text search index configuration."""

    api_url: str = Field(default="http://localhost:8080", description="Index service URL")
    index_name: str = Field(default=SearchIndex.DEFAULT_INDEX_NAME, description="Index name")
    timeout: float = Field(
        default=NetworkConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    per_page: int = Field(
        default=SearchIndex.DEFAULT_PER_PAGE,
        gt=0,
        description="Default search page size",
    )


class TwitterSettings(BaseModel):
    """Micro-blog network endpoints used by identity discovery."""

    search_url: str = Field(default=TwitterAPI.SEARCH_URL)
    timeline_url: str = Field(default=TwitterAPI.TIMELINE_URL)
    timeline_count: int = Field(default=TwitterAPI.TIMELINE_COUNT, gt=0)
    sentinel: str = Field(
        default=TwitterAPI.SENTINEL,
        min_length=1,
        description="Substring candidate posts must mention",
    )


class APISettings(BaseModel):
    """API configuration container."""

    instagram: InstagramSettings = Field(default_factory=InstagramSettings)
    search_index: SearchIndexSettings = Field(default_factory=SearchIndexSettings)
    twitter: TwitterSettings = Field(default_factory=TwitterSettings)


__all__ = [
    "APISettings",
    "InstagramSettings",
    "SearchIndexSettings",
    "TwitterSettings",
]
