"""Cross-network identity discovery.

Resolves a photo network identity from a public profile page, falling back to
the user's micro-blog posts: a shared photo permalink found there leads to a
page that carries the identity marker.

A lookup is a small state machine::

    UNRESOLVED --(profile marker found)--> RESOLVED
    UNRESOLVED --(secondary network permalink resolves)--> RESOLVED
    UNRESOLVED --(nothing matched)--> UNRESOLVED (terminal)

"Nothing matched" is an ordinary result, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import orjson

from photoscout.shared.constants import (
    DiscoveryPatterns,
    InstrumentationEvents,
    TwitterAPI,
)
from photoscout.shared.errors import ErrorCode, ErrorContext, UpstreamError
from photoscout.shared.instrumentation import Instrumenter
from photoscout.shared.models.http import HTTPRequest, HTTPResponse
from photoscout.shared.protocols.services import RequestExecutor

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class ResolutionSource(str, Enum):
    PROFILE_PAGE = "profile_page"
    SECONDARY_NETWORK = "secondary_network"


@dataclass(frozen=True)
class SecondaryNetworkMatch:
    """A permalink found in a micro-blog post.

    Attributes:
        permalink: Photo permalink URL
        post_id: Id of the post that contained it
    """

    permalink: str
    post_id: int | str | None


@dataclass(frozen=True)
class IdentityResolution:
    """Outcome of a lookup."""

    state: ResolutionState
    identity: int | None = None
    source: ResolutionSource | None = None
    permalink: str | None = None

    @property
    def resolved(self) -> bool:
        return self.state is ResolutionState.RESOLVED

    @classmethod
    def unresolved(cls) -> IdentityResolution:
        return cls(state=ResolutionState.UNRESOLVED)


def extract_identity(content: str) -> int | None:
    """Return the first identity marker in page content, if any."""
    match = DiscoveryPatterns.PROFILE_MARKER.search(content)
    return int(match.group(1)) if match else None


def find_permalink(posts: Iterable[Any]) -> SecondaryNetworkMatch | None:
    """Return the first post whose text carries a photo permalink."""
    for post in posts:
        if not isinstance(post, dict):
            continue
        match = DiscoveryPatterns.PERMALINK.search(str(post.get(TwitterAPI.KEY_TEXT) or ""))
        if match:
            return SecondaryNetworkMatch(match.group(0), post.get(TwitterAPI.KEY_ID))
    return None


class DiscoveryResolver:
    """Correlates identities across the photo and micro-blog networks.

    Args:
        executor: Request executor for page and API fetches
        instrumenter: Event dispatcher; a private one is used when omitted
        search_url: Micro-blog search endpoint
        timeline_url: Micro-blog user timeline endpoint
        sentinel: Substring every candidate post must mention
        timeline_count: Number of timeline posts fetched
    """

    def __init__(
        self,
        executor: RequestExecutor,
        instrumenter: Instrumenter | None = None,
        search_url: str = TwitterAPI.SEARCH_URL,
        timeline_url: str = TwitterAPI.TIMELINE_URL,
        sentinel: str = TwitterAPI.SENTINEL,
        timeline_count: int = TwitterAPI.TIMELINE_COUNT,
    ) -> None:
        self.executor = executor
        self.instrumenter = instrumenter or Instrumenter()
        self.search_url = search_url
        self.timeline_url = timeline_url
        self.sentinel = sentinel
        self.timeline_count = timeline_count

    def _fetch(self, url: str, params: dict[str, Any] | None = None) -> HTTPResponse:
        return self.executor(HTTPRequest(method="GET", url=url, params=params or {}))

    def _fetch_json(self, url: str, params: dict[str, Any]) -> Any:
        response = self._fetch(url, params)
        try:
            return response.json()
        except orjson.JSONDecodeError as e:
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                f"Invalid JSON from {url}",
                ErrorContext(operation="search_secondary_network", url=url),
                e,
                status_code=response.status,
            ) from e

    def discover_identity(self, profile_url: str) -> int | None:
        """Fetch a profile page and extract the identity marker.

        Args:
            profile_url: Public profile or photo page URL

        Returns:
            The numeric identity, or None when the page has no marker

        Raises:
            UpstreamError: If the page cannot be fetched
        """
        with self.instrumenter.instrument(
            InstrumentationEvents.PROFILE_DISCOVERY, {"profile_url": profile_url}
        ) as event:
            identity = extract_identity(self._fetch(profile_url).text)
            event["identity"] = identity
        return identity

    def search_secondary_network(self, username: str) -> SecondaryNetworkMatch | None:
        """Find a photo permalink posted by a micro-blog user.

        Search results are scanned before the timeline; the timeline is only
        fetched when search yields nothing.

        Args:
            username: Micro-blog screen name

        Returns:
            The first match, or None
        """
        with self.instrumenter.instrument(
            InstrumentationEvents.SECONDARY_SEARCH, {"username": username}
        ) as event:
            match = self._scan_search(username) or self._scan_timeline(username)
            event["permalink"] = match.permalink if match else None
        return match

    def _scan_search(self, username: str) -> SecondaryNetworkMatch | None:
        data = self._fetch_json(
            self.search_url,
            {
                TwitterAPI.PARAM_QUERY: TwitterAPI.SEARCH_QUERY.format(
                    username=username, sentinel=self.sentinel
                ),
            },
        )
        results = data.get(TwitterAPI.KEY_RESULTS) if isinstance(data, dict) else None
        return find_permalink(results or [])

    def _scan_timeline(self, username: str) -> SecondaryNetworkMatch | None:
        data = self._fetch_json(
            self.timeline_url,
            {
                TwitterAPI.PARAM_SCREEN_NAME: username,
                TwitterAPI.PARAM_COUNT: self.timeline_count,
                TwitterAPI.PARAM_TRIM_USER: 1,
            },
        )
        # Error payloads come back as objects, not lists
        return find_permalink(data if isinstance(data, list) else [])

    def resolve_identity(
        self,
        profile_url: str,
        secondary_username: str | None = None,
    ) -> IdentityResolution:
        """Run the full lookup.

        Args:
            profile_url: Public profile page URL
            secondary_username: Micro-blog screen name tried when the page
                has no marker

        Returns:
            The resolution; ``state`` is UNRESOLVED when nothing matched
        """
        identity = self.discover_identity(profile_url)
        if identity is not None:
            return IdentityResolution(
                ResolutionState.RESOLVED, identity, ResolutionSource.PROFILE_PAGE
            )

        if not secondary_username:
            return IdentityResolution.unresolved()

        match = self.search_secondary_network(secondary_username)
        if match is None:
            logger.info("No cross-network match for %s", secondary_username)
            return IdentityResolution.unresolved()

        identity = self.discover_identity(match.permalink)
        if identity is None:
            return IdentityResolution.unresolved()

        return IdentityResolution(
            ResolutionState.RESOLVED,
            identity,
            ResolutionSource.SECONDARY_NETWORK,
            match.permalink,
        )
