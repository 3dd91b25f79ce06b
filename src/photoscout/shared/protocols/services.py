"""Service protocols for dependency inversion.

Narrow interfaces through which the discovery, search and user layers reach
their external collaborators. Concrete adapters live in the services package;
tests substitute fakes.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

from photoscout.shared.models.http import HTTPRequest, HTTPResponse
from photoscout.shared.models.instagram import InstagramProfile, MediaFeed


class RequestExecutor(Protocol):
    """Anything that turns an HTTPRequest into an HTTPResponse.

    Implemented by transports and by composed request pipelines.
    """

    def __call__(self, request: HTTPRequest) -> HTTPResponse: ...


class Middleware(Protocol):
    """A pipeline stage wrapping the next executor.

    Example:
        >>> class Passthrough:
        ...     def __call__(self, request, call_next):
        ...         return call_next(request)
    """

    def __call__(
        self,
        request: HTTPRequest,
        call_next: Callable[[HTTPRequest], HTTPResponse],
    ) -> HTTPResponse: ...


class SearchServiceProtocol(Protocol):
    """Full-text search service over indexed photo documents."""

    def search(self, query_text: str, params: dict[str, Any]) -> dict[str, Any]:
        """Run a query.

        Args:
            query_text: Query string, filter clause already appended
            params: Window and projection parameters (len, start, fetch, ...)

        Returns:
            Mapping with ``matches`` (total count) and ``results`` (documents)
        """
        ...


class IdentityProviderProtocol(Protocol):
    """Photo network identity provider."""

    def fetch_profile(self, identity: int) -> InstagramProfile:
        """Fetch the profile of a user.

        Raises:
            NotFoundError: If the provider has no such user
            UpstreamError: On error responses
        """
        ...

    def fetch_recent_media(
        self,
        identity: int,
        count: int,
        max_id: str | None = None,
    ) -> MediaFeed:
        """Fetch one page of a user's recent media, newest first."""
        ...
