"""HTTP request and response models.

These types are deliberately small: they carry only what the request
pipeline, the response cache and the API clients need, independently of the
transport library.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import orjson

from photoscout.shared.constants import HTTPStatusCodes
from photoscout.shared.errors import MASKED_VALUE, SAFE_DICT_MASK_KEYS


@dataclass
class HTTPRequest:
    """An outbound HTTP request.

    Attributes:
        method: HTTP method, normalized to upper case
        url: Absolute URL, may already carry a query string
        params: Query parameters added to the URL
        headers: Request headers
        body: Optional request payload
        namespace: External service the request belongs to (cache namespace)
    """

    method: str
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    namespace: str | None = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    def with_params(self, **params: Any) -> HTTPRequest:
        """Return a copy with extra query parameters merged in."""
        return replace(self, params={**self.params, **params})

    @property
    def query_names(self) -> set[str]:
        """Names of all query parameters, from the URL and from ``params``."""
        url_pairs = parse_qsl(urlsplit(self.url).query, keep_blank_values=True)
        return {name for name, _ in url_pairs} | set(self.params)

    @property
    def sanitized_url(self) -> str:
        """URL with query parameters, credentials masked (for logs and events)."""
        url = self.url
        parts = urlsplit(url)
        url_pairs = parse_qsl(parts.query, keep_blank_values=True)
        if any(key in SAFE_DICT_MASK_KEYS for key, _ in url_pairs):
            query = urlencode(
                [
                    (key, MASKED_VALUE if key in SAFE_DICT_MASK_KEYS else value)
                    for key, value in url_pairs
                ]
            )
            url = urlunsplit(parts._replace(query=query))

        if not self.params:
            return url
        masked = {
            key: MASKED_VALUE if key in SAFE_DICT_MASK_KEYS else value
            for key, value in self.params.items()
            if value is not None
        }
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{urlencode(sorted(masked.items()), doseq=True)}"


@dataclass
class HTTPResponse:
    """An HTTP response as seen by the pipeline.

    Attributes:
        status: HTTP status code
        headers: Response headers, original casing preserved
        body: Raw response payload
        url: Final URL of the request
        from_cache: True when served from the response store
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return HTTPStatusCodes.OK <= self.status < HTTPStatusCodes.MULTIPLE_CHOICES

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            orjson.JSONDecodeError: If the body is not valid JSON
        """
        return orjson.loads(self.body)


@dataclass(frozen=True)
class CachedResponse:
    """Immutable snapshot of a successful response kept in the response store.

    Serializes to a flat ``(status, headers, body)`` tuple.
    """

    status: int
    headers: Mapping[str, str]
    body: bytes

    def __post_init__(self) -> None:
        # Detach from the caller's mapping
        object.__setattr__(self, "headers", dict(self.headers))

    @classmethod
    def from_response(cls, response: HTTPResponse) -> CachedResponse:
        return cls(status=response.status, headers=response.headers, body=response.body)

    def to_response(self, url: str = "") -> HTTPResponse:
        """Rebuild a pipeline response from this snapshot."""
        return HTTPResponse(
            status=self.status,
            headers=dict(self.headers),
            body=self.body,
            url=url,
            from_cache=True,
        )

    def to_tuple(self) -> tuple[int, dict[str, str], bytes]:
        return (self.status, dict(self.headers), self.body)

    @classmethod
    def from_tuple(cls, data: tuple[Any, ...] | list[Any]) -> CachedResponse:
        """Restore a snapshot from its flat tuple form.

        Raises:
            ValueError: If the tuple does not have the (status, headers, body) shape
        """
        if len(data) != 3:
            msg = f"Expected (status, headers, body), got {len(data)} items"
            raise ValueError(msg)

        status, headers, body = data
        if not isinstance(status, int) or isinstance(status, bool):
            msg = f"status must be int, got {type(status).__name__}"
            raise ValueError(msg)
        if not isinstance(headers, Mapping):
            msg = f"headers must be a mapping, got {type(headers).__name__}"
            raise ValueError(msg)
        if isinstance(body, str):
            body = body.encode("utf-8")
        if not isinstance(body, (bytes, bytearray, memoryview)):
            msg = f"body must be bytes, got {type(body).__name__}"
            raise ValueError(msg)

        return cls(
            status=status,
            headers={str(k): str(v) for k, v in headers.items()},
            body=bytes(body),
        )
