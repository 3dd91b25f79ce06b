"""Photo network API client."""

from __future__ import annotations

import logging
from typing import Any

import orjson

from photoscout.shared.constants import HTTPStatusCodes, InstagramAPI
from photoscout.shared.errors import (
    ErrorCode,
    ErrorContext,
    UpstreamError,
    create_not_found_error,
)
from photoscout.shared.models.http import HTTPRequest, HTTPResponse
from photoscout.shared.models.instagram import InstagramProfile, MediaFeed
from photoscout.shared.protocols.services import RequestExecutor

logger = logging.getLogger(__name__)


class InstagramClient:
    """Reads user profiles and recent media.

    Credentials are not handled here; the executor is expected to be a
    pipeline with ``OAuth2ParamsMiddleware`` in front.

    Args:
        executor: Request executor
        base_url: API root, e.g. ``https://api.instagram.com/v1``
    """

    def __init__(self, executor: RequestExecutor, base_url: str = InstagramAPI.BASE_URL) -> None:
        self.executor = executor
        self.base_url = base_url.rstrip("/")

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        request = HTTPRequest(method="GET", url=self.base_url + path, params=params or {})
        response = self.executor(request)
        return self._decode(request, response)

    @staticmethod
    def _decode(request: HTTPRequest, response: HTTPResponse) -> dict[str, Any]:
        try:
            payload = response.json()
        except orjson.JSONDecodeError as e:
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                "Photo network returned invalid JSON",
                ErrorContext(operation="instagram_request", url=request.sanitized_url),
                e,
                status_code=response.status,
            ) from e
        if not isinstance(payload, dict):
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                "Photo network response is not an object",
                ErrorContext(operation="instagram_request", url=request.sanitized_url),
                status_code=response.status,
            )
        return payload

    def user(self, user_id: int) -> InstagramProfile:
        """Fetch a user's profile.

        Raises:
            NotFoundError: If the provider has no such user
            UpstreamError: On other error responses
        """
        try:
            payload = self._get(InstagramAPI.USER_PATH.format(user_id=user_id))
        except UpstreamError as e:
            if e.status_code in (HTTPStatusCodes.BAD_REQUEST, HTTPStatusCodes.NOT_FOUND):
                raise create_not_found_error(
                    f"Photo network user {user_id} not found",
                    identifier=user_id,
                    operation="fetch_profile",
                ) from e
            raise

        data = payload.get("data")
        if not isinstance(data, dict):
            raise create_not_found_error(
                f"Photo network user {user_id} not found",
                identifier=user_id,
                operation="fetch_profile",
            )
        try:
            return InstagramProfile.from_api(data)
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                ErrorCode.API_INVALID_RESPONSE,
                f"Malformed profile for user {user_id}",
                ErrorContext(operation="fetch_profile"),
                e,
            ) from e

    def user_recent_media(
        self,
        user_id: int,
        count: int = InstagramAPI.RECENT_MEDIA_COUNT,
        max_id: str | None = None,
    ) -> MediaFeed:
        """Fetch one page of a user's recent media.

        Args:
            user_id: Photo network identity
            count: Page size
            max_id: Return media older than this id

        Returns:
            The page with the cursor of the next one
        """
        params: dict[str, Any] = {InstagramAPI.PARAM_COUNT: count}
        if max_id is not None:
            params[InstagramAPI.PARAM_MAX_ID] = str(max_id)

        payload = self._get(InstagramAPI.RECENT_MEDIA_PATH.format(user_id=user_id), params)
        items = payload.get("data") or []
        pagination = payload.get("pagination") or {}
        next_max_id = pagination.get("next_max_id")
        return MediaFeed(
            items=list(items),
            next_max_id=str(next_max_id) if next_max_id is not None else None,
        )

    # IdentityProviderProtocol
    fetch_profile = user

    def fetch_recent_media(
        self,
        identity: int,
        count: int = InstagramAPI.RECENT_MEDIA_COUNT,
        max_id: str | None = None,
    ) -> MediaFeed:
        return self.user_recent_media(identity, count=count, max_id=max_id)
