"""Credential injection for the photo network API."""

from __future__ import annotations

from typing import Callable

from photoscout.shared.constants import InstagramAPI
from photoscout.shared.models.http import HTTPRequest, HTTPResponse


class OAuth2ParamsMiddleware:
    """Adds ``client_id`` and ``access_token`` query parameters.

    Credentials already on the request, in ``params`` or in the URL query
    string, win over the configured ones. Empty credentials are not sent.

    Args:
        client_id: Registered application id
        access_token: OAuth2 access token
    """

    def __init__(self, client_id: str | None = None, access_token: str | None = None) -> None:
        self.client_id = client_id
        self.access_token = access_token

    def __call__(
        self,
        request: HTTPRequest,
        call_next: Callable[[HTTPRequest], HTTPResponse],
    ) -> HTTPResponse:
        credentials = {
            InstagramAPI.PARAM_CLIENT_ID: self.client_id,
            InstagramAPI.PARAM_ACCESS_TOKEN: self.access_token,
        }
        present = request.query_names
        missing = {
            name: value
            for name, value in credentials.items()
            if value and name not in present
        }
        if missing:
            request = request.with_params(**missing)
        return call_next(request)
