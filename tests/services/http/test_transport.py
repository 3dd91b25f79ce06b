"""Tests for RequestsTransport."""

from __future__ import annotations

import pytest
import requests

from photoscout.services.http.transport import RequestsTransport
from photoscout.shared.errors import ErrorCode, UpstreamError
from photoscout.shared.models.http import HTTPRequest


def raw_response(status: int, body: bytes, headers: dict[str, str]) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.headers.update(headers)
    return response


class TestRequestsTransport:
    def test_converts_response(self, mocker) -> None:
        # Given
        session = mocker.Mock(spec=requests.Session)
        session.request.return_value = raw_response(404, b'{"meta": {}}', {"Content-Type": "application/json"})
        transport = RequestsTransport(session=session, timeout=5)
        request = HTTPRequest(method="GET", url="https://api.test/v1/users/42/", params={"count": 20})

        # When
        response = transport(request)

        # Then
        assert response.status == 404
        assert response.body == b'{"meta": {}}'
        assert response.headers["Content-Type"] == "application/json"
        assert response.from_cache is False
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.test/v1/users/42/")
        assert kwargs["params"] == {"count": 20}
        assert kwargs["timeout"] == 5
        assert "User-Agent" in kwargs["headers"]

    def test_timeout_becomes_upstream_error(self, mocker) -> None:
        session = mocker.Mock(spec=requests.Session)
        session.request.side_effect = requests.exceptions.ReadTimeout("slow")
        transport = RequestsTransport(session=session)

        with pytest.raises(UpstreamError) as exc_info:
            transport(HTTPRequest(method="GET", url="https://api.test/x"))

        assert exc_info.value.code is ErrorCode.API_TIMEOUT
        assert exc_info.value.status_code is None

    def test_connection_error_becomes_upstream_error(self, mocker) -> None:
        session = mocker.Mock(spec=requests.Session)
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        transport = RequestsTransport(session=session)

        with pytest.raises(UpstreamError) as exc_info:
            transport(HTTPRequest(method="GET", url="https://api.test/x"))

        assert exc_info.value.code is ErrorCode.NETWORK_ERROR
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_default_session_is_pooled(self) -> None:
        transport = RequestsTransport()
        try:
            assert "https://" in transport.session.adapters
        finally:
            transport.close()
