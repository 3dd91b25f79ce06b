"""Tests for InstrumentationMiddleware."""

from __future__ import annotations

import pytest

from photoscout.services.http.instrumentation import InstrumentationMiddleware
from photoscout.shared.errors import create_upstream_error
from photoscout.shared.models.http import HTTPRequest, HTTPResponse


class TestInstrumentationMiddleware:
    def test_one_event_per_request(self, instrumenter, event_recorder, transport_factory) -> None:
        # Given
        transport = transport_factory([HTTPResponse(200, {}, b"ok")])
        middleware = InstrumentationMiddleware(instrumenter, namespace="indextank")
        request = HTTPRequest(
            method="GET",
            url="http://index.test/v1/indexes/photos/search",
            params={"q": "cats", "access_token": "secret"},
        )

        # When
        response = middleware(request, transport)

        # Then
        assert response.body == b"ok"
        assert len(event_recorder.events) == 1
        payload = event_recorder.events[0].payload
        assert payload["method"] == "GET"
        assert payload["namespace"] == "indextank"
        assert payload["status"] == 200
        assert payload["cache_hit"] is False
        assert "secret" not in payload["url"]

    def test_request_and_response_pass_through_unchanged(self, instrumenter, transport_factory) -> None:
        transport = transport_factory([HTTPResponse(201, {"A": "1"}, b"body")])
        middleware = InstrumentationMiddleware(instrumenter)
        request = HTTPRequest(method="POST", url="/x", params={"a": 1})

        response = middleware(request, transport)

        assert transport.requests[0] is request
        assert (response.status, response.headers, response.body) == (201, {"A": "1"}, b"body")

    def test_failure_emits_and_propagates(self, instrumenter, event_recorder) -> None:
        def failing(request: HTTPRequest) -> HTTPResponse:
            raise create_upstream_error("server down", status_code=503)

        middleware = InstrumentationMiddleware(instrumenter)

        with pytest.raises(Exception, match="server down"):
            middleware(HTTPRequest(method="GET", url="/x"), failing)

        event = event_recorder.events[0]
        assert event.error == "UpstreamError"
        assert event.payload["status"] == 503

    def test_unexpected_errors_emit_too(self, instrumenter, event_recorder) -> None:
        def failing(request: HTTPRequest) -> HTTPResponse:
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            InstrumentationMiddleware(instrumenter)(HTTPRequest(method="GET", url="/x"), failing)

        assert event_recorder.events[0].error == "RuntimeError"

    def test_request_namespace_wins(self, instrumenter, event_recorder, transport_factory) -> None:
        middleware = InstrumentationMiddleware(instrumenter, namespace="fallback")

        middleware(HTTPRequest(method="GET", url="/x", namespace="twitter"), transport_factory())

        assert event_recorder.events[0].payload["namespace"] == "twitter"
