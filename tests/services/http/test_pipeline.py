"""Tests for request pipeline composition."""

from __future__ import annotations

import pytest

from photoscout.services.http import (
    CachingMiddleware,
    InstrumentationMiddleware,
    OAuth2ParamsMiddleware,
    RaiseForStatusMiddleware,
    RequestPipeline,
    build_pipeline,
    compose,
)
from photoscout.services.response_store import ResponseStore
from photoscout.shared.errors import UpstreamError
from photoscout.shared.models.http import HTTPRequest, HTTPResponse

BASE = "https://api.instagram.com"


class Tagger:
    def __init__(self, name: str, trail: list[str]) -> None:
        self.name = name
        self.trail = trail

    def __call__(self, request, call_next):
        self.trail.append(f"{self.name}>")
        response = call_next(request)
        self.trail.append(f"<{self.name}")
        return response


class TestCompose:
    def test_first_middleware_is_outermost(self, transport_factory) -> None:
        # Given
        trail: list[str] = []
        handler = compose([Tagger("a", trail), Tagger("b", trail)], transport_factory())

        # When
        handler(HTTPRequest(method="GET", url="/x"))

        # Then
        assert trail == ["a>", "b>", "<b", "<a"]

    def test_no_middlewares_calls_terminal(self, transport_factory) -> None:
        transport = transport_factory()

        compose([], transport)(HTTPRequest(method="GET", url="/x"))

        assert transport.call_count == 1


class TestRequestPipeline:
    def test_stamps_namespace(self, transport_factory) -> None:
        transport = transport_factory()
        pipeline = RequestPipeline([], transport, namespace="instagram")

        pipeline.get(f"{BASE}/v1/users/42/", {"count": 1})

        assert transport.requests[0].namespace == "instagram"
        assert transport.requests[0].params == {"count": 1}

    def test_repr_lists_stages(self, transport_factory) -> None:
        pipeline = RequestPipeline([RaiseForStatusMiddleware()], transport_factory())

        assert repr(pipeline) == "RequestPipeline(RaiseForStatusMiddleware -> FakeTransport)"


class TestBuildPipeline:
    def test_stage_order(self, response_store: ResponseStore, instrumenter, transport_factory) -> None:
        oauth = OAuth2ParamsMiddleware("cid", "token")

        pipeline = build_pipeline(
            transport_factory(),
            store=response_store,
            instrumenter=instrumenter,
            outer=[oauth],
            namespace="instagram",
        )

        assert [type(mw) for mw in pipeline.middlewares] == [
            OAuth2ParamsMiddleware,
            InstrumentationMiddleware,
            CachingMiddleware,
            RaiseForStatusMiddleware,
        ]

    def test_optional_stages_are_skipped(self, transport_factory) -> None:
        pipeline = build_pipeline(transport_factory(), raise_for_status=False)

        assert pipeline.middlewares == ()

    def test_error_responses_are_raised_and_not_cached(
        self, response_store: ResponseStore, instrumenter, event_recorder, transport_factory, make_json_response
    ) -> None:
        # Given
        transport = transport_factory(
            [make_json_response({"meta": {"error_message": "you cannot view this resource"}}, status=400)]
        )
        pipeline = build_pipeline(transport, store=response_store, instrumenter=instrumenter)

        # When
        for _ in range(2):
            with pytest.raises(UpstreamError) as exc_info:
                pipeline.get(f"{BASE}/v1/users/42/")

        # Then
        assert exc_info.value.status_code == 400
        assert "you cannot view this resource" in exc_info.value.message
        assert transport.call_count == 2
        assert response_store.count() == 0
        events = event_recorder.named("request.http")
        assert len(events) == 2
        assert events[0].error == "UpstreamError"
        assert events[0].payload["status"] == 400


class TestSelfScopedEndToEnd:
    """Cached pipeline behaviour on a caller-owned path."""

    def test_same_token_hits_other_token_misses(
        self, response_store: ResponseStore, instrumenter, event_recorder, transport_factory
    ) -> None:
        # Given a store with a one hour TTL that starts empty
        def responder(request: HTTPRequest) -> HTTPResponse:
            token = request.params.get("access_token", "")
            return HTTPResponse(200, {"Content-Type": "application/json"}, f'{{"token": "{token}"}}'.encode())

        transport = transport_factory(responder=responder)
        pipeline = build_pipeline(transport, store=response_store, instrumenter=instrumenter)
        url = f"{BASE}/users/self/media"

        # When the same request is made twice within the TTL
        first = pipeline.get(url, {"access_token": "abc"})
        second = pipeline.get(url, {"access_token": "abc"})

        # Then the transport is hit once and bodies match
        assert transport.call_count == 1
        assert first.body == second.body == b'{"token": "abc"}'
        assert second.from_cache

        # When another token is used on the same self-scoped path
        third = pipeline.get(url, {"access_token": "xyz"})

        # Then it is a miss
        assert transport.call_count == 2
        assert third.from_cache is False
        assert third.body == b'{"token": "xyz"}'
        assert [event.payload["cache_hit"] for event in event_recorder.named("request.http")] == [
            False,
            True,
            False,
        ]

    def test_entry_expires_after_ttl(
        self, response_store: ResponseStore, clock, transport_factory
    ) -> None:
        transport = transport_factory([HTTPResponse(200, {}, b"{}")])
        pipeline = build_pipeline(transport, store=response_store)
        url = f"{BASE}/users/self/media"

        pipeline.get(url, {"access_token": "abc"})
        clock.advance(hours=1, seconds=1)
        pipeline.get(url, {"access_token": "abc"})

        assert transport.call_count == 2
