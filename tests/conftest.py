"""
Pytest configuration and shared fixtures for PhotoScout tests.

This module provides common fixtures used across the test modules: a
recording fake transport, an instrumenter with an event recorder, a
temporary response store and isolated settings.
"""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson
import pytest

from photoscout.config.models.settings import Settings
from photoscout.services.response_store import ResponseStore
from photoscout.shared.instrumentation import EventRecorder, Instrumenter
from photoscout.shared.models.http import HTTPRequest, HTTPResponse

Responder = Callable[[HTTPRequest], HTTPResponse]


def json_response(payload: Any, status: int = 200, headers: dict[str, str] | None = None) -> HTTPResponse:
    """Build a JSON HTTPResponse."""
    return HTTPResponse(
        status=status,
        headers=headers or {"Content-Type": "application/json"},
        body=orjson.dumps(payload),
    )


class FakeTransport:
    """Terminal executor that records requests and replays canned responses.

    Responses are taken from ``responses`` in order (the last one repeats),
    or produced by ``responder`` when given.
    """

    def __init__(
        self,
        responses: Iterable[HTTPResponse] = (),
        responder: Responder | None = None,
    ) -> None:
        self.responses = list(responses)
        self.responder = responder
        self.requests: list[HTTPRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        if not self.responses:
            return HTTPResponse(status=200, body=b"")
        index = min(len(self.requests) - 1, len(self.responses) - 1)
        response = self.responses[index]
        return HTTPResponse(
            status=response.status,
            headers=dict(response.headers),
            body=response.body,
            url=request.url,
        )


class FrozenClock:
    """Controllable UTC clock."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        from datetime import timedelta

        self.now += timedelta(**delta)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport([json_response({"data": {"id": "1"}})])


@pytest.fixture
def event_recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def instrumenter(event_recorder: EventRecorder) -> Instrumenter:
    instrumenter = Instrumenter()
    instrumenter.subscribe("*", event_recorder)
    return instrumenter


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def response_store(tmp_path: Path, clock: FrozenClock) -> Generator[ResponseStore, None, None]:
    """Empty store with a one hour TTL."""
    store = ResponseStore(
        tmp_path / "cache" / "responses.db",
        namespace="instagram",
        ttl_seconds=3600,
        clock=clock,
    )
    yield store
    store.close()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings isolated from the developer's environment."""
    monkeypatch.chdir(tmp_path)
    return Settings(
        cache={"directory": str(tmp_path / "cache")},
        api={"search_index": {"api_url": "http://index.test"}},
        logging={"console_output": False},
    )


@pytest.fixture
def make_json_response() -> Callable[..., HTTPResponse]:
    return json_response


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    return FakeTransport
