"""Named event instrumentation.

An ``Instrumenter`` wraps a block of work, measures it, and hands the
resulting ``InstrumentationEvent`` to every subscriber whose pattern matches
the event name. The event is emitted whether the block returns or raises.

Example:
    >>> recorder = EventRecorder()
    >>> instrumenter = Instrumenter()
    >>> instrumenter.subscribe("search.*", recorder)
    >>> with instrumenter.instrument("search.index", {"query": "cats"}) as payload:
    ...     payload["matches"] = 3
    >>> recorder.events[0].payload["matches"]
    3
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable

from photoscout.shared.logging import log_api_call, log_operation_success

logger = logging.getLogger(__name__)

Subscriber = Callable[["InstrumentationEvent"], None]

WILDCARD = "*"


@dataclass(frozen=True)
class InstrumentationEvent:
    """A completed instrumented block.

    Attributes:
        name: Event name, e.g. ``request.http``
        payload: Metadata supplied by the caller and filled in by the block
        started_at: Wall clock start time (epoch seconds)
        duration_ms: Elapsed time in milliseconds
        error: Class name of the exception raised by the block, if any
    """

    name: str
    payload: dict[str, Any]
    started_at: float
    duration_ms: float
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def _matches(pattern: str, name: str) -> bool:
    if pattern == WILDCARD:
        return True
    if pattern.endswith(".*"):
        return name.startswith(pattern[:-1])
    return pattern == name


class Instrumenter:
    """Dispatches instrumentation events to subscribers.

    Subscriptions are guarded by a lock; dispatch works on a snapshot, so
    subscribing while events are in flight is safe.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[str, Subscriber]] = []
        self._lock = threading.Lock()

    def subscribe(self, pattern: str, subscriber: Subscriber) -> None:
        """Register a subscriber.

        Args:
            pattern: Exact event name, ``prefix.*`` or ``*``
            subscriber: Callable receiving each matching event
        """
        with self._lock:
            self._subscribers.append((pattern, subscriber))

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers = [
                (pattern, sub) for pattern, sub in self._subscribers if sub is not subscriber
            ]

    @contextmanager
    def instrument(
        self,
        name: str,
        payload: dict[str, Any] | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Instrument a block of work.

        The yielded payload dict may be extended by the block. The event is
        published after the block completes, including when it raises; the
        exception is re-raised unchanged.

        Args:
            name: Event name
            payload: Initial event metadata

        Yields:
            The mutable event payload
        """
        event_payload: dict[str, Any] = dict(payload or {})
        started_at = time.time()
        start = time.perf_counter()
        error: str | None = None
        try:
            yield event_payload
        except BaseException as e:
            error = type(e).__name__
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.publish(
                InstrumentationEvent(
                    name=name,
                    payload=event_payload,
                    started_at=started_at,
                    duration_ms=duration_ms,
                    error=error,
                )
            )

    def publish(self, event: InstrumentationEvent) -> None:
        """Deliver an event to matching subscribers.

        A failing subscriber is logged and skipped.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        for pattern, subscriber in subscribers:
            if not _matches(pattern, event.name):
                continue
            try:
                subscriber(event)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "Instrumentation subscriber %r failed for event %s",
                    subscriber,
                    event.name,
                    exc_info=True,
                )


class LoggingSubscriber:
    """Writes instrumentation events to the structured log."""

    def __init__(self, event_logger: logging.Logger | None = None) -> None:
        self.logger = event_logger or logging.getLogger("photoscout.events")

    def __call__(self, event: InstrumentationEvent) -> None:
        payload = event.payload
        if "url" in payload:
            log_api_call(
                self.logger,
                endpoint=str(payload["url"]),
                method=str(payload.get("method", "GET")),
                status_code=payload.get("status"),
                duration_ms=round(event.duration_ms, 2),
                context={
                    "event": event.name,
                    "cache_hit": payload.get("cache_hit", False),
                    "error": event.error,
                },
            )
            return

        log_operation_success(
            self.logger,
            operation=event.name,
            duration_ms=round(event.duration_ms, 2),
            result_info={"error": event.error} if event.failed else None,
            context=payload,
        )


@dataclass
class EventRecorder:
    """Subscriber that keeps every event it receives."""

    events: list[InstrumentationEvent] = field(default_factory=list)

    def __call__(self, event: InstrumentationEvent) -> None:
        self.events.append(event)

    def named(self, name: str) -> list[InstrumentationEvent]:
        return [event for event in self.events if event.name == name]

    def clear(self) -> None:
        self.events.clear()
