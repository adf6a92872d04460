"""Shared test fixtures for eventrelay."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import pytest

from eventrelay.models.events import HostEvent
from eventrelay.models.mask import EventKind
from eventrelay.plugin import PLUGIN_PACKAGE, SampleEventHandler
from eventrelay.routing.http_client import default_client


# ---------------------------------------------------------------------------
# Fake HTTP backend
# ---------------------------------------------------------------------------


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes


class RecordingBackend:
    """httpx.MockTransport handler that records every request it sees.

    Set ``error`` to make every request fail with that exception class.
    """

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self.error: type[httpx.TransportError] | None = None
        self.attempts = 0
        self._cond = threading.Condition()

    def handle(self, request: httpx.Request) -> httpx.Response:
        with self._cond:
            self.attempts += 1
            self._cond.notify_all()
            if self.error is not None:
                raise self.error("Connection refused", request=request)
            self.requests.append(
                RecordedRequest(
                    method=request.method,
                    url=str(request.url),
                    headers=dict(request.headers),
                    body=request.content,
                )
            )
            self._cond.notify_all()
        return httpx.Response(200, text="ok")

    def wait_for_attempts(self, count: int, timeout: float = 5.0) -> bool:
        """Block until *count* requests were attempted (successful or not)."""
        with self._cond:
            return self._cond.wait_for(lambda: self.attempts >= count, timeout)

    def client_factory(self) -> httpx.Client:
        return default_client(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def backend() -> RecordingBackend:
    """A fresh recording backend."""
    return RecordingBackend()


# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a ``[general]`` section and return the config dir."""

    def _factory(**general: str) -> Path:
        lines = ["[general]"]
        lines.extend(f"{key} = {value}" for key, value in general.items())
        (tmp_path / f"{PLUGIN_PACKAGE}.cfg").write_text("\n".join(lines) + "\n")
        return tmp_path

    return _factory


# ---------------------------------------------------------------------------
# Events and the host side
# ---------------------------------------------------------------------------


@dataclass
class ReleaseLog:
    """Counts release-hook firings per event."""

    counts: dict[int, int] = field(default_factory=dict)

    def __call__(self, event: HostEvent) -> None:
        self.counts[id(event)] = self.counts.get(id(event), 0) + 1

    def times_released(self, event: HostEvent) -> int:
        return self.counts.get(id(event), 0)


@pytest.fixture
def releases() -> ReleaseLog:
    return ReleaseLog()


@pytest.fixture
def make_event(releases: ReleaseLog) -> Callable[..., HostEvent]:
    """Factory fixture: build a HostEvent whose releases are counted."""

    def _factory(**data: Any) -> HostEvent:
        return HostEvent(dict(data), on_release=releases)

    return _factory


def host_dispatch(
    handler: SampleEventHandler, event: HostEvent, kind: EventKind = EventKind.SESSION
) -> bool:
    """Deliver *event* the way the host does: lend it, then drop the host's reference.

    Returns ``True`` if the mask let the event through.
    """
    delivered = bool(handler.events_mask & kind)
    if delivered:
        handler.incoming_event(event)
    event.decref()
    return delivered


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


@pytest.fixture
def handler(backend: RecordingBackend) -> Iterator[SampleEventHandler]:
    """A SampleEventHandler wired to the recording backend, destroyed on teardown."""
    sink = SampleEventHandler(client_factory=backend.client_factory)
    yield sink
    sink.destroy()


@pytest.fixture
def dispatch() -> Callable[..., bool]:
    """The host's delivery step, as a fixture."""
    return host_dispatch
