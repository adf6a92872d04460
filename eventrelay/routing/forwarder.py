"""ForwarderWorker — drains the event queue and POSTs each event.

A single background thread owns all I/O of the sink.  For every event it
pops it logs the in-queue latency, renders the JSON body, POSTs it to the
backend and releases its reference.  HTTP failures are logged and the event
is dropped; nothing here stops the loop except the shutdown sentinel or the
lifecycle flags reporting that the sink is going down.
"""

from __future__ import annotations

import logging
import threading
import time

import httpx

from eventrelay.core.event_queue import SENTINEL, EventQueue
from eventrelay.core.levels import VERBOSE
from eventrelay.core.lifecycle import LifecycleFlags
from eventrelay.models.events import HostEvent
from eventrelay.routing._formatting import render_event_body
from eventrelay.routing.http_client import HttpClientFactory, post_event

logger = logging.getLogger(__name__)

THREAD_NAME = "sampleevh handler"


def monotonic_us() -> int:
    """Monotonic clock in microseconds, the unit of event ``timestamp`` fields."""
    return time.monotonic_ns() // 1000


def queue_delay_us(event: HostEvent, now_us: int) -> int | None:
    """Microseconds between the event's ``timestamp`` and *now_us*.

    ``None`` when the field is missing or not an integer.
    """
    then = event.get("timestamp")
    if isinstance(then, bool) or not isinstance(then, int):
        return None
    return int(now_us - then)


class ForwarderWorker:
    """The sink's single consumer thread.

    Parameters
    ----------
    events:
        Queue to drain.  The worker releases every event it pops.
    backend:
        Target URL, fixed for the worker's lifetime.
    flags:
        Shared lifecycle flags; the worker exits if it sees the sink down or
        stopping.
    clients:
        Source of per-event HTTP clients.
    """

    def __init__(
        self,
        events: EventQueue,
        backend: str,
        flags: LifecycleFlags,
        clients: HttpClientFactory,
    ) -> None:
        self._events = events
        self._backend = backend
        self._flags = flags
        self._clients = clients
        self._thread: threading.Thread | None = None

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread.

        Raises
        ------
        RuntimeError
            If the thread cannot be started.
        """
        thread = threading.Thread(target=self.run, name=THREAD_NAME, daemon=True)
        thread.start()
        self._thread = thread

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None

    # ------------------------------------------------------------------
    # Consumer loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Consume the queue until the sentinel arrives or the sink stops."""
        logger.log(VERBOSE, "Joining SampleEventHandler handler thread")
        while True:
            entry = self._events.pop()
            if entry is SENTINEL:
                break
            if not self._flags.accepting:
                entry.decref()
                break
            try:
                self.forward(entry)
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error forwarding event")
            finally:
                entry.decref()
        logger.log(VERBOSE, "Leaving SampleEventHandler handler thread")

    def forward(self, event: HostEvent) -> bool:
        """POST one event to the backend; ``True`` if the request went out.

        Does not release *event*; the caller owns the reference.
        """
        delay = queue_delay_us(event, monotonic_us())
        if delay is not None:
            logger.debug("Handled event after %d us", delay)

        body = render_event_body(event.data)

        try:
            client = self._clients.new_client()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error initializing HTTP client: %s", exc)
            return False

        with client:
            try:
                post_event(client, self._backend, body)
            except httpx.HTTPError as exc:
                logger.error("Couldn't relay event to the backend: %s", exc)
                return False
        logger.debug("Event sent!")
        return True

    def __repr__(self) -> str:
        return f"ForwarderWorker(backend={self._backend!r}, alive={self.is_alive})"

