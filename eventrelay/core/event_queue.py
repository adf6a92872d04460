"""Unbounded multi-producer / single-consumer queue of host events.

Producers are host worker threads and must never block on I/O, so ``push``
is a short critical section around ``queue.Queue.put``.  The single consumer
blocks in ``pop`` until an entry arrives.

Shutdown is signalled with ``SENTINEL``: a process-wide marker object that
consumers recognise by identity (``entry is SENTINEL``).  At most one
sentinel is pushed per queue.
"""

from __future__ import annotations

import logging
import queue
import threading

from eventrelay.models.events import HostEvent

logger = logging.getLogger(__name__)


class _Sentinel:
    """Marker type for the shutdown sentinel.  Never instantiate directly."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "SENTINEL"


SENTINEL = _Sentinel()

QueueEntry = HostEvent | _Sentinel


class SentinelAlreadyQueuedError(RuntimeError):
    """Raised when a second shutdown sentinel is pushed onto the same queue."""


class EventQueue:
    """FIFO of event references plus, at most once, the shutdown sentinel.

    Every event reference pushed here is owned by the queue until it is
    popped.  Whatever is still queued when ``destroy`` runs is released
    exactly once; the sentinel is never released.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[QueueEntry] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._sentinel_queued = False

    @property
    def closed(self) -> bool:
        """``True`` once ``destroy`` has run."""
        with self._lock:
            return self._closed

    @property
    def sentinel_queued(self) -> bool:
        """``True`` once the shutdown sentinel has been pushed."""
        with self._lock:
            return self._sentinel_queued

    def __len__(self) -> int:
        return self._queue.qsize()

    def push(self, event: HostEvent) -> bool:
        """Append *event* without blocking.

        Returns ``False`` when the queue has already been destroyed; the
        caller then still owns its reference and must release it.
        """
        with self._lock:
            if self._closed:
                return False
            self._queue.put_nowait(event)
        return True

    def push_sentinel(self) -> None:
        """Append the shutdown sentinel.

        Raises
        ------
        SentinelAlreadyQueuedError
            If the sentinel was already pushed onto this queue.
        """
        with self._lock:
            if self._sentinel_queued:
                raise SentinelAlreadyQueuedError(
                    "Shutdown sentinel already queued"
                )
            self._sentinel_queued = True
            self._queue.put_nowait(SENTINEL)

    def pop(self) -> QueueEntry:
        """Block until an entry is available and return it."""
        return self._queue.get()

    def destroy(self) -> int:
        """Close the queue and release every event still in it.

        Returns the number of event references released.  Calling
        ``destroy`` again is a no-op that returns ``0``.
        """
        with self._lock:
            if self._closed:
                return 0
            self._closed = True

        released = 0
        while True:
            try:
                entry = self._queue.get_nowait()
            except queue.Empty:
                break
            if entry is SENTINEL:
                continue
            entry.decref()
            released += 1

        if released:
            logger.debug("Released %d queued event(s) on queue teardown", released)
        return released
