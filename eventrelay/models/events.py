"""Host event values — JSON documents shared by reference count.

The host owns every event it emits and lends it to each sink for the
duration of the ingress call.  A sink that wants to keep the event past the
call acquires its own reference and releases it once done.  When the last
reference is released the optional release hook fires, exactly once.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any


class EventReleaseError(RuntimeError):
    """Raised when an event reference is released more often than acquired."""


class HostEvent:
    """A reference-counted JSON object produced by the host.

    The document itself is a plain ``dict``; its insertion order is the key
    order used on the wire.  Sinks must treat it as read-only.

    Parameters
    ----------
    data:
        The JSON object.  Key order is preserved.
    on_release:
        Called with the event when the reference count drops to zero.

    Examples
    --------
    >>> event = HostEvent({"timestamp": 1000, "a": 1})
    >>> event.incref().refcount
    2
    >>> event.decref(); event.decref()
    >>> event.released
    True
    """

    __slots__ = ("_data", "_refcount", "_lock", "_on_release")

    def __init__(
        self,
        data: dict[str, Any],
        *,
        on_release: Callable[[HostEvent], None] | None = None,
    ) -> None:
        self._data = data
        self._refcount = 1
        self._lock = threading.Lock()
        self._on_release = on_release

    @property
    def data(self) -> dict[str, Any]:
        """The underlying JSON object."""
        return self._data

    @property
    def refcount(self) -> int:
        """Number of live references."""
        with self._lock:
            return self._refcount

    @property
    def released(self) -> bool:
        """``True`` once the last reference has been released."""
        with self._lock:
            return self._refcount == 0

    def get(self, key: str, default: Any = None) -> Any:
        """Return a top-level field of the document."""
        return self._data.get(key, default)

    def incref(self) -> HostEvent:
        """Acquire one more reference and return the event.

        Raises
        ------
        EventReleaseError
            If the event has already been fully released.
        """
        with self._lock:
            if self._refcount == 0:
                raise EventReleaseError("Cannot acquire a released event")
            self._refcount += 1
        return self

    def decref(self) -> None:
        """Release one reference, firing the release hook on the last one.

        Raises
        ------
        EventReleaseError
            If no reference is left to release.
        """
        with self._lock:
            if self._refcount == 0:
                raise EventReleaseError("Event released more often than acquired")
            self._refcount -= 1
            last = self._refcount == 0
        if last and self._on_release is not None:
            self._on_release(self)

    def __repr__(self) -> str:
        return f"HostEvent(refcount={self.refcount}, keys={list(self._data)!r})"
