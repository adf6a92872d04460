"""Plugin lifecycle state — the ``initialised`` / ``stopping`` flags.

The two process-wide booleans are folded into one three-valued state so
that every change is a single atomic transition:

    down      (initialised=False, stopping=False)
    up        (initialised=True,  stopping=False)
    stopping  (initialised=True,  stopping=True)

Any thread may read the flags.  Only the host's control thread (init and
destroy) changes them, through ``transition``.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """The three lifecycle states of the sink."""

    DOWN = "down"
    UP = "up"
    STOPPING = "stopping"


VALID_TRANSITIONS: dict[LifecycleState, set[LifecycleState]] = {
    LifecycleState.DOWN: {LifecycleState.UP},
    # UP -> DOWN only when the forwarder thread could not be started
    LifecycleState.UP: {LifecycleState.STOPPING, LifecycleState.DOWN},
    LifecycleState.STOPPING: {LifecycleState.DOWN},
}


class InvalidLifecycleTransitionError(RuntimeError):
    """Raised when a requested lifecycle transition is not valid."""


class LifecycleFlags:
    """Thread-safe holder of the sink's lifecycle state."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = LifecycleState.DOWN

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def initialised(self) -> bool:
        with self._lock:
            return self._state is not LifecycleState.DOWN

    @property
    def stopping(self) -> bool:
        with self._lock:
            return self._state is LifecycleState.STOPPING

    @property
    def accepting(self) -> bool:
        """``True`` when initialised and not stopping: events may be queued."""
        with self._lock:
            return self._state is LifecycleState.UP

    def transition(self, target: LifecycleState) -> None:
        """Move to *target*.

        Raises
        ------
        InvalidLifecycleTransitionError
            If *target* is not reachable from the current state.
        """
        with self._lock:
            current = self._state
            if target not in VALID_TRANSITIONS[current]:
                raise InvalidLifecycleTransitionError(
                    f"Invalid lifecycle transition: {current.value} -> {target.value}"
                )
            self._state = target
        logger.debug("Lifecycle: %s -> %s", current.value, target.value)
