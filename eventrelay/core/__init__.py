"""Core primitives: the event queue, lifecycle flags and host log levels."""

from eventrelay.core.event_queue import SENTINEL, EventQueue
from eventrelay.core.levels import VERBOSE, install_level_names
from eventrelay.core.lifecycle import LifecycleFlags, LifecycleState

__all__ = [
    "SENTINEL",
    "EventQueue",
    "LifecycleFlags",
    "LifecycleState",
    "VERBOSE",
    "install_level_names",
]
