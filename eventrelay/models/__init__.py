"""eventrelay data models — event values, the subscription mask, the descriptor."""

from eventrelay.models.descriptor import EVENTHANDLER_API_VERSION, EventHandlerDescriptor
from eventrelay.models.events import EventReleaseError, HostEvent
from eventrelay.models.mask import EVENT_TOKENS, EventKind, parse_events_mask

__all__ = [
    "EVENTHANDLER_API_VERSION",
    "EVENT_TOKENS",
    "EventHandlerDescriptor",
    "EventKind",
    "EventReleaseError",
    "HostEvent",
    "parse_events_mask",
]
