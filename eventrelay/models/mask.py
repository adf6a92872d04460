"""Event kinds and the subscription mask parsed from ``general.events``."""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class EventKind(enum.IntFlag):
    """One bit per kind of event the host can emit.

    A mask is any combination of members; ``NONE`` is the empty mask and
    ``ALL`` the universe.
    """

    NONE = 0
    SESSION = 1 << 0
    HANDLE = 1 << 1
    JSEP = 1 << 2
    WEBRTC = 1 << 3
    MEDIA = 1 << 4
    PLUGIN = 1 << 5
    TRANSPORT = 1 << 6
    ALL = SESSION | HANDLE | JSEP | WEBRTC | MEDIA | PLUGIN | TRANSPORT


# Configuration token -> kind.  Tokens are matched case-insensitively.
EVENT_TOKENS: dict[str, EventKind] = {
    "sessions": EventKind.SESSION,
    "handles": EventKind.HANDLE,
    "jsep": EventKind.JSEP,
    "webrtc": EventKind.WEBRTC,
    "media": EventKind.MEDIA,
    "plugins": EventKind.PLUGIN,
    "transports": EventKind.TRANSPORT,
}


def parse_events_mask(
    value: str | None, current: EventKind = EventKind.NONE
) -> EventKind:
    """Apply a ``general.events`` value to *current* and return the new mask.

    * ``None`` or blank: *current* unchanged.
    * ``none``: the empty mask.
    * ``all``: every kind.
    * otherwise a comma-separated token list whose kinds are OR-ed into
      *current*.  Blank tokens are skipped; unknown tokens are logged and
      ignored.

    Examples
    --------
    >>> parse_events_mask("sessions, handles , foo") == EventKind.SESSION | EventKind.HANDLE
    True
    >>> parse_events_mask("none", EventKind.ALL) == EventKind.NONE
    True
    """
    if value is None or not value.strip():
        return current

    keyword = value.strip().lower()
    if keyword == "none":
        return EventKind.NONE
    if keyword == "all":
        return EventKind.ALL

    mask = current
    for raw in value.split(","):
        token = raw.strip()
        if not token:
            continue
        kind = EVENT_TOKENS.get(token.lower())
        if kind is None:
            logger.warning("Unknown event type '%s'", token)
            continue
        mask |= kind
    return mask


def kinds_in(mask: EventKind) -> list[EventKind]:
    """Return the single-bit kinds contained in *mask*, lowest bit first."""
    return [kind for kind in EVENT_TOKENS.values() if kind & mask]
