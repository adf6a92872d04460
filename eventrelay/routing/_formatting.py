"""JSON rendering of events for the wire.

The body of every POST is the event document indented by three spaces, keys
in their original order, non-ASCII characters written as UTF-8 rather than
escaped.  Backends may compare bodies byte for byte, so the format is fixed.
"""

from __future__ import annotations

import json
from typing import Any

JSON_INDENT = 3


def render_event_text(document: dict[str, Any]) -> str:
    """Return *document* as indented JSON text, key order preserved.

    Examples
    --------
    >>> print(render_event_text({"timestamp": 1000, "a": 1}))
    {
       "timestamp": 1000,
       "a": 1
    }
    """
    return json.dumps(document, indent=JSON_INDENT, ensure_ascii=False)


def render_event_body(document: dict[str, Any]) -> bytes:
    """Return the UTF-8 request body for *document*."""
    return render_event_text(document).encode("utf-8")
