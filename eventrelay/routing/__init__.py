"""eventrelay routing — moves queued events to the HTTP backend.

The ForwarderWorker is the only consumer of the event queue.  It renders
each event as indented JSON and POSTs it with a fresh httpx client.
HTTP failures are logged and the event is dropped; there is no retry.
"""

from eventrelay.routing.forwarder import ForwarderWorker
from eventrelay.routing.http_client import EVENT_HEADERS, HttpClientFactory

__all__ = ["ForwarderWorker", "HttpClientFactory", "EVENT_HEADERS"]
