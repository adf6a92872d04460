"""eventrelay: forwards media-server events to an HTTP backend.

The host media server notifies the sink from its own worker threads.  The
sink hands every event to a background forwarder that POSTs it, as JSON, to
the configured backend:

  - Non-blocking ingress into an unbounded in-process queue
  - Single forwarder thread, one HTTP POST per event
  - Event-kind subscription mask read from ``general.events``
  - Sentinel-based shutdown that drains and joins the forwarder
"""

__version__ = "0.0.1"
__author__ = "Meetecho s.r.l."
__description__ = (
    "This is a trivial sample event handler plugin for Janus, "
    "which forwards events via HTTP POST."
)

from eventrelay.plugin import SampleEventHandler, create, destroy, incoming_event, init

__all__ = [
    "SampleEventHandler",
    "create",
    "init",
    "destroy",
    "incoming_event",
    "__version__",
]
