"""SampleEventHandler — the host-facing side of the event relay.

Host protocol
-------------
1. ``create()`` returns the descriptor; the host checks its API version.
2. ``init(config_path)`` reads the configuration, sets the events mask and
   starts the forwarder thread.  Returns ``0`` on success, ``-1`` otherwise.
3. ``incoming_event(event)`` is called from host worker threads, possibly
   concurrently, for every event whose kind is in the mask.
4. ``destroy()`` stops the forwarder, drains the queue and resets the sink
   so that ``init`` may be called again.

``incoming_event`` runs on latency-sensitive host threads: it never performs
I/O and never inspects the event.  It takes its own reference and queues
the event; everything else happens on the forwarder thread.
"""

from __future__ import annotations

import logging
from pathlib import Path

from eventrelay.config import (
    backend_is_valid,
    config_filename,
    general_section,
    load_config,
    print_config,
)
from eventrelay.core.event_queue import EventQueue
from eventrelay.core.levels import VERBOSE, install_level_names
from eventrelay.core.lifecycle import LifecycleFlags, LifecycleState
from eventrelay.models.descriptor import EVENTHANDLER_API_VERSION, EventHandlerDescriptor
from eventrelay.models.events import HostEvent
from eventrelay.models.mask import EventKind, kinds_in, parse_events_mask
from eventrelay.routing.forwarder import ForwarderWorker
from eventrelay.routing.http_client import ClientFactory, HttpClientFactory

logger = logging.getLogger(__name__)

PLUGIN_VERSION = 1
PLUGIN_VERSION_STRING = "0.0.1"
PLUGIN_DESCRIPTION = (
    "This is a trivial sample event handler plugin for Janus, "
    "which forwards events via HTTP POST."
)
PLUGIN_NAME = "JANUS SampleEventHandler plugin"
PLUGIN_AUTHOR = "Meetecho s.r.l."
PLUGIN_PACKAGE = "janus.eventhandler.sampleevh"

INIT_OK = 0
INIT_FAILED = -1


class PluginInitError(RuntimeError):
    """Raised when the plugin cannot be initialised.

    ``init`` turns it into the host's failure code; it never reaches the host.
    """


class SampleEventHandler:
    """Event sink that relays every host event to an HTTP backend.

    Parameters
    ----------
    client_factory:
        Builds the per-event ``httpx.Client``.  Defaults to a plain client
        with no timeout.
    """

    def __init__(self, client_factory: ClientFactory | None = None) -> None:
        self._flags = LifecycleFlags()
        self._clients = HttpClientFactory(client_factory)
        self._events_mask = EventKind.NONE
        self._backend: str | None = None
        self._queue: EventQueue | None = None
        self._worker: ForwarderWorker | None = None

    # ------------------------------------------------------------------
    # State (read-only views)
    # ------------------------------------------------------------------

    @property
    def events_mask(self) -> EventKind:
        return self._events_mask

    @property
    def backend(self) -> str | None:
        return self._backend

    @property
    def initialised(self) -> bool:
        return self._flags.initialised

    @property
    def stopping(self) -> bool:
        return self._flags.stopping

    @property
    def queue(self) -> EventQueue | None:
        return self._queue

    @property
    def worker(self) -> ForwarderWorker | None:
        return self._worker

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, config_path: str | Path | None) -> int:
        """Configure the sink and start forwarding.

        Returns ``0`` on success and ``-1`` on any failure; the reason is
        logged.
        """
        try:
            self._init(config_path)
        except PluginInitError as exc:
            logger.error("%s", exc)
            return INIT_FAILED
        logger.info("%s initialized!", PLUGIN_NAME)
        return INIT_OK

    def _init(self, config_path: str | Path | None) -> None:
        if self._flags.stopping:
            raise PluginInitError("Still stopping from a previous run")
        if self._flags.initialised:
            raise PluginInitError("Already initialized")
        if config_path is None:
            raise PluginInitError("Missing configuration path")

        backend = self._configure(config_path)
        if backend is None:
            logger.critical("Sample event handler not enabled/needed, giving up...")
            raise PluginInitError("Sample event handler not enabled")
        logger.log(VERBOSE, "Sample event handler configured: %s", backend)
        logger.log(
            VERBOSE,
            "Subscribed to: %s",
            ", ".join(kind.name.lower() for kind in kinds_in(self._events_mask)) or "none",
        )

        HttpClientFactory.global_init()

        self._backend = backend
        self._queue = EventQueue()
        self._flags.transition(LifecycleState.UP)

        worker = ForwarderWorker(self._queue, backend, self._flags, self._clients)
        try:
            worker.start()
        except RuntimeError as exc:
            self._flags.transition(LifecycleState.DOWN)
            self._queue.destroy()
            self._queue = None
            self._backend = None
            raise PluginInitError(
                f"Got error trying to launch the SampleEventHandler handler thread: {exc}"
            ) from exc
        self._worker = worker

    def _configure(self, config_path: str | Path) -> str | None:
        """Read the configuration file and apply it.

        Returns the backend URL when the sink is enabled, ``None`` otherwise.
        The events mask is only touched when the sink is enabled.
        """
        filename = config_filename(config_path, PLUGIN_PACKAGE)
        logger.log(VERBOSE, "Configuration file: %s", filename)
        sections = load_config(filename)
        if sections is None:
            return None
        print_config(sections)

        general = general_section(sections)
        if not general.enabled:
            logger.warning("Sample event handler disabled")
            return None
        if not backend_is_valid(general.backend):
            logger.warning("Missing or invalid backend")
            return None

        self._events_mask = parse_events_mask(general.events, self._events_mask)
        return general.backend

    def destroy(self) -> None:
        """Stop forwarding and release everything ``init`` acquired.

        Blocks until the forwarder finishes its in-flight request.  Safe to
        call when not initialised.
        """
        if not self._flags.initialised:
            return
        self._flags.transition(LifecycleState.STOPPING)

        events = self._queue
        if events is not None:
            events.push_sentinel()
        if self._worker is not None:
            self._worker.join()
            self._worker = None
        if events is not None:
            events.destroy()
            self._queue = None
        self._backend = None

        self._flags.transition(LifecycleState.DOWN)
        logger.info("%s destroyed!", PLUGIN_NAME)

    # ------------------------------------------------------------------
    # Ingress (host worker threads)
    # ------------------------------------------------------------------

    def incoming_event(self, event: HostEvent) -> None:
        """Queue *event* for forwarding.  Never blocks on I/O.

        The host keeps its own reference for the duration of the call.
        While the sink is up it takes one more and queues the event; the
        forwarder (or the queue teardown) releases it.  While down or
        stopping the event is ignored and no reference is taken.
        """
        events = self._queue
        if events is None or not self._flags.accepting:
            return
        event.incref()
        if not events.push(event):
            # destroy() closed the queue after the flag check
            event.decref()


# ---------------------------------------------------------------------------
# Process-wide instance and host entry points
# ---------------------------------------------------------------------------

_handler = SampleEventHandler()
_descriptor: EventHandlerDescriptor | None = None


def create() -> EventHandlerDescriptor:
    """Return the descriptor of the process-wide handler."""
    global _descriptor
    install_level_names()
    if _descriptor is None:
        _descriptor = build_descriptor(_handler)
    logger.log(VERBOSE, "%s created!", PLUGIN_NAME)
    return _descriptor


def build_descriptor(handler: SampleEventHandler) -> EventHandlerDescriptor:
    """Wrap *handler* in a descriptor carrying the plugin metadata."""
    return EventHandlerDescriptor(
        api_compatibility=EVENTHANDLER_API_VERSION,
        version=PLUGIN_VERSION,
        version_string=PLUGIN_VERSION_STRING,
        description=PLUGIN_DESCRIPTION,
        name=PLUGIN_NAME,
        author=PLUGIN_AUTHOR,
        package=PLUGIN_PACKAGE,
        handler=handler,
    )


def init(config_path: str | Path | None) -> int:
    return _handler.init(config_path)


def destroy() -> None:
    _handler.destroy()


def incoming_event(event: HostEvent) -> None:
    _handler.incoming_event(event)
