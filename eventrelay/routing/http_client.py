"""HTTP client plumbing for the forwarder — built on ``httpx``.

Each event is POSTed with a freshly obtained client which is closed right
after the request.  Requests carry no timeout, so shutdown waits for an
in-flight POST to complete on its own.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import httpx

from eventrelay.core.levels import VERBOSE

logger = logging.getLogger(__name__)

# Exactly these three headers go out with every event.  ``charsets`` is not a
# standard header name; backends already match on it.
EVENT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "charsets": "utf-8",
}

ClientFactory = Callable[[], httpx.Client]


# httpx defaults stripped so only EVENT_HEADERS (plus Host and Content-Length)
# go out.
CLIENT_DEFAULT_HEADERS = ("User-Agent", "Accept-Encoding", "Connection")


def default_client(transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Build a plain synchronous client: no timeout, no redirects.

    *transport* replaces the network transport; tests pass an
    ``httpx.MockTransport``.
    """
    client = httpx.Client(transport=transport, timeout=None, follow_redirects=False)
    for name in CLIENT_DEFAULT_HEADERS:
        client.headers.pop(name, None)
    return client


class HttpClientFactory:
    """Hands out one fresh ``httpx.Client`` per event.

    Parameters
    ----------
    client_factory:
        Callable returning a new client.  Tests pass one that builds a
        client around ``httpx.MockTransport``.
    """

    _global_lock = threading.Lock()
    _global_ready = False

    def __init__(self, client_factory: ClientFactory | None = None) -> None:
        self._client_factory = client_factory or default_client

    @classmethod
    def global_init(cls) -> None:
        """Mark the HTTP client library as ready and log its version.

        httpx needs no process-wide set-up, so nothing is initialised here;
        the call only keeps the host's start-up sequence and its log line.
        Runs once; later calls are no-ops.
        """
        with cls._global_lock:
            if cls._global_ready:
                return
            cls._global_ready = True
        logger.log(VERBOSE, "HTTP client library initialized (httpx %s)", httpx.__version__)

    def new_client(self) -> httpx.Client:
        """Return a new client; the caller must close it."""
        return self._client_factory()


def post_event(client: httpx.Client, url: str, body: bytes) -> httpx.Response:
    """POST *body* to *url* with the event headers.

    The response body is read and discarded; its status is not checked.

    Raises
    ------
    httpx.HTTPError
        On any transport-level failure.
    """
    response = client.post(url, content=body, headers=EVENT_HEADERS)
    response.read()
    return response
