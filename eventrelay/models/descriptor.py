"""EventHandlerDescriptor — the record the host reads after ``create()``.

The descriptor carries the sink's static metadata and its entry points.  It
is frozen: once handed to the host nothing in it can be rebound.  The events
mask is the one live value; it is read through the handler, which sets it
during ``init`` before the host starts dispatching.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from eventrelay.models.events import HostEvent
from eventrelay.models.mask import EventKind

# Must match the host's expected value or the host rejects the plugin.
EVENTHANDLER_API_VERSION = 3


@runtime_checkable
class EventHandler(Protocol):
    """What the descriptor needs from the sink implementation."""

    @property
    def events_mask(self) -> EventKind:
        ...

    def init(self, config_path: str | None) -> int:
        ...

    def destroy(self) -> None:
        ...

    def incoming_event(self, event: HostEvent) -> None:
        ...


class EventHandlerDescriptor(BaseModel):
    """Immutable plugin record published to the host.

    Examples
    --------
    >>> from eventrelay import create
    >>> descriptor = create()
    >>> descriptor.get_api_compatibility() == EVENTHANDLER_API_VERSION
    True
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    api_compatibility: int = EVENTHANDLER_API_VERSION
    version: int
    version_string: str
    description: str
    name: str
    author: str
    package: str
    handler: EventHandler

    # -- Entry points -------------------------------------------------------

    @property
    def events_mask(self) -> EventKind:
        """Kinds the host should deliver to ``incoming_event``."""
        return self.handler.events_mask

    @property
    def init(self) -> Callable[[str | None], int]:
        return self.handler.init

    @property
    def destroy(self) -> Callable[[], None]:
        return self.handler.destroy

    @property
    def incoming_event(self) -> Callable[[HostEvent], None]:
        return self.handler.incoming_event

    # -- Metadata accessors -------------------------------------------------

    def get_api_compatibility(self) -> int:
        return self.api_compatibility

    def get_version(self) -> int:
        return self.version

    def get_version_string(self) -> str:
        return self.version_string

    def get_description(self) -> str:
        return self.description

    def get_name(self) -> str:
        return self.name

    def get_author(self) -> str:
        return self.author

    def get_package(self) -> str:
        return self.package
