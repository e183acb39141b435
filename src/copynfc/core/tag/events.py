"""Transport events consumed by a tag session.

Each callback the transport can deliver is one event class. The session
routes them through its @handles table; every other type is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from copynfc.core.tag.handle import TagHandle


@dataclass(frozen=True)
class Event:
    """Base class for transport events."""


@dataclass(frozen=True)
class TagsDetected(Event):
    """Tags seen by the radio, in the order the transport reports them."""

    tags: tuple[TagHandle, ...] = ()


@dataclass(frozen=True)
class Connected(Event):
    """Connection to the selected tag succeeded."""


@dataclass(frozen=True)
class ConnectFailed(Event):
    reason: Exception | str | None = None


@dataclass(frozen=True)
class ExchangeResponse(Event):
    """Response to the read command."""

    data: bytes
    sw1: int
    sw2: int


@dataclass(frozen=True)
class ExchangeFailed(Event):
    reason: Exception | str | None = None


@dataclass(frozen=True)
class SessionEnded(Event):
    """The transport tore the session down."""

    reason: Exception | str | None = None
