"""Tag scan session state machine.

A TagSession drives one scan: the transport reports tags, the session
picks the first tag of the supported family, connects, sends the read
command and turns the response into a CapturedTag appended to the store.

    IDLE -> POLLING -> CONNECTING -> EXCHANGING -> COMPLETED
                           |             |
                           v             v
                         FAILED        FAILED

SessionEnded moves any non-terminal state to INVALIDATED. Once terminal,
a session ignores every further event.

Transitions are decided under the session lock. Transport calls and the
finished callback run after the lock is released, so a transport may answer
synchronously from inside connect() or send(), or from its own thread.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Protocol

from copynfc.core.base import Dispatcher, handles
from copynfc.core.smartcard.logging import PROTOCOL, format_sw
from copynfc.core.tag.commands import build_read_command
from copynfc.core.tag.errors import (
    ExchangeError,
    SessionAlreadyActive,
    SessionInvalidated,
    TagConnectionError,
    TagError,
)
from copynfc.core.tag.events import (
    ConnectFailed,
    Connected,
    Event,
    ExchangeFailed,
    ExchangeResponse,
    SessionEnded,
    TagsDetected,
)
from copynfc.core.tag.handle import TagFamily, TagHandle
from copynfc.core.tag.record import CapturedTag
from copynfc.core.tag.store import CapturedTagStore

lg = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    POLLING = "polling"
    CONNECTING = "connecting"
    EXCHANGING = "exchanging"
    COMPLETED = "completed"
    FAILED = "failed"
    INVALIDATED = "invalidated"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED, SessionState.INVALIDATED)


class Transport(Protocol):
    """Radio driver as seen by a session.

    Results come back through the session's on_* methods (or dispatch()),
    either synchronously or later from the transport's own thread.
    """

    def begin(self, session: TagSession) -> None: ...
    def connect(self, handle: TagHandle) -> None: ...
    def send(self, command: bytes) -> None: ...
    def invalidate(self) -> None: ...


def _wrap(error_cls: type[TagError], reason: Exception | str | None, default: str) -> TagError:
    error = error_cls(str(reason) if reason else default)
    if isinstance(reason, BaseException):
        error.__cause__ = reason
    return error


class TagSession(Dispatcher):
    """One scan, from start() to a terminal state."""

    def __init__(
        self,
        transport: Transport,
        store: CapturedTagStore,
        *,
        family: TagFamily = TagFamily.MIFARE,
        on_finished: Callable[[TagSession], None] | None = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._family = family
        self._on_finished = on_finished
        self._state = SessionState.IDLE
        self._handle: TagHandle | None = None
        self._record: CapturedTag | None = None
        self._error: TagError | None = None
        self._lock = threading.RLock()
        self._deferred: list[tuple[Callable, tuple]] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def handle(self) -> TagHandle | None:
        """The tag selected for this session, once one was detected."""
        return self._handle

    @property
    def record(self) -> CapturedTag | None:
        return self._record

    @property
    def error(self) -> TagError | None:
        return self._error

    # -- lifecycle --

    def start(self) -> None:
        """Begin polling. Raises SessionAlreadyActive unless IDLE."""
        with self._lock:
            if self._state is not SessionState.IDLE:
                raise SessionAlreadyActive(f"session already {self._state.value}")
            self._transition(SessionState.POLLING)
        self._transport.begin(self)

    def dispatch(self, event: Event) -> object:
        try:
            with self._lock:
                if self._state.terminal:
                    lg.debug("session %s, ignoring %s", self._state.value, type(event).__name__)
                    return None
                return super().dispatch(event)
        finally:
            self._run_deferred()

    # -- transport callbacks --

    def on_tags_detected(self, tags: Iterable[TagHandle]) -> None:
        self.dispatch(TagsDetected(tuple(tags)))

    def on_connected(self) -> None:
        self.dispatch(Connected())

    def on_connect_error(self, reason: Exception | str | None = None) -> None:
        self.dispatch(ConnectFailed(reason))

    def on_exchange_response(self, data: bytes, sw1: int, sw2: int) -> CapturedTag | None:
        return self.dispatch(ExchangeResponse(bytes(data), sw1, sw2))

    def on_exchange_error(self, reason: Exception | str | None = None) -> None:
        self.dispatch(ExchangeFailed(reason))

    def on_session_invalidated(self, reason: Exception | str | None = None) -> None:
        self.dispatch(SessionEnded(reason))

    # -- handlers --

    @handles(TagsDetected)
    def _tags_detected(self, event: TagsDetected) -> None:
        if not self._expect(event, SessionState.POLLING) or not event.tags:
            return
        handle = next(
            (t for t in event.tags if t.family is self._family and t.identifier), None
        )
        if handle is None:
            lg.info(
                "ignoring %d tag(s), none of family %s with an identifier",
                len(event.tags), self._family.value,
            )
            return
        self._handle = handle
        self._transition(SessionState.CONNECTING)
        self._defer(self._transport.connect, handle)

    @handles(Connected)
    def _connected(self, event: Connected) -> None:
        if not self._expect(event, SessionState.CONNECTING):
            return
        command = build_read_command()
        self._transition(SessionState.EXCHANGING)
        lg.log(PROTOCOL, "READ %s", command.hex(" ").upper())
        self._defer(self._transport.send, command)

    @handles(ConnectFailed)
    def _connect_failed(self, event: ConnectFailed) -> None:
        if self._expect(event, SessionState.CONNECTING):
            self._fail(_wrap(TagConnectionError, event.reason, "connection failed"))

    @handles(ExchangeResponse)
    def _exchange_response(self, event: ExchangeResponse) -> CapturedTag | None:
        if not self._expect(event, SessionState.EXCHANGING):
            return None
        handle = self._handle
        try:
            record = CapturedTag.create(
                identifier=handle.identifier,
                historical_bytes=handle.historical_bytes,
                response_data=event.data,
                sw1=event.sw1,
                sw2=event.sw2,
            )
        except ValueError as exc:
            self._fail(_wrap(ExchangeError, exc, "invalid response"))
            return None
        lg.log(PROTOCOL, "READ %s", format_sw(event.sw1, event.sw2))
        self._record = record
        try:
            self._store.append(record)
        finally:
            self._transition(SessionState.COMPLETED)
            self._defer(self._transport.invalidate)
        return record

    @handles(ExchangeFailed)
    def _exchange_failed(self, event: ExchangeFailed) -> None:
        if self._expect(event, SessionState.EXCHANGING):
            self._fail(_wrap(ExchangeError, event.reason, "exchange failed"))

    @handles(SessionEnded)
    def _session_ended(self, event: SessionEnded) -> None:
        self._error = _wrap(SessionInvalidated, event.reason, "session invalidated")
        lg.warning("session invalidated: %s", self._error)
        self._transition(SessionState.INVALIDATED)

    # -- helpers --

    def _expect(self, event: Event, state: SessionState) -> bool:
        if self._state is state:
            return True
        lg.warning("unexpected %s while %s", type(event).__name__, self._state.value)
        return False

    def _fail(self, error: TagError) -> None:
        self._error = error
        lg.error("%s: %s", type(error).__name__, error)
        self._transition(SessionState.FAILED)

    def _transition(self, state: SessionState) -> None:
        lg.log(PROTOCOL, "session %s -> %s", self._state.value, state.value)
        self._state = state
        if state.terminal and self._on_finished is not None:
            self._defer(self._on_finished, self)

    def _defer(self, action: Callable, *args: object) -> None:
        self._deferred.append((action, args))

    def _run_deferred(self) -> None:
        with self._lock:
            actions, self._deferred = self._deferred, []
        for action, args in actions:
            action(*args)
