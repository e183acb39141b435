"""PC/SC transport for tag sessions.

Polls every reader for a contactless card, reports what it finds to the
session and carries out the session's connect/send requests. Everything
runs on the caller's thread: begin() returns once the session has left
POLLING or the transport has ended it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from copynfc.core.smartcard.atr import card_name, classify, tag_historical_bytes
from copynfc.core.smartcard.logging import PROTOCOL
from copynfc.core.smartcard.types import CardError
from copynfc.core.tag.handle import TagHandle
from copynfc.core.tag.session import SessionState, TagSession

lg = logging.getLogger(__name__)


class PcscTransport:
    """Transport backed by pyscard readers.

    *card_factory* and *list_readers* default to the pyscard Card wrapper.
    """

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        interval: float = 0.5,
        card_factory: Callable | None = None,
        list_readers: Callable[[], list] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if card_factory is None or list_readers is None:
            from copynfc.core.smartcard.card import Card

            card_factory = card_factory or Card
            list_readers = list_readers or Card.list_readers
        self._card_factory = card_factory
        self._list_readers = list_readers
        self._timeout = timeout
        self._interval = interval
        self._clock = clock
        self._sleep = sleep
        self._session: TagSession | None = None
        self._card = None
        self._active = False
        self._reported: set[tuple[str, bytes]] = set()

    def begin(self, session: TagSession) -> None:
        self._session = session
        self._active = True
        self._reported = set()
        deadline = self._clock() + self._timeout
        lg.info("hold a tag near the reader")
        while self._active:
            try:
                readers = self._list_readers()
            except CardError as exc:
                self._end(exc)
                return
            if not readers:
                self._end("no readers found")
                return
            handles = self._poll(readers)
            if handles:
                session.on_tags_detected(handles)
                if session.state is not SessionState.POLLING:
                    return
            if self._clock() >= deadline:
                self._end("session timeout")
                return
            self._sleep(self._interval)

    def _poll(self, readers: list) -> list[TagHandle]:
        """Return handles for cards not reported by the previous poll."""
        handles = []
        present = set()
        for reader in readers:
            card = self._card_factory()
            try:
                card.connect(reader)
            except CardError as exc:
                lg.debug("no tag on %s: %s", reader, exc)
                continue
            try:
                atr = card.get_atr()
                uid = card.get_uid()
            except CardError as exc:
                lg.debug("cannot identify tag on %s: %s", reader, exc)
                continue
            finally:
                card.disconnect()
            if uid is None:
                lg.debug("reader %s reports no UID", reader)
                continue
            key = (str(reader), uid)
            present.add(key)
            if key in self._reported:
                continue
            family = classify(atr)
            lg.log(
                PROTOCOL, "tag %s on %s (%s)",
                uid.hex(" ").upper(), reader, card_name(atr) or family.value,
            )
            handles.append(TagHandle(
                family=family,
                identifier=uid,
                historical_bytes=tag_historical_bytes(atr),
                source=reader,
            ))
        self._reported = present
        return handles

    def connect(self, handle: TagHandle) -> None:
        card = self._card_factory()
        try:
            card.connect(handle.source)
            uid = card.get_uid()
        except CardError as exc:
            card.disconnect()
            self._session.on_connect_error(exc)
            return
        if uid != handle.identifier:
            card.disconnect()
            self._session.on_connect_error("tag left the field")
            return
        self._card = card
        self._session.on_connected()

    def send(self, command: bytes) -> None:
        if self._card is None:
            self._session.on_exchange_error("not connected to a tag")
            return
        try:
            response = self._card.transmit(command)
        except CardError as exc:
            self._session.on_exchange_error(exc)
            return
        self._session.on_exchange_response(response.data, response.sw1, response.sw2)

    def invalidate(self) -> None:
        self._end("session invalidated")

    def _end(self, reason: Exception | str) -> None:
        if not self._active:
            return
        self._active = False
        if self._card is not None:
            self._card.disconnect()
            self._card = None
        if self._session is not None:
            self._session.on_session_invalidated(reason)
