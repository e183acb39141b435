from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import SmartcardException
from smartcard.System import readers

from copynfc.core.smartcard.observer import LoggingCardObserver
from copynfc.core.smartcard.types import CardError, Response

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)

# PC/SC pseudo-APDU: GET DATA, UID of the contactless card in the field.
GET_UID = [0xFF, 0xCA, 0x00, 0x00, 0x00]


class Card:
    """Wrapper around pyscard for one reader connection.

    pyscard errors are re-raised as CardError so callers never depend on
    pyscard's exception types.
    """

    def __init__(self) -> None:
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        try:
            return readers()
        except SmartcardException as exc:
            raise CardError(f"cannot list readers: {exc}") from exc

    def connect(self, reader: Reader) -> None:
        connection = reader.createConnection()
        connection.addObserver(self._observer)
        try:
            connection.connect()
        except SmartcardException as exc:
            connection.deleteObserver(self._observer)
            raise CardError(str(exc)) from exc
        self._connection = connection

    def disconnect(self) -> None:
        if self._connection is not None:
            try:
                self._connection.disconnect()
            except SmartcardException as exc:
                lg.debug("disconnect failed: %s", exc)
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def _require(self) -> CardConnection:
        if self._connection is None:
            raise CardError("not connected to a card")
        return self._connection

    def get_uid(self) -> bytes | None:
        """Return the contactless UID, or None if the reader does not report one."""
        connection = self._require()
        try:
            data, sw1, sw2 = connection.transmit(GET_UID)
        except SmartcardException as exc:
            raise CardError(str(exc)) from exc
        if sw1 == 0x90 and sw2 == 0x00 and data:
            return bytes(data)
        return None

    def get_atr(self) -> bytes:
        connection = self._require()
        return bytes(connection.getATR())

    def transmit(self, command: bytes) -> Response:
        connection = self._require()
        try:
            data, sw1, sw2 = connection.transmit(list(command))
        except SmartcardException as exc:
            raise CardError(str(exc)) from exc
        return Response(data=bytes(data), sw1=sw1, sw2=sw2)
