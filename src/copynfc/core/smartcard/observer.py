from __future__ import annotations

import logging

from smartcard.CardConnectionObserver import CardConnectionObserver

from copynfc.core.smartcard.logging import PROTOCOL, TRACE, format_sw

lg = logging.getLogger(__name__)


LINE_BYTES = 16


class LoggingCardObserver(CardConnectionObserver):
    """Logs reader connection events and raw command traffic."""

    def _log_hex(self, prefix: str, data: bytes) -> None:
        pad = " " * len(prefix)
        for i in range(0, len(data), LINE_BYTES):
            chunk = data[i : i + LINE_BYTES].hex(" ").upper()
            lg.log(TRACE, "%s%s", prefix if i == 0 else pad, chunk)

    def update(self, observable, event):
        if event.type in ("connect", "reconnect", "disconnect"):
            lg.log(PROTOCOL, "%s", event.type)

        elif event.type == "command":
            self._log_hex(">> ", bytes(event.args[0]))

        elif event.type == "response":
            data, sw1, sw2 = event.args[0], event.args[1], event.args[2]
            if data:
                self._log_hex("<< ", bytes(data))
            lg.log(TRACE, "<< %s", format_sw(sw1, sw2))
