from __future__ import annotations

import logging

# Raw command/response bytes.
TRACE = 15
# One line per command or session transition.
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


def color_sw(sw1: int) -> str:
    """Return ANSI color for a status word: green for success, red for error."""
    if sw1 == 0x90 or sw1 == 0x61:
        return _GREEN
    return _RED


def format_sw(sw1: int, sw2: int) -> str:
    """Render a status word as colored ``SW1 SW2`` hex."""
    return f"{color_sw(sw1)}{sw1:02X} {sw2:02X}{_RESET}"
