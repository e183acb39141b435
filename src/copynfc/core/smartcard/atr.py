"""ATR parsing: historical bytes and contactless card family.

PC/SC readers synthesize an ATR for contactless cards. Storage cards
(MIFARE Classic, Ultralight, ...) get the PC/SC part 3 layout, whose
historical bytes are

    80 4F 0C | A0 00 00 03 06 (RID) | SS | NN NN | 00 00 00 00

with SS the standard and NN NN the card name. ISO 14443-4 cards get
``3B 8n 80 01`` followed by the ATS historical bytes.
"""

from __future__ import annotations

from copynfc.core.tag.handle import TagFamily

PCSC_RID = bytes.fromhex("A000000306")

# Standard byte (SS), ISO 15693 parts 1-4
SS_ISO15693 = (0x09, 0x0A, 0x0B, 0x0C)

# Card names (NN NN)
CARD_NAMES: dict[int, str] = {
    0x0001: "MIFARE Classic 1K",
    0x0002: "MIFARE Classic 4K",
    0x0003: "MIFARE Ultralight",
    0x0026: "MIFARE Mini",
    0x0036: "MIFARE Plus SL1 2K",
    0x0037: "MIFARE Plus SL1 4K",
    0x0038: "MIFARE Plus SL2 2K",
    0x0039: "MIFARE Plus SL2 4K",
    0x003A: "MIFARE Ultralight C",
    0x003B: "FeliCa",
    0x003D: "MIFARE Ultralight EV1",
}

_MIFARE_NAMES = {name for name, label in CARD_NAMES.items() if label.startswith("MIFARE")}
_FELICA = 0x003B


def historical_bytes(atr: bytes) -> bytes:
    """Extract the historical bytes of an ATR (ISO 7816-3 section 8.2)."""
    if len(atr) < 2:
        raise ValueError(f"ATR too short: {len(atr)} bytes")
    t0 = atr[1]
    count = t0 & 0x0F
    indicators = t0 >> 4
    offset = 2
    while indicators:
        td = None
        # TA, TB, TC, TD in that order
        for bit in (0x1, 0x2, 0x4, 0x8):
            if not indicators & bit:
                continue
            if offset >= len(atr):
                raise ValueError("ATR truncated in interface bytes")
            if bit == 0x8:
                td = atr[offset]
            offset += 1
        indicators = td >> 4 if td is not None else 0
    hist = atr[offset : offset + count]
    if len(hist) < count:
        raise ValueError("ATR truncated in historical bytes")
    return bytes(hist)


def _storage_card(hist: bytes) -> tuple[int, int] | None:
    """Return (standard, card name) for a PC/SC storage card, else None."""
    if len(hist) >= 11 and hist[0] == 0x80 and hist[1] == 0x4F and hist[3:8] == PCSC_RID:
        return hist[8], int.from_bytes(hist[9:11], "big")
    return None


def classify(atr: bytes) -> TagFamily:
    """Map a contactless ATR to the tag family it announces."""
    try:
        hist = historical_bytes(atr)
    except ValueError:
        return TagFamily.UNKNOWN
    storage = _storage_card(hist)
    if storage is not None:
        standard, name = storage
        if name in _MIFARE_NAMES:
            return TagFamily.MIFARE
        if name == _FELICA:
            return TagFamily.FELICA
        if standard in SS_ISO15693:
            return TagFamily.ISO15693
        return TagFamily.UNKNOWN
    if len(atr) >= 4 and atr[0] == 0x3B and (atr[1] & 0xF0) == 0x80 and atr[2:4] == b"\x80\x01":
        return TagFamily.ISO7816
    return TagFamily.UNKNOWN


def card_name(atr: bytes) -> str | None:
    """Return the PC/SC card name announced by a storage card ATR."""
    try:
        storage = _storage_card(historical_bytes(atr))
    except ValueError:
        return None
    if storage is None:
        return None
    return CARD_NAMES.get(storage[1], f"card {storage[1]:04X}")


def tag_historical_bytes(atr: bytes) -> bytes | None:
    """Historical bytes the tag itself sent, if any.

    Storage card ATRs are built by the reader, so they carry none.
    """
    try:
        hist = historical_bytes(atr)
    except ValueError:
        return None
    if not hist or _storage_card(hist) is not None:
        return None
    return hist
