"""UID text rendering of raw tag identifiers."""

from __future__ import annotations


def encode_uid(identifier: bytes) -> str:
    """Render *identifier* as lowercase hex, two digits per byte."""
    return bytes(identifier).hex()


def encode_uid_legacy(identifier: bytes) -> str:
    """Render *identifier* the way earlier CopyNFC builds printed UIDs.

    Those builds decided on a leading zero by reading the hex digits as a
    decimal number (anything with a-f read as 0) and padding when it was
    below 10. Bytes below 0x10 and bytes written with two decimal digits
    come out right; any other byte gains a spurious leading zero (0x5f ->
    "05f"), so the result is not fixed-width. Only use this to match UIDs
    recorded by those builds.
    """
    parts = []
    for byte in bytes(identifier):
        digits = format(byte, "x")
        value = int(digits) if digits.isdecimal() else 0
        parts.append("0" + digits if value < 10 else digits)
    return "".join(parts)
