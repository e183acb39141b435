"""Read and write commands for the supported tag family.

The read command is an ISO 7816 READ BINARY APDU asking for one 16-byte
chunk from offset 0. The write command is the Type 2 tag WRITE: opcode,
block number, then exactly one 4-byte block.
"""

from __future__ import annotations

from copynfc.core.smartcard import APDU
from copynfc.core.tag.errors import EmptyIdentifier

READ_BINARY = 0xB0
READ_LENGTH = 16

WRITE_BLOCK = 0xA2
WRITE_BLOCK_OFFSET = 0x04
BLOCK_SIZE = 4


def read_command_apdu() -> APDU:
    """READ BINARY (00 B0 00 00, Le=16)."""
    return APDU(cla=0x00, ins=READ_BINARY, p1=0x00, p2=0x00, le=READ_LENGTH)


def build_read_command() -> bytes:
    """Return the encoded read command: ``00 B0 00 00 10``."""
    return read_command_apdu().to_bytes()


def build_write_command(identifier: bytes) -> bytes:
    """Return ``A2 04`` followed by the first 4 bytes of *identifier*.

    Identifiers shorter than a block are right-padded with zero bytes.
    """
    identifier = bytes(identifier)
    if not identifier:
        raise EmptyIdentifier("cannot build a write command from an empty identifier")
    block = identifier[:BLOCK_SIZE].ljust(BLOCK_SIZE, b"\x00")
    return bytes([WRITE_BLOCK, WRITE_BLOCK_OFFSET]) + block
