from __future__ import annotations

import enum
from dataclasses import dataclass, field


class TagFamily(enum.Enum):
    """Protocol family a detected tag belongs to."""

    MIFARE = "mifare"
    ISO7816 = "iso7816"
    FELICA = "felica"
    ISO15693 = "iso15693"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TagHandle:
    """A tag reported by the transport during polling.

    *source* is opaque to the session; the transport uses it to find the
    tag again when asked to connect.
    """

    family: TagFamily
    identifier: bytes
    historical_bytes: bytes | None = None
    source: object = field(default=None, compare=False, repr=False)
