"""Captured tag data model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from copynfc.core.tag.errors import EmptyIdentifier
from copynfc.core.tag.uid import encode_uid


@dataclass(frozen=True)
class CapturedTag:
    """A tag captured by a completed read exchange.

    *id* is generated per capture and is unrelated to the tag's own
    identifier. Status bytes are stored as returned, whatever their value.
    """

    id: uuid.UUID
    historical_bytes: bytes | None
    response_data: bytes
    identifier: bytes
    sw1: int
    sw2: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "identifier", bytes(self.identifier))
        object.__setattr__(self, "response_data", bytes(self.response_data))
        if self.historical_bytes is not None:
            object.__setattr__(self, "historical_bytes", bytes(self.historical_bytes))
        if not self.identifier:
            raise EmptyIdentifier("captured tag needs a non-empty identifier")
        for name in ("sw1", "sw2"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} out of range: {value}")

    @classmethod
    def create(
        cls,
        *,
        identifier: bytes,
        response_data: bytes,
        sw1: int,
        sw2: int,
        historical_bytes: bytes | None = None,
    ) -> CapturedTag:
        return cls(
            id=uuid.uuid4(),
            historical_bytes=historical_bytes,
            response_data=response_data,
            identifier=identifier,
            sw1=sw1,
            sw2=sw2,
        )

    @property
    def uid(self) -> str:
        return encode_uid(self.identifier)

    @property
    def sw(self) -> int:
        return (self.sw1 << 8) | self.sw2

    @property
    def success(self) -> bool:
        return self.sw1 == 0x90 and self.sw2 == 0x00
