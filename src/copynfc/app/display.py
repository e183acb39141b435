"""Human-readable saved tag formatting."""

from __future__ import annotations

from collections.abc import Sequence

from copynfc.core.tag import CapturedTag


def _hex(data: bytes | None) -> str:
    return data.hex(" ").upper() if data else ""


def format_tag_line(record: CapturedTag) -> str:
    return f"{record.id}  UID {record.uid:20s} SW={record.sw:04X}"


def format_tag_list(records: Sequence[CapturedTag]) -> str:
    if not records:
        return "No tags saved yet"
    return "\n".join(format_tag_line(r) for r in records)


def format_tag(record: CapturedTag) -> str:
    lines = [
        f"ID          {record.id}",
        f"UID         {record.uid}",
        f"Identifier  {_hex(record.identifier)}",
        f"Response    {_hex(record.response_data) or '(empty)'}",
        f"SW          {record.sw1:02X} {record.sw2:02X}"
        + ("" if record.success else "  (error)"),
    ]
    if record.historical_bytes is not None:
        lines.append(f"Historical  {_hex(record.historical_bytes) or '(empty)'}")
    return "\n".join(lines)
