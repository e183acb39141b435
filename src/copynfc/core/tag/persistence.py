"""Saved tag list, kept in a JSON settings file.

The file is a key/value document. Saved tags live under ``savedNFCs`` as
a list of objects; byte fields are base64 and ids are UUID strings:

    {"savedNFCs": [{"id": "6F1D...", "historicalBytes": null,
                    "apduData": "AQI=", "identifier": "BBVfKlxngA==",
                    "sw1": 144, "sw2": 0}]}

Other keys in the document are preserved on save.
"""

from __future__ import annotations

import base64
import json
import logging
import os
import uuid
from collections.abc import Iterable
from pathlib import Path

from copynfc.core.tag.errors import StorageError
from copynfc.core.tag.record import CapturedTag

lg = logging.getLogger(__name__)

SAVED_TAGS_KEY = "savedNFCs"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


def encode_record(record: CapturedTag) -> dict:
    return {
        "id": str(record.id).upper(),
        "historicalBytes": (
            _b64(record.historical_bytes) if record.historical_bytes is not None else None
        ),
        "apduData": _b64(record.response_data),
        "identifier": _b64(record.identifier),
        "sw1": record.sw1,
        "sw2": record.sw2,
    }


def decode_record(entry: dict) -> CapturedTag:
    """Build a CapturedTag from one stored entry. Raises ValueError if malformed."""
    if not isinstance(entry, dict):
        raise ValueError(f"expected an object, got {type(entry).__name__}")
    try:
        historical = entry.get("historicalBytes")
        sw1, sw2 = entry["sw1"], entry["sw2"]
        if not isinstance(sw1, int) or not isinstance(sw2, int):
            raise ValueError("status bytes must be integers")
        return CapturedTag(
            id=uuid.UUID(entry["id"]),
            historical_bytes=_unb64(historical) if historical is not None else None,
            response_data=_unb64(entry["apduData"]),
            identifier=_unb64(entry["identifier"]),
            sw1=sw1,
            sw2=sw2,
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"malformed saved tag: {exc!r}") from exc


class TagArchive:
    """Persistence for the saved tag list.

    load() and save() move whole lists; there is no per-record update.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"cannot read {self._path}: {exc}") from exc
        doc = json.loads(text)
        if not isinstance(doc, dict):
            raise ValueError("settings file is not a JSON object")
        return doc

    def load(self) -> list[CapturedTag]:
        """Return the saved tags, or an empty list if none can be decoded.

        Raises StorageError if the file exists but cannot be read. A corrupt
        document loads as empty; it is replaced on the next save.
        Repeated ids keep their first entry.
        """
        try:
            entries = self._read_document().get(SAVED_TAGS_KEY) or []
            if not isinstance(entries, list):
                raise ValueError(f"{SAVED_TAGS_KEY} is not a list")
            records = [decode_record(entry) for entry in entries]
        except ValueError as exc:
            lg.warning("ignoring unreadable saved tags in %s: %s", self._path, exc)
            return []
        seen = set()
        unique = []
        for record in records:
            if record.id in seen:
                lg.warning("dropping duplicate saved tag %s in %s", record.id, self._path)
                continue
            seen.add(record.id)
            unique.append(record)
        records = unique
        lg.debug("read %d saved tags from %s", len(records), self._path)
        return records

    def save(self, records: Iterable[CapturedTag]) -> None:
        """Write the whole list. Raises StorageError if the file cannot be accessed."""
        try:
            doc = self._read_document()
        except ValueError:
            doc = {}
        doc[SAVED_TAGS_KEY] = [encode_record(record) for record in records]
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(doc, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StorageError(f"cannot write {self._path}: {exc}") from exc
        lg.debug("wrote %d saved tags to %s", len(doc[SAVED_TAGS_KEY]), self._path)
