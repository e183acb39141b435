from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from copynfc.core.tag.errors import DuplicateRecord, UnknownRecord
from copynfc.core.tag.record import CapturedTag

lg = logging.getLogger(__name__)

Subscriber = Callable[[tuple[CapturedTag, ...]], None]


class CapturedTagStore:
    """Ordered, append-only collection of captured tags.

    Subscribers receive the full sequence after every append, never a
    delta. Appends and the snapshot handed to subscribers are taken under
    one lock, so each subscriber sees every write in order.
    """

    def __init__(self) -> None:
        self._records: list[CapturedTag] = []
        self._ids: set = set()
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()

    def load_initial(self, records: Iterable[CapturedTag]) -> None:
        """Replace the contents with a persisted snapshot. Does not notify."""
        records = list(records)
        ids = set()
        for record in records:
            if record.id in ids:
                raise DuplicateRecord(f"duplicate record id {record.id}")
            ids.add(record.id)
        with self._lock:
            self._records = records
            self._ids = ids
        lg.debug("loaded %d saved tags", len(records))

    def subscribe(self, callback: Subscriber) -> None:
        """Call *callback* with the full sequence after every append."""
        self._subscribers.append(callback)

    def append(self, record: CapturedTag) -> None:
        """Add *record* and notify every subscriber.

        The record stays appended if a subscriber fails; the remaining
        subscribers still run and the first error is raised afterwards.
        """
        with self._lock:
            if record.id in self._ids:
                raise DuplicateRecord(f"duplicate record id {record.id}")
            self._records.append(record)
            self._ids.add(record.id)
            snapshot = tuple(self._records)
            errors = []
            for callback in self._subscribers:
                try:
                    callback(snapshot)
                except Exception as exc:
                    lg.error("subscriber %r failed: %s", callback, exc)
                    errors.append(exc)
        if errors:
            raise errors[0]
        lg.info("saved tag %s (UID %s)", record.id, record.uid)

    def all(self) -> tuple[CapturedTag, ...]:
        with self._lock:
            return tuple(self._records)

    def find(self, ref: str) -> CapturedTag:
        """Look up a record by id or by an unambiguous id prefix."""
        ref = ref.strip().lower()
        if not ref:
            raise UnknownRecord("empty tag id")
        matches = [r for r in self.all() if str(r.id).startswith(ref)]
        if not matches:
            raise UnknownRecord(f"no saved tag matches '{ref}'")
        if len(matches) > 1:
            raise UnknownRecord(f"'{ref}' matches {len(matches)} saved tags")
        return matches[0]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[CapturedTag]:
        return iter(self.all())
