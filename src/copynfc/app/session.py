"""Saved tag operations used by the command line."""

from __future__ import annotations

import logging

from copynfc.core.tag import (
    CapturedTag,
    CapturedTagStore,
    SessionState,
    TagArchive,
    TagSession,
    Transport,
    build_write_command,
)

lg = logging.getLogger(__name__)


def open_store(archive: TagArchive) -> CapturedTagStore:
    """Load saved tags and write the list back after every capture."""
    store = CapturedTagStore()
    store.load_initial(archive.load())
    store.subscribe(archive.save)
    return store


def _report(session: TagSession) -> None:
    if session.state is SessionState.COMPLETED:
        record = session.record
        lg.info("captured UID %s SW=%04X", record.uid, record.sw)
    else:
        lg.error("scan %s: %s", session.state.value, session.error)


def scan(store: CapturedTagStore, transport: Transport) -> TagSession:
    """Run one scan session and return it once it has finished."""
    session = TagSession(transport, store, on_finished=_report)
    session.start()
    return session


def write_command(store: CapturedTagStore, ref: str) -> tuple[CapturedTag, bytes]:
    """Build the block write command that copies a saved tag's identifier."""
    record = store.find(ref)
    return record, build_write_command(record.identifier)


def clear(archive: TagArchive) -> int:
    """Drop every saved tag. Returns how many were removed."""
    count = len(archive.load())
    archive.save([])
    lg.info("removed %d saved tags", count)
    return count
