from copynfc.core.tag.commands import build_read_command, build_write_command
from copynfc.core.tag.errors import (
    DuplicateRecord,
    EmptyIdentifier,
    ExchangeError,
    SessionAlreadyActive,
    SessionInvalidated,
    StorageError,
    TagConnectionError,
    TagError,
    UnknownRecord,
)
from copynfc.core.tag.handle import TagFamily, TagHandle
from copynfc.core.tag.persistence import TagArchive
from copynfc.core.tag.record import CapturedTag
from copynfc.core.tag.session import SessionState, TagSession, Transport
from copynfc.core.tag.store import CapturedTagStore
from copynfc.core.tag.uid import encode_uid, encode_uid_legacy

__all__ = [
    "CapturedTag",
    "CapturedTagStore",
    "DuplicateRecord",
    "EmptyIdentifier",
    "ExchangeError",
    "SessionAlreadyActive",
    "SessionInvalidated",
    "SessionState",
    "StorageError",
    "TagArchive",
    "TagConnectionError",
    "TagError",
    "TagFamily",
    "TagHandle",
    "TagSession",
    "Transport",
    "UnknownRecord",
    "build_read_command",
    "build_write_command",
    "encode_uid",
    "encode_uid_legacy",
]
