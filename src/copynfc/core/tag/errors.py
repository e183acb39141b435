"""Errors raised by tag sessions, command building and the tag store."""

from __future__ import annotations


class TagError(Exception):
    """Base class for tag errors."""


class SessionAlreadyActive(TagError):
    """start() called on a session that has already been started."""


class TagConnectionError(TagError):
    """The transport could not connect to the selected tag."""


class ExchangeError(TagError):
    """The transport failed to exchange the read command with the tag."""


class SessionInvalidated(TagError):
    """The transport ended the session. Start a new one to scan again."""


class EmptyIdentifier(TagError, ValueError):
    """A tag identifier was empty where at least one byte is required."""


class DuplicateRecord(TagError, ValueError):
    """A record with the same id is already in the store."""


class UnknownRecord(TagError, KeyError):
    """No saved record matches the given id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class StorageError(TagError):
    """The saved tag list could not be written."""
