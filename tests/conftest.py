from __future__ import annotations

import pytest

from copynfc.core.tag import CapturedTagStore, TagFamily, TagHandle, TagSession

UID = bytes([4, 21, 95, 42, 92, 103, 128])


class FakeTransport:
    """Records what the session asks for; tests answer through the session."""

    def __init__(self) -> None:
        self.session = None
        self.calls: list[tuple] = []

    def begin(self, session) -> None:
        self.session = session
        self.calls.append(("begin",))

    def connect(self, handle) -> None:
        self.calls.append(("connect", handle))

    def send(self, command) -> None:
        self.calls.append(("send", command))

    def invalidate(self) -> None:
        self.calls.append(("invalidate",))


class AutoTransport:
    """Answers every request at once, on the caller's thread."""

    def __init__(self, tags, response=(b"\x01\x02", 0x90, 0x00)) -> None:
        self.tags = list(tags)
        self.response = response
        self.session = None
        self.connected: list[TagHandle] = []
        self.sent: list[bytes] = []
        self.invalidated = 0

    def begin(self, session) -> None:
        self.session = session
        session.on_tags_detected(self.tags)

    def connect(self, handle) -> None:
        self.connected.append(handle)
        self.session.on_connected()

    def send(self, command) -> None:
        self.sent.append(command)
        self.session.on_exchange_response(*self.response)

    def invalidate(self) -> None:
        self.invalidated += 1
        self.session.on_session_invalidated("session invalidated")


class EndingTransport(FakeTransport):
    """Ends every session as soon as it begins."""

    def __init__(self, reason: str = "session timeout") -> None:
        super().__init__()
        self.reason = reason

    def begin(self, session) -> None:
        super().begin(session)
        session.on_session_invalidated(self.reason)


@pytest.fixture
def mifare():
    return TagHandle(family=TagFamily.MIFARE, identifier=UID)


@pytest.fixture
def store():
    return CapturedTagStore()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def session(transport, store):
    return TagSession(transport, store)
