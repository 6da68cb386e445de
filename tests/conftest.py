"""Pytest fixtures for pop3client tests."""

import pytest

from pop3client.errors import Pop3ConnectionError


class ChunkedSource:
    """Byte source that hands out scripted chunks, split to the requested size."""

    def __init__(self, *chunks: bytes):
        self.chunks = list(chunks)
        self.requested_sizes: list[int] = []

    def read_available(self, size: int) -> bytes:
        self.requested_sizes.append(size)
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if len(chunk) > size:
            self.chunks.insert(0, chunk[size:])
            chunk = chunk[:size]
        return chunk


class FakeTransport(ChunkedSource):
    """Stand-in for Transport that records written command lines."""

    def __init__(self, *chunks: bytes, host: str = "pop.example.com"):
        super().__init__(*chunks)
        self.host = host
        self.port = 995
        self.written: list[str] = []
        self.closed = False
        self.fail_writes = False

    @property
    def is_closed(self) -> bool:
        return self.closed

    def queue(self, *chunks: bytes) -> None:
        self.chunks.extend(chunks)

    def write_command(self, line: str) -> int:
        if self.closed or self.fail_writes:
            raise Pop3ConnectionError("could not send command: broken pipe")
        self.written.append(line)
        return len(line) + 2

    def read_available(self, size: int) -> bytes:
        if self.closed:
            raise Pop3ConnectionError("connection is closed")
        data = super().read_available(size)
        if not data:
            raise Pop3ConnectionError("connection closed by pop.example.com")
        return data

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> FakeTransport:
    """Fake transport with nothing queued."""
    return FakeTransport()


@pytest.fixture
def authorization_session(transport: FakeTransport):
    """Session that has received the greeting."""
    from pop3client.session import ConnectingSession

    transport.queue(b"+OK POP3 server ready\r\n")
    return ConnectingSession(transport).perform_greeting()


@pytest.fixture
def transaction_session(transport: FakeTransport, authorization_session):
    """Logged-in session; the login exchange is cleared from the transcript."""
    transport.queue(b"+OK user accepted\r\n", b"+OK maildrop locked\r\n")
    session = authorization_session.login("mrose", "secret")
    transport.written.clear()
    return session
