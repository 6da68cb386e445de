"""Framing of POP3 replies out of a byte stream.

POP3 has two reply shapes. Single-line replies end at the first LF.
Multi-line replies start with ``+OK`` and end with a line holding only ``.``.
The reader accumulates chunks until one complete reply is buffered, then
classifies it by its status token.
"""

import logging
from typing import Protocol

from pop3client.constants import (
    ERR_TOKEN,
    MULTI_LINE_TERMINATOR,
    MULTI_LINE_TERMINATOR_BARE_LF,
    OK_TOKEN,
    READ_ALL_CHUNK_SIZE,
    READ_CHUNK_SIZE,
)
from pop3client.errors import Pop3ConnectionError, ProtocolError, ServerError

_LOGGER = logging.getLogger(__name__)


class ByteSource(Protocol):
    """Anything the reader can pull bytes from, usually a Transport."""

    def read_available(self, size: int) -> bytes: ...


def _fill(source: ByteSource, buffer: bytearray, size: int) -> None:
    chunk = source.read_available(size)
    if not chunk:
        raise Pop3ConnectionError("connection closed by server")
    buffer.extend(chunk)


def _is_single_line_complete(buffer: bytearray) -> bool:
    return len(buffer) >= 2 and buffer.endswith(b"\n")


def _is_multi_line_complete(buffer: bytearray) -> bool:
    # -ERR is never followed by data lines
    if buffer.startswith(b"-"):
        return buffer.endswith(b"\n")
    return buffer.endswith(MULTI_LINE_TERMINATOR) or buffer.endswith(
        MULTI_LINE_TERMINATOR_BARE_LF
    )


def _decode(buffer: bytearray) -> str:
    return buffer.decode("utf-8", errors="replace")


def _frame_single_line(source: ByteSource) -> str:
    buffer = bytearray()
    while not _is_single_line_complete(buffer):
        _fill(source, buffer, READ_CHUNK_SIZE)
    _LOGGER.debug("Framed single-line reply (%d bytes)", len(buffer))
    return _decode(buffer)


def _frame_multi_line(source: ByteSource) -> str:
    buffer = bytearray()
    while not _is_multi_line_complete(buffer):
        _fill(source, buffer, READ_ALL_CHUNK_SIZE)
    _LOGGER.debug("Framed multi-line reply (%d bytes)", len(buffer))
    return _decode(buffer)


def translate_reply(raw: str) -> str:
    """Classify a framed reply and strip its status token.

    Args:
        raw: Complete reply as read from the server.

    Returns:
        Reply text after ``+OK`` with surrounding whitespace removed.

    Raises:
        ServerError: For ``-ERR`` replies, carrying the server's message.
        ProtocolError: For any other prefix.
    """
    if raw.startswith(OK_TOKEN):
        return raw[len(OK_TOKEN):].strip()
    if raw.startswith(ERR_TOKEN):
        raise ServerError(raw[len(ERR_TOKEN):].replace("\r\n", "").strip())
    raise ProtocolError(f"unexpected response: {raw}")


def read_single_line(source: ByteSource) -> str:
    """Read one single-line reply.

    Returns:
        The reply text without ``+OK``, stripped.

    Raises:
        ServerError: On ``-ERR``.
        ProtocolError: On an unknown status token.
        Pop3ConnectionError: If the stream fails or ends.
    """
    return translate_reply(_frame_single_line(source))


def read_multi_line(source: ByteSource) -> str:
    """Read one multi-line reply.

    The status line text and the ``.`` terminator are both part of the
    returned payload.

    Raises:
        ServerError: On ``-ERR``.
        ProtocolError: On an unknown status token.
        Pop3ConnectionError: If the stream fails or ends.
    """
    return translate_reply(_frame_multi_line(source))


def read_multi_line_body(source: ByteSource) -> str:
    """Read one multi-line reply and return only its data lines.

    The status line (``+OK 2 messages``) is dropped. The data lines are
    returned as sent, ending with the ``.`` terminator line.

    Raises:
        ServerError: On ``-ERR``.
        ProtocolError: On an unknown status token.
        Pop3ConnectionError: If the stream fails or ends.
    """
    raw = _frame_multi_line(source)
    translate_reply(raw)
    _, _, body = raw.partition("\n")
    return body.rstrip("\r\n")
