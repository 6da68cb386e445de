"""Typed POP3 replies and the parsers that build them from reply text."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from pop3client.constants import INT32_MAX, INT32_MIN
from pop3client.errors import ListError, Pop3Error, StatError, UidlError

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class StatReply:
    """Mailbox summary returned by STAT."""

    message_count: int
    total_octets: int


@dataclass
class ListItem:
    """One scan listing line: message number and size."""

    message_id: int
    size_octets: int


@dataclass
class ListReply:
    """Scan listings in the order the server sent them."""

    items: list[ListItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[ListItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def last(self) -> ListItem | None:
        """Return the last listed message, or None for an empty mailbox."""
        return self.items[-1] if self.items else None


@dataclass
class UidlItem:
    """Message number and the server's opaque unique id."""

    message_id: int
    unique_id: str


@dataclass
class UidlReply:
    """Unique-id listings in the order the server sent them."""

    items: list[UidlItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[UidlItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class RetrieveReply:
    """Full message as sent by RETR.

    The body is left byte-stuffed and keeps the terminating ``.`` line.
    """

    message_id: int
    body: str


@dataclass
class TopReply:
    """Headers plus the first ``requested_lines`` body lines, as sent by TOP."""

    message_id: int
    requested_lines: int
    body: str


def _parse_int32(value: str) -> int:
    """Parse a signed 32-bit decimal integer.

    Raises:
        ValueError: If the text is not a plain decimal or is out of range.
    """
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"invalid digit found in {value!r}")
    number = int(value)
    if not INT32_MIN <= number <= INT32_MAX:
        raise ValueError(f"number too large to fit in target type: {value}")
    return number


def _split_pair(
    text: str, error_class: type[Pop3Error], kind: str
) -> tuple[str, str]:
    pieces = text.split(" ")
    if len(pieces) != 2:
        raise error_class(f"invalid {kind} response: {text}")
    return pieces[0], pieces[1]


def _data_lines(text: str) -> list[str]:
    """Split a multi-line payload into its data lines.

    Carriage returns are removed, and empty lines and the lone ``.``
    terminator are dropped.
    """
    lines = []
    for line in text.split("\n"):
        line = line.replace("\r", "")
        if line and line != ".":
            lines.append(line)
    return lines


def parse_stat(text: str) -> StatReply:
    """Parse a STAT reply of the form ``<count> <octets>``.

    Args:
        text: Reply text with the status token removed.

    Returns:
        StatReply with both numbers.

    Raises:
        StatError: If the reply does not have exactly two numeric fields.
    """
    count, octets = _split_pair(text, StatError, "stat")
    try:
        return StatReply(
            message_count=_parse_int32(count),
            total_octets=_parse_int32(octets),
        )
    except ValueError as e:
        raise StatError(f"could not parse stat response as numbers: {e}") from e


def parse_list_item(text: str) -> ListItem:
    """Parse a single ``<id> <size>`` scan listing.

    Raises:
        ListError: If the line does not have exactly two numeric fields.
    """
    message_id, size = _split_pair(text, ListError, "list")
    try:
        return ListItem(
            message_id=_parse_int32(message_id),
            size_octets=_parse_int32(size),
        )
    except ValueError as e:
        raise ListError(f"could not parse list response numbers: {e}") from e


def parse_list(text: str) -> ListReply:
    """Parse the data lines of a multi-line LIST reply.

    Args:
        text: Data lines, possibly ending with the ``.`` terminator.

    Returns:
        ListReply preserving the server's order.

    Raises:
        ListError: If any remaining line is malformed.
    """
    return ListReply(items=[parse_list_item(line) for line in _data_lines(text)])


def parse_uidl_item(text: str) -> UidlItem:
    """Parse a single ``<id> <unique-id>`` listing.

    The unique id is kept verbatim.

    Raises:
        UidlError: If the line does not have two fields or the id is not numeric.
    """
    message_id, unique_id = _split_pair(text, UidlError, "uidl")
    try:
        return UidlItem(message_id=_parse_int32(message_id), unique_id=unique_id)
    except ValueError as e:
        raise UidlError(
            f"could not parse UIDL message id as a number: {e}"
        ) from e


def parse_uidl(text: str) -> UidlReply:
    """Parse the data lines of a multi-line UIDL reply.

    Raises:
        UidlError: If any remaining line is malformed.
    """
    return UidlReply(items=[parse_uidl_item(line) for line in _data_lines(text)])
