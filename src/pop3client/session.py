"""POP3 sessions, one class per protocol state.

A session only offers the commands its state allows. Moving to the next
state returns a new session object and detaches the old one, so a stale
handle cannot be used to send commands out of order:

    connecting = ConnectingSession(transport)
    auth = connecting.perform_greeting()       # AUTHORIZATION
    mailbox = auth.login("user", "secret")     # TRANSACTION
    mailbox.stat()
    auth.quit()                                # raises ProtocolStateError
"""

import logging
from collections.abc import Callable

from pop3client.constants import UNKNOWN_MESSAGE_ID
from pop3client.errors import (
    DeleteError,
    ListError,
    LoginError,
    NoopError,
    Pop3ConnectionError,
    Pop3Error,
    ProtocolStateError,
    QuitError,
    ReplyError,
    ResetError,
    RetrieveError,
    StatError,
    TopError,
    UidlError,
)
from pop3client.reader import ByteSource, read_multi_line_body, read_single_line
from pop3client.replies import (
    ListItem,
    ListReply,
    RetrieveReply,
    StatReply,
    TopReply,
    UidlItem,
    UidlReply,
    parse_list,
    parse_list_item,
    parse_stat,
    parse_uidl,
    parse_uidl_item,
)
from pop3client.transport import Transport

_LOGGER = logging.getLogger(__name__)


def _masked(line: str) -> str:
    if line.startswith("PASS "):
        return "PASS ****"
    return line


class _Session:
    """Shared plumbing: command exchange, detaching and best-effort QUIT."""

    STATE = ""

    def __init__(self, transport: Transport, greeting: str = ""):
        self._transport: Transport | None = transport
        self.host = transport.host
        self.greeting = greeting

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass

    @property
    def is_open(self) -> bool:
        """Check if this session still owns an open connection."""
        return self._transport is not None and not self._transport.is_closed

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise ProtocolStateError(
                f"session for {self.host} is no longer in {self.STATE} state"
            )
        return self._transport

    def _detach(self) -> Transport:
        """Hand the connection over to the next state's session."""
        transport = self._require_transport()
        self._transport = None
        return transport

    def _abandon(self) -> None:
        """Drop a connection that failed at transport level."""
        transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    def _exchange(
        self,
        line: str,
        error_class: type[Pop3Error],
        read: Callable[[ByteSource], str] = read_single_line,
    ) -> str:
        """Write one command and read its reply.

        Args:
            line: Command line without CRLF.
            error_class: Error raised for -ERR and malformed replies.
            read: Reader function matching the command's reply framing.

        Returns:
            Reply payload.

        Raises:
            error_class: If the server answered -ERR or with an unknown prefix.
            Pop3ConnectionError: On transport failure; the session is closed.
        """
        transport = self._require_transport()
        _LOGGER.debug("%s <- %s", self.host, _masked(line))
        try:
            transport.write_command(line)
            return read(transport)
        except ReplyError as e:
            raise error_class(e.message) from e
        except Pop3ConnectionError:
            self._abandon()
            raise

    def _quit(self) -> str:
        self._require_transport()
        try:
            return self._exchange("QUIT", QuitError)
        finally:
            self._abandon()

    def close(self) -> None:
        """Send a best-effort QUIT and release the connection.

        Errors are ignored. Does nothing if the session was detached or
        already closed.
        """
        transport, self._transport = self._transport, None
        if transport is None or transport.is_closed:
            return
        try:
            transport.write_command("QUIT")
        except Exception as e:
            _LOGGER.warning("QUIT to %s failed while closing: %s", self.host, e)
        finally:
            transport.close()


class ConnectingSession(_Session):
    """Freshly connected session waiting for the server greeting."""

    STATE = "CONNECTING"

    def perform_greeting(self) -> "AuthorizationSession":
        """Read the server greeting and enter the AUTHORIZATION state.

        Returns:
            AuthorizationSession owning the connection.

        Raises:
            Pop3ConnectionError: If the server is not ready; the connection
                is closed.
        """
        transport = self._require_transport()
        try:
            greeting = read_single_line(transport)
        except (ReplyError, Pop3ConnectionError) as e:
            _LOGGER.warning("Greeting from %s refused: %s", self.host, e)
            self._abandon()
            raise Pop3ConnectionError(
                f"POP3 server for {self.host} is *not* ready"
            ) from e

        self._detach()
        _LOGGER.debug("%s: CONNECTING -> AUTHORIZATION", self.host)
        return AuthorizationSession(transport, greeting)


class AuthorizationSession(_Session):
    """Session that has been greeted and can log in."""

    STATE = "AUTHORIZATION"

    def login(self, username: str, password: str) -> "TransactionSession":
        """Authenticate with USER and PASS.

        On failure this session stays in AUTHORIZATION and may retry.

        Args:
            username: Mailbox user name.
            password: Mailbox password.

        Returns:
            TransactionSession owning the connection.

        Raises:
            LoginError: If the server rejected USER or PASS.
        """
        self._exchange(f"USER {username}", LoginError)
        self._exchange(f"PASS {password}", LoginError)

        transport = self._detach()
        _LOGGER.info("Logged in to %s as %s", self.host, username)
        return TransactionSession(transport, self.greeting)

    def quit(self) -> str:
        """End the session without entering TRANSACTION.

        Returns:
            The server's sign-off text.

        Raises:
            QuitError: If the server answered -ERR (the connection is still closed).
        """
        return self._quit()


class TransactionSession(_Session):
    """Logged-in session with access to the maildrop.

    Usage:
        with auth.login("user", "secret") as mailbox:
            for item in mailbox.list():
                message = mailbox.retr(item.message_id)
    """

    STATE = "TRANSACTION"

    def stat(self) -> StatReply:
        """Return message count and total size of the maildrop."""
        return parse_stat(self._exchange("STAT", StatError))

    def list(self) -> ListReply:
        """Return the scan listing of all messages."""
        return parse_list(self._exchange("LIST", ListError, read_multi_line_body))

    def list_id(self, message_id: int) -> ListItem:
        """Return the scan listing of one message."""
        return parse_list_item(self._exchange(f"LIST {message_id}", ListError))

    def uidl(self) -> UidlReply:
        """Return the unique-id listing of all messages."""
        return parse_uidl(self._exchange("UIDL", UidlError, read_multi_line_body))

    def uidl_id(self, message_id: int) -> UidlItem:
        """Return the unique-id listing of one message."""
        return parse_uidl_item(self._exchange(f"UIDL {message_id}", UidlError))

    def retr(self, message_id: int) -> RetrieveReply:
        """Retrieve a whole message.

        The body is returned as sent: byte-stuffed lines are not unstuffed
        and the terminating ``.`` line is kept.

        Args:
            message_id: Message number from LIST or STAT.

        Returns:
            RetrieveReply with the raw message text.

        Raises:
            RetrieveError: If the server rejected the request.
        """
        body = self._exchange(
            f"RETR {message_id}", RetrieveError, read_multi_line_body
        )
        return RetrieveReply(message_id=message_id, body=body)

    def top(self, message_id: int, lines: int) -> TopReply:
        """Retrieve the headers and the first lines of a message.

        Args:
            message_id: Message number.
            lines: Number of body lines to include.

        Returns:
            TopReply with the raw text, same body rules as retr().

        Raises:
            TopError: If the server rejected the request.
        """
        body = self._exchange(
            f"TOP {message_id} {lines}", TopError, read_multi_line_body
        )
        return TopReply(message_id=message_id, requested_lines=lines, body=body)

    def retrieve_last(self) -> RetrieveReply:
        """Retrieve the last message of the scan listing.

        The reply carries UNKNOWN_MESSAGE_ID instead of the message number.

        Raises:
            RetrieveError: If LIST or RETR failed, or the maildrop is empty.
        """
        try:
            listing = self.list()
        except ListError as e:
            raise RetrieveError(e.message) from e

        last = listing.last
        if last is None:
            raise RetrieveError(f"no messages on {self.host}")

        reply = self.retr(last.message_id)
        return RetrieveReply(message_id=UNKNOWN_MESSAGE_ID, body=reply.body)

    def dele(self, message_id: int) -> None:
        """Mark a message as deleted; it is removed when the session QUITs."""
        self._exchange(f"DELE {message_id}", DeleteError)

    def rset(self) -> None:
        """Unmark all messages marked as deleted."""
        self._exchange("RSET", ResetError)

    def noop(self) -> None:
        self._exchange("NOOP", NoopError)

    def quit(self) -> str:
        """Enter the UPDATE state and close the connection.

        Returns:
            The server's sign-off text.

        Raises:
            QuitError: If the server could not remove all deleted messages.
        """
        return self._quit()
