"""TLS-over-TCP byte stream to a POP3S server."""

import logging
import socket
import ssl

from pop3client.constants import CRLF
from pop3client.errors import Pop3ConnectionError

_LOGGER = logging.getLogger(__name__)


def _check_host(host: str) -> None:
    """Reject host names that cannot be used for SNI and certificate checks."""
    if not host or host != host.strip():
        raise Pop3ConnectionError(f"invalid host: {host!r}")
    try:
        host.encode("idna")
    except UnicodeError as e:
        raise Pop3ConnectionError(f"invalid host: {host!r} ({e})") from e


class Transport:
    """Owns one TLS socket and moves raw bytes over it.

    The transport does no buffering and no retries; framing belongs to
    the reader.

    Usage:
        transport = Transport.open("pop.example.com", 995)
        transport.write_command("NOOP")
        data = transport.read_available(512)
        transport.close()
    """

    def __init__(self, sock: ssl.SSLSocket | socket.socket, host: str, port: int):
        """Wrap an already connected socket.

        Args:
            sock: Connected, TLS-wrapped socket.
            host: Server host name the socket was opened for.
            port: Server port.
        """
        self.host = host
        self.port = port
        self._sock: ssl.SSLSocket | socket.socket | None = sock

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        timeout: float | None = None,
        context: ssl.SSLContext | None = None,
    ) -> "Transport":
        """Connect to host:port and perform the TLS handshake.

        The server certificate is verified against the OS trust store
        unless a custom context is given.

        Args:
            host: Server host name, also used for SNI and verification.
            port: Server port, usually 995.
            timeout: Socket timeout in seconds, None to block forever.
            context: Optional TLS client context.

        Returns:
            Connected Transport.

        Raises:
            Pop3ConnectionError: On invalid host, DNS, TCP or TLS failure.
        """
        _check_host(host)
        if context is None:
            context = ssl.create_default_context()

        try:
            raw_sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise Pop3ConnectionError(
                f"could not set up client connection: {e}"
            ) from e

        try:
            tls_sock = context.wrap_socket(raw_sock, server_hostname=host)
        except (OSError, ValueError) as e:
            raw_sock.close()
            raise Pop3ConnectionError(
                f"could not set up client connection: {e}"
            ) from e

        _LOGGER.info("Connected to %s:%d (%s)", host, port, tls_sock.version())
        return cls(tls_sock, host, port)

    @property
    def is_closed(self) -> bool:
        """Check if the socket has been released."""
        return self._sock is None

    def _require_socket(self) -> ssl.SSLSocket | socket.socket:
        if self._sock is None:
            raise Pop3ConnectionError(f"connection to {self.host} is closed")
        return self._sock

    def write_command(self, line: str) -> int:
        """Send one command line, terminated with CRLF.

        Args:
            line: Command without line terminator.

        Returns:
            Number of bytes written.

        Raises:
            Pop3ConnectionError: If the socket is closed or the write fails.
        """
        sock = self._require_socket()
        data = (line + CRLF).encode("utf-8")
        try:
            sock.sendall(data)
        except OSError as e:
            raise Pop3ConnectionError(f"could not send command: {e}") from e
        return len(data)

    def read_available(self, size: int) -> bytes:
        """Read up to size bytes, blocking until at least one arrives.

        Raises:
            Pop3ConnectionError: If the read fails or the server closed the stream.
        """
        sock = self._require_socket()
        try:
            data = sock.recv(size)
        except OSError as e:
            raise Pop3ConnectionError(f"could not read response: {e}") from e
        if not data:
            raise Pop3ConnectionError(f"connection closed by {self.host}")
        return data

    def close(self) -> None:
        """Close the TLS socket and the TCP socket beneath it."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError:
            pass
        self._sock = None
        _LOGGER.info("Disconnected from %s:%d", self.host, self.port)
