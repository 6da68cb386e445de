"""Tests for the TLS transport."""

import socket
import ssl
from unittest.mock import MagicMock, patch

import pytest

from pop3client.errors import Pop3ConnectionError
from pop3client.transport import Transport


class TestTransportOpen:
    """Test connection setup."""

    def test_open_wraps_tcp_socket_with_tls(self):
        """open() connects TCP and wraps it using the host as server name."""
        with patch("pop3client.transport.socket.create_connection") as mock_connect, patch(
            "pop3client.transport.ssl.create_default_context"
        ) as mock_context:
            raw_sock = MagicMock()
            mock_connect.return_value = raw_sock

            transport = Transport.open("pop.example.com", 995, timeout=30)

        mock_connect.assert_called_once_with(("pop.example.com", 995), timeout=30)
        mock_context.return_value.wrap_socket.assert_called_once_with(
            raw_sock, server_hostname="pop.example.com"
        )
        assert transport.host == "pop.example.com"
        assert transport.port == 995
        assert transport.is_closed is False

    def test_open_uses_given_context(self):
        """A custom context replaces the default one."""
        context = MagicMock()
        with patch("pop3client.transport.socket.create_connection"), patch(
            "pop3client.transport.ssl.create_default_context"
        ) as mock_default:
            Transport.open("pop.example.com", 995, context=context)

        mock_default.assert_not_called()
        context.wrap_socket.assert_called_once()

    def test_connection_refused(self):
        """TCP failures become Pop3ConnectionError."""
        with patch(
            "pop3client.transport.socket.create_connection",
            side_effect=ConnectionRefusedError("Connection refused"),
        ):
            with pytest.raises(Pop3ConnectionError) as exc_info:
                Transport.open("pop.example.com", 995)

        assert "could not set up client connection" in str(exc_info.value)

    def test_dns_failure(self):
        """Name resolution failures become Pop3ConnectionError."""
        with patch(
            "pop3client.transport.socket.create_connection",
            side_effect=socket.gaierror("Name or service not known"),
        ):
            with pytest.raises(Pop3ConnectionError):
                Transport.open("no-such-host.invalid", 995)

    def test_certificate_failure_closes_tcp_socket(self):
        """A failed TLS handshake closes the TCP socket."""
        context = MagicMock()
        context.wrap_socket.side_effect = ssl.SSLCertVerificationError(
            "certificate verify failed"
        )
        with patch("pop3client.transport.socket.create_connection") as mock_connect:
            with pytest.raises(Pop3ConnectionError):
                Transport.open("pop.example.com", 995, context=context)

        mock_connect.return_value.close.assert_called_once()

    @pytest.mark.parametrize("host", ["", " pop.example.com", "bad..label"])
    def test_invalid_host_is_rejected(self, host):
        """Hosts unusable as TLS server names fail before connecting."""
        with patch("pop3client.transport.socket.create_connection") as mock_connect:
            with pytest.raises(Pop3ConnectionError, match="invalid host"):
                Transport.open(host, 995)

        mock_connect.assert_not_called()


class TestTransportIO:
    """Test reads and writes."""

    def test_write_command_appends_crlf(self):
        """Commands are terminated with CRLF."""
        sock = MagicMock()
        transport = Transport(sock, "pop.example.com", 995)

        written = transport.write_command("RETR 1")

        sock.sendall.assert_called_once_with(b"RETR 1\r\n")
        assert written == 8

    def test_write_failure_raises_connection_error(self):
        """Socket errors on write become Pop3ConnectionError."""
        sock = MagicMock()
        sock.sendall.side_effect = BrokenPipeError("Broken pipe")
        transport = Transport(sock, "pop.example.com", 995)

        with pytest.raises(Pop3ConnectionError):
            transport.write_command("NOOP")

    def test_read_available_returns_received_bytes(self):
        """Reads pass the size to recv and return its bytes."""
        sock = MagicMock()
        sock.recv.return_value = b"+OK\r\n"
        transport = Transport(sock, "pop.example.com", 995)

        assert transport.read_available(512) == b"+OK\r\n"
        sock.recv.assert_called_once_with(512)

    def test_read_end_of_stream_raises(self):
        """An empty read means the server closed the connection."""
        sock = MagicMock()
        sock.recv.return_value = b""
        transport = Transport(sock, "pop.example.com", 995)

        with pytest.raises(Pop3ConnectionError, match="closed"):
            transport.read_available(512)

    def test_read_timeout_raises_connection_error(self):
        """Socket timeouts become Pop3ConnectionError."""
        sock = MagicMock()
        sock.recv.side_effect = socket.timeout("timed out")
        transport = Transport(sock, "pop.example.com", 995)

        with pytest.raises(Pop3ConnectionError):
            transport.read_available(512)


class TestTransportClose:
    """Test resource release."""

    def test_close_closes_socket_once(self):
        """close() is idempotent."""
        sock = MagicMock()
        transport = Transport(sock, "pop.example.com", 995)

        transport.close()
        transport.close()

        sock.close.assert_called_once()
        assert transport.is_closed is True

    def test_io_after_close_raises(self):
        """A closed transport refuses reads and writes."""
        transport = Transport(MagicMock(), "pop.example.com", 995)
        transport.close()

        with pytest.raises(Pop3ConnectionError):
            transport.write_command("NOOP")
        with pytest.raises(Pop3ConnectionError):
            transport.read_available(512)
