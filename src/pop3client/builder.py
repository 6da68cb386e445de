"""Connection targets and the staged connection builder.

Each builder stage only exposes the next legal step, so a password can't be
given without a user name and ``connect`` is only reachable once the
credentials are settled:

    session = (
        builder()
        .username("user@example.com")
        .password("secret")
        .connect(Pop3Connection.gmail())
    )
"""

import logging
import ssl
from dataclasses import dataclass, replace

from pop3client.constants import DEFAULT_POP3S_PORT, GMAIL_HOST, OUTLOOK_HOST
from pop3client.credential import CredentialService
from pop3client.errors import LoginError
from pop3client.session import (
    AuthorizationSession,
    ConnectingSession,
    TransactionSession,
)
from pop3client.transport import Transport

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pop3Connection:
    """Server to connect to. The host is also the TLS server name."""

    host: str
    port: int = DEFAULT_POP3S_PORT

    @classmethod
    def outlook(cls) -> "Pop3Connection":
        """Microsoft 365 / Outlook.com."""
        return cls(OUTLOOK_HOST, DEFAULT_POP3S_PORT)

    @classmethod
    def gmail(cls) -> "Pop3Connection":
        """Google Mail."""
        return cls(GMAIL_HOST, DEFAULT_POP3S_PORT)


@dataclass(frozen=True)
class _Settings:
    username: str | None = None
    password: str | None = None
    keyring: CredentialService | None = None
    timeout: float | None = None
    context: ssl.SSLContext | None = None


class CredentialsStage:
    """First stage: choose between logging in and connecting anonymously."""

    def __init__(self, settings: _Settings | None = None):
        self._settings = settings or _Settings()

    def username(self, username: str) -> "PasswordStage":
        """Set the user name; a password must follow."""
        return PasswordStage(replace(self._settings, username=username))

    def no_login(self) -> "ConnectStage":
        """Skip credentials; connect() stops in AUTHORIZATION."""
        return ConnectStage(replace(self._settings, username=None, password=None))


class PasswordStage:
    """Second stage: supply the password for the chosen user."""

    def __init__(self, settings: _Settings):
        self._settings = settings

    def password(self, password: str) -> "ConnectStage":
        return ConnectStage(replace(self._settings, password=password))

    def password_from_keyring(
        self, credentials: CredentialService | None = None
    ) -> "ConnectStage":
        """Look the password up in the system keyring when connecting.

        The lookup is keyed by the user name and the target host.

        Args:
            credentials: Keyring access, defaults to a new CredentialService.
        """
        return ConnectStage(
            replace(self._settings, keyring=credentials or CredentialService())
        )


class ConnectStage:
    """Final stage: tune the connection and open it."""

    def __init__(self, settings: _Settings):
        self._settings = settings

    def timeout(self, seconds: float | None) -> "ConnectStage":
        """Set the socket timeout. A timed out session can't be recovered."""
        return ConnectStage(replace(self._settings, timeout=seconds))

    def ssl_context(self, context: ssl.SSLContext) -> "ConnectStage":
        """Use a custom TLS context instead of the OS trust store default."""
        return ConnectStage(replace(self._settings, context=context))

    def _resolve_password(self, target: Pop3Connection) -> str | None:
        settings = self._settings
        if settings.username is None or settings.keyring is None:
            return settings.password

        password = settings.keyring.get_password(settings.username, target.host)
        if password is None:
            raise LoginError(
                f"no password stored for {settings.username} on {target.host}"
            )
        return password

    def connect(
        self, target: Pop3Connection
    ) -> AuthorizationSession | TransactionSession:
        """Open the TLS connection, read the greeting and log in if configured.

        Args:
            target: Server host and port.

        Returns:
            TransactionSession if credentials were given, otherwise an
            AuthorizationSession.

        Raises:
            Pop3ConnectionError: On network or TLS failure, or if the server
                is not ready.
            LoginError: If the credentials were rejected or the keyring had
                no password. The connection is closed.
        """
        settings = self._settings
        password = self._resolve_password(target)

        transport = Transport.open(
            target.host,
            target.port,
            timeout=settings.timeout,
            context=settings.context,
        )
        session = ConnectingSession(transport).perform_greeting()
        _LOGGER.debug("Greeting from %s: %s", target.host, session.greeting)

        if settings.username is None:
            return session

        try:
            return session.login(settings.username, password)
        except LoginError:
            session.close()
            raise


def builder() -> CredentialsStage:
    """Start building a POP3 connection."""
    return CredentialsStage()
