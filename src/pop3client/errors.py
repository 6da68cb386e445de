"""Exception hierarchy for pop3client.

Every command has its own error class so callers can tell failures apart at
the call site. Catch ``Pop3Error`` to handle all of them at once.
"""


class Pop3Error(Exception):
    """Base class for all pop3client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class Pop3ConnectionError(Pop3Error):
    """TCP, TLS or DNS failure, or a server that refused the greeting.

    The session is not usable after this error.
    """


class LoginError(Pop3Error):
    """USER or PASS was rejected, or no password could be found."""


class StatError(Pop3Error):
    """STAT failed or returned an unparsable reply."""


class ListError(Pop3Error):
    """LIST failed or returned an unparsable reply."""


class UidlError(Pop3Error):
    """UIDL failed or returned an unparsable reply."""


class RetrieveError(Pop3Error):
    """RETR failed."""


class TopError(Pop3Error):
    """TOP failed."""


class DeleteError(Pop3Error):
    """DELE failed."""


class ResetError(Pop3Error):
    """RSET failed."""


class NoopError(Pop3Error):
    """NOOP failed."""


class QuitError(Pop3Error):
    """QUIT was answered with -ERR (some deletions may not have been applied)."""


class ProtocolStateError(Pop3Error):
    """Operation invoked on a session that has left its state or was closed."""


class ReplyError(Pop3Error):
    """A reply that is not a success, raised by the response reader."""


class ServerError(ReplyError):
    """Well-formed ``-ERR`` reply. The message is the server's text."""


class ProtocolError(ReplyError):
    """Reply that starts with neither ``+OK`` nor ``-ERR``."""
