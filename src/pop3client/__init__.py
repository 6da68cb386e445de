"""pop3client - a typed, blocking POP3 client over TLS."""

from .builder import (
    ConnectStage,
    CredentialsStage,
    PasswordStage,
    Pop3Connection,
    builder,
)
from .constants import UNKNOWN_MESSAGE_ID
from .credential import CredentialService
from .errors import (
    DeleteError,
    ListError,
    LoginError,
    NoopError,
    Pop3ConnectionError,
    Pop3Error,
    ProtocolError,
    ProtocolStateError,
    QuitError,
    ReplyError,
    ResetError,
    RetrieveError,
    ServerError,
    StatError,
    TopError,
    UidlError,
)
from .replies import (
    ListItem,
    ListReply,
    RetrieveReply,
    StatReply,
    TopReply,
    UidlItem,
    UidlReply,
)
from .session import AuthorizationSession, ConnectingSession, TransactionSession
from .transport import Transport

__version__ = "0.1.0"
__all__ = [
    "AuthorizationSession",
    "ConnectStage",
    "ConnectingSession",
    "CredentialService",
    "CredentialsStage",
    "DeleteError",
    "ListError",
    "ListItem",
    "ListReply",
    "LoginError",
    "NoopError",
    "PasswordStage",
    "Pop3Connection",
    "Pop3ConnectionError",
    "Pop3Error",
    "ProtocolError",
    "ProtocolStateError",
    "QuitError",
    "ReplyError",
    "ResetError",
    "RetrieveError",
    "RetrieveReply",
    "ServerError",
    "StatError",
    "StatReply",
    "TopError",
    "TopReply",
    "Transport",
    "TransactionSession",
    "UNKNOWN_MESSAGE_ID",
    "UidlError",
    "UidlItem",
    "UidlReply",
    "builder",
]
