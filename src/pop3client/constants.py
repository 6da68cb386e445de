"""pop3client constants."""

# POP3 over TLS
DEFAULT_POP3S_PORT = 995

# Well-known providers
OUTLOOK_HOST = "outlook.office365.com"
GMAIL_HOST = "pop.gmail.com"

# Reader chunk sizes; multi-line replies can carry whole messages
READ_CHUNK_SIZE = 512
READ_ALL_CHUNK_SIZE = 2048

# Wire tokens
CRLF = "\r\n"
OK_TOKEN = "+OK"
ERR_TOKEN = "-ERR"
MULTI_LINE_TERMINATOR = b"\r\n.\r\n"
MULTI_LINE_TERMINATOR_BARE_LF = b"\n.\n"

# Message id of a reply whose id was not requested explicitly
UNKNOWN_MESSAGE_ID = -1

# Signed 32-bit range for ids, sizes and counts
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Keyring settings
KEYRING_SCHEMA_NAME = "org.pop3client.Password"
