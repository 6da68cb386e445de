"""POP3 password storage in the system keyring (libsecret)."""

from pop3client.constants import KEYRING_SCHEMA_NAME


class CredentialService:
    """Password management via system keyring.

    Uses libsecret (GNOME Keyring) through PyGObject. Passwords are keyed by
    user name and server host, so one user can hold accounts on several
    servers. Every method degrades to a negative result when the keyring is
    unavailable.

    Usage:
        credentials = CredentialService()
        credentials.store_password("user@example.com", "pop.example.com", "secret")
        password = credentials.get_password("user@example.com", "pop.example.com")
    """

    SCHEMA_NAME = KEYRING_SCHEMA_NAME
    USERNAME_ATTRIBUTE = "username"
    HOST_ATTRIBUTE = "host"

    @staticmethod
    def _get_secret_module():
        """Get the Secret module if available.

        Returns:
            The gi.repository.Secret module, or None if unavailable.
        """
        try:
            import gi

            gi.require_version("Secret", "1")
            from gi.repository import Secret

            return Secret
        except (ImportError, ValueError):
            return None

    @classmethod
    def is_available(cls) -> bool:
        """Check if system keyring is available."""
        return cls._get_secret_module() is not None

    def _get_schema(self, secret):
        return secret.Schema.new(
            self.SCHEMA_NAME,
            secret.SchemaFlags.NONE,
            {
                self.USERNAME_ATTRIBUTE: secret.SchemaAttributeType.STRING,
                self.HOST_ATTRIBUTE: secret.SchemaAttributeType.STRING,
            },
        )

    def _attributes(self, username: str, host: str) -> dict[str, str]:
        return {self.USERNAME_ATTRIBUTE: username, self.HOST_ATTRIBUTE: host}

    def store_password(self, username: str, host: str, password: str) -> bool:
        """Store a POP3 password in the system keyring.

        Args:
            username: Mailbox user name.
            host: POP3 server host name.
            password: The password to store.

        Returns:
            True if storage was successful, False otherwise.
        """
        secret = self._get_secret_module()
        if secret is None:
            return False

        try:
            secret.password_store_sync(
                self._get_schema(secret),
                self._attributes(username, host),
                secret.COLLECTION_DEFAULT,
                f"POP3 password for {username} on {host}",
                password,
                None,
            )
            return True
        except Exception:
            return False

    def get_password(self, username: str, host: str) -> str | None:
        """Retrieve a POP3 password from the system keyring.

        Args:
            username: Mailbox user name.
            host: POP3 server host name.

        Returns:
            The stored password, or None if not found or unavailable.
        """
        secret = self._get_secret_module()
        if secret is None:
            return None

        try:
            return secret.password_lookup_sync(
                self._get_schema(secret),
                self._attributes(username, host),
                None,
            )
        except Exception:
            return None

    def delete_password(self, username: str, host: str) -> bool:
        """Remove a POP3 password from the system keyring.

        Returns:
            True if a password was removed, False otherwise.
        """
        secret = self._get_secret_module()
        if secret is None:
            return False

        try:
            return secret.password_clear_sync(
                self._get_schema(secret),
                self._attributes(username, host),
                None,
            )
        except Exception:
            return False
