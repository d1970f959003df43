"""OS vault adapter for the scan server password.

The password is the only secret scanlink handles, and it never touches the
plain state file. It is stored in the platform credential vault (macOS
Keychain, Windows Credential Locker, Secret Service on Linux) through
:mod:`keyring`, under a constant service id and a derived account id.

The account id is ``sha256(url + username)`` in hex, so the vault index
scopes each entry to one server+user pair without revealing either value.
See :func:`create_account_id`.

See Also:
    :class:`~scanlink.connect.manager.ConnectionManager` -- the only caller.
"""

from __future__ import annotations

import hashlib
import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from scanlink.exceptions import VaultError

logger = logging.getLogger(__name__)


def create_account_id(url: str, username: str) -> str:
    """Derive the obscured vault account id for a server+user pair.

    Args:
        url: Scan server URL.
        username: Scan server username.

    Returns:
        Hex-encoded SHA-256 digest of ``url + username``.
    """
    return hashlib.sha256((url + username).encode("utf-8")).hexdigest()


class SecretStore:
    """Thin pass-through to the OS credential vault.

    No value is cached in-process; every call goes to the backend. Backend
    failures (locked keychain, missing Secret Service daemon) are raised as
    :class:`~scanlink.exceptions.VaultError` because they point at the
    environment rather than at the credentials.

    Example::

        vault = SecretStore()
        vault.set("com.scanlink.xray", account_id, "s3cret")
        assert vault.get("com.scanlink.xray", account_id) == "s3cret"
    """

    def get(self, service_id: str, account_id: str) -> str:
        """Return the stored secret, or an empty string when there is none.

        Raises:
            VaultError: If the vault backend cannot be read.
        """
        try:
            value = keyring.get_password(service_id, account_id)
        except KeyringError as exc:
            raise VaultError(f"Failed to read from the OS vault: {exc}") from exc
        return value or ""

    def set(self, service_id: str, account_id: str, value: str) -> None:
        """Store *value* for the given service and account.

        Raises:
            VaultError: If the vault backend cannot be written.
        """
        try:
            keyring.set_password(service_id, account_id, value)
        except KeyringError as exc:
            raise VaultError(f"Failed to write to the OS vault: {exc}") from exc
        logger.debug("Stored secret for account %s", account_id[:12])

    def delete(self, service_id: str, account_id: str) -> None:
        """Remove the secret if present. Missing entries are ignored.

        Raises:
            VaultError: If the vault backend fails for any other reason.
        """
        try:
            keyring.delete_password(service_id, account_id)
        except PasswordDeleteError:
            logger.debug("No secret to delete for account %s", account_id[:12])
        except KeyringError as exc:
            raise VaultError(f"Failed to delete from the OS vault: {exc}") from exc
