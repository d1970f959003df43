"""Credential storage and acquisition for scanlink.

- :class:`SecretStore` -- pass-through to the OS vault via :mod:`keyring`.
- :func:`create_account_id` -- obscured vault key for a server+user pair.
- :class:`CredentialPrompt` -- async interactive input capability.
- :class:`TerminalPrompt` -- the terminal implementation built on Typer.

Typical usage::

    from scanlink.auth import SecretStore, create_account_id

    vault = SecretStore()
    password = vault.get("com.scanlink.xray", create_account_id(url, user))
"""

from scanlink.auth.prompt import CredentialPrompt, TerminalPrompt, Validator
from scanlink.auth.secret_store import SecretStore, create_account_id

__all__ = [
    "CredentialPrompt",
    "SecretStore",
    "TerminalPrompt",
    "Validator",
    "create_account_id",
]
