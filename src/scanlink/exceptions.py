"""Exceptions raised by scanlink.

Every error carries the process exit code the CLI should end with
(:mod:`scanlink.exit_codes`). :func:`scanlink.app.main` prints the message
and exits with that code; anything that is not a :class:`ScanlinkError`
is treated as a crash.

Not every failure is an exception. A credential field the user left empty,
or a server that rejects the credentials during
:meth:`~scanlink.connect.manager.ConnectionManager.connect`, comes back as
``False``. Exceptions are for requests that fail outright and for a broken
environment (unreadable state file, locked vault, malformed proxy URL).

::

    ScanlinkError            exit 1
      AuthError              exit 3   HTTP 401 / 403
      NotFoundError          exit 4   HTTP 404
      ServerError            exit 5   other HTTP errors, bad JSON
      ConnectionError_       exit 6   DNS, refused, timeout
      VaultError             exit 8   OS vault backend
      ConfigError            exit 1   config or state file
        ProxyConfigError              proxy URL
"""

from scanlink.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_VAULT_ERROR,
)


class ScanlinkError(Exception):
    """Base class; ``exit_code`` is looked up on the class unless overridden.

    Args:
        message: Shown to the user on stderr.
        exit_code: Per-instance override of the class exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class AuthError(ScanlinkError):
    """The scan server refused the credentials."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ScanlinkError):
    """The endpoint does not exist at the configured server URL.

    Usually means the URL points at the wrong service or path prefix.
    """

    exit_code = EXIT_NOT_FOUND


class ServerError(ScanlinkError):
    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(ScanlinkError):
    """The server could not be reached.

    The trailing underscore keeps the builtin ``ConnectionError`` usable.
    """

    exit_code = EXIT_CONNECTION_ERROR


class VaultError(ScanlinkError):
    """The OS credential vault could not be read or written."""

    exit_code = EXIT_VAULT_ERROR


class ConfigError(ScanlinkError):
    """``config.json``, ``state.json`` or an environment override is unusable."""

    exit_code = EXIT_GENERIC_FAILURE


class ProxyConfigError(ConfigError):
    """The proxy URL is not of the form ``scheme://host[:port]``."""
