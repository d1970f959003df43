"""Process exit codes.

Scripts wrapping ``scanlink`` can branch on these instead of parsing stderr::

    scanlink components npm://lodash:4.17.20 || case $? in
        3) scanlink connect ;;
        6) echo "scan server unreachable" ;;
    esac
"""

EXIT_SUCCESS = 0

EXIT_GENERIC_FAILURE = 1
"""Unclassified errors, including unusable configuration."""

EXIT_INVALID_USAGE = 2
"""Bad arguments, e.g. an unknown key for ``scanlink config set``."""

EXIT_AUTH_FAILURE = 3
"""Credentials were rejected, or ``connect`` could not verify them."""

EXIT_NOT_FOUND = 4

EXIT_SERVER_ERROR = 5

EXIT_CONNECTION_ERROR = 6
"""DNS failure, refused connection, or timeout."""

EXIT_VAULT_ERROR = 8
"""The OS credential vault failed."""
