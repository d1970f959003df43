"""Connection checks and inline field validators.

:class:`ConnectionValidator` answers "does this server accept these
credentials?" with a boolean. Ordinary failures -- timeouts, DNS errors,
refused connections, 401, 404, 5xx -- all come back as ``False``; anything
else (a bug, a broken vault) propagates.

:func:`validate_url` and :func:`validate_field_not_empty` follow the inline
validator contract used by :class:`~scanlink.auth.prompt.CredentialPrompt`:
return an error message for a bad value, ``None`` for a good one.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

from scanlink.client.scan_client import ScanClient
from scanlink.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from scanlink.output import debug

logger = logging.getLogger(__name__)


def validate_url(value: str) -> Optional[str]:
    """Accept absolute ``http``/``https`` URLs with a host."""
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return "Invalid URL: expected http(s)://host[:port][/path]"
    try:
        parts.port
    except ValueError:
        return "Invalid URL: bad port"
    return None


def validate_field_not_empty(value: str) -> Optional[str]:
    """Reject empty values."""
    if not value:
        return "Must be non-empty"
    return None


class ConnectionValidator:
    """Verify connectivity and credentials with a lightweight round-trip."""

    async def check_connection(self, client: ScanClient) -> bool:
        """Ping the scan server through *client*.

        Args:
            client: A configured, not yet opened :class:`ScanClient`.

        Returns:
            ``True`` if the server answered the ping successfully, ``False``
            if it was unreachable or rejected the request.
        """
        try:
            async with client:
                await client.ping()
        except (AuthError, NotFoundError, ServerError, ConnectionError_) as exc:
            logger.info("Connection check against %s failed: %s", client.config.server_url, exc)
            debug(f"Connection check failed: {exc}")
            return False
        return True
