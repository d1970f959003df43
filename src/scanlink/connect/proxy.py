"""Derive the proxy setting from ambient HTTP settings.

The result is a tagged variant (:class:`~scanlink.models.ProxyDisabled` or
:class:`~scanlink.models.ProxyConfigured`) rather than ``config | False``.
An empty ``ProxyConfigured`` -- proxy support on, no proxy URL -- still
counts as configured when deciding whether to send ``Proxy-Authorization``,
but gives the HTTP transport no proxy route.
"""

from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import urlsplit

from scanlink.config import resolve_http_config
from scanlink.exceptions import ProxyConfigError
from scanlink.models import HttpConfig, ProxyConfig, ProxyConfigured, ProxyDisabled, ProxySetting, ProxySupport


def parse_proxy_url(url: str) -> ProxyConfig:
    """Split a proxy URL into protocol, host, and optional port.

    Args:
        url: Absolute proxy URL such as ``http://proxy.local:3128``.

    Returns:
        The parsed :class:`~scanlink.models.ProxyConfig`. ``port`` is
        ``None`` when the URL does not spell one out.

    Raises:
        ProxyConfigError: If the URL has no scheme or host, or a bad port.
    """
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.hostname:
        raise ProxyConfigError(f"Invalid proxy URL {url!r}: expected scheme://host[:port]")
    try:
        port = parts.port
    except ValueError as exc:
        raise ProxyConfigError(f"Invalid proxy URL {url!r}: {exc}") from exc
    return ProxyConfig(protocol=parts.scheme.lower(), host=parts.hostname, port=port)


class ProxyResolver:
    """Read the ambient proxy settings each time a client is built.

    Args:
        settings: Callable returning the current
            :class:`~scanlink.models.HttpConfig`. Defaults to
            :func:`~scanlink.config.resolve_http_config`, which reads the
            environment and the global config file.
    """

    def __init__(self, settings: Callable[[], HttpConfig] = resolve_http_config) -> None:
        self._settings = settings

    def resolve(self) -> ProxySetting:
        """Return the proxy setting for a new client.

        ``proxy_support == "off"`` wins over any configured proxy URL.

        Raises:
            ProxyConfigError: If the configured proxy URL is malformed.
        """
        http = self._settings()
        if http.proxy_support == ProxySupport.OFF:
            return ProxyDisabled()
        if not http.proxy:
            return ProxyConfigured()
        return ProxyConfigured(config=parse_proxy_url(http.proxy))

    def proxy_authorization(self) -> Optional[str]:
        """The ambient ``Proxy-Authorization`` value, if any."""
        return self._settings().proxy_authorization or None
