"""Canonical Pydantic models shared across all scanlink modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or constructed once at startup:
    :class:`ProxySupport`, :class:`HttpConfig`, :class:`GlobalConfig`, and
    :class:`ConnectionSettings`.

**Connection models** -- held in memory by the connection manager and never
persisted as a whole:
    :class:`Credentials`, :class:`ProxyConfig`, :class:`ProxyDisabled`,
    :class:`ProxyConfigured`, and :class:`ClientConfig`.

**Wire models** -- request and response bodies of the scan and metadata
services. Only the fields scanlink reads are declared; everything else is
kept in ``model_extra`` and passed through untouched:
    :class:`ComponentDetails`, :class:`SummaryRequest`, :class:`Artifact`,
    :class:`SummaryResponse`, :class:`ComponentMetadata`, and
    :class:`ModuleResponse`.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from scanlink import __version__

DEFAULT_METADATA_URL = "https://search.gocenter.io"
"""Base URL of the public module-metadata service."""


# --- Configuration models ---


class ProxySupport(str, enum.Enum):
    """Ambient proxy-support toggle.

    ``OFF`` bypasses every other proxy setting, including environment
    proxies picked up by the HTTP transport. ``DEFAULT`` and ``OVERRIDE``
    both let the configured proxy URL take effect.
    """

    DEFAULT = "default"
    OVERRIDE = "override"
    OFF = "off"


class HttpConfig(BaseModel):
    """Ambient HTTP settings stored in the ``http`` section of :class:`GlobalConfig`.

    Environment variables override these values; see
    :func:`~scanlink.config.resolve_http_config`.
    """

    proxy_support: ProxySupport = Field(
        default=ProxySupport.OVERRIDE, description="Proxy support: default, override, off"
    )
    proxy: Optional[str] = Field(
        default=None, description="Proxy URL, e.g. http://proxy.local:3128"
    )
    proxy_authorization: Optional[str] = Field(
        default=None, description="Value sent in the Proxy-Authorization header"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/scanlink/config.json``."""

    http: HttpConfig = Field(default_factory=HttpConfig)
    metadata_url: str = Field(
        default=DEFAULT_METADATA_URL, description="Base URL of the metadata service"
    )


class ConnectionSettings(BaseModel):
    """Constants used by the connection manager.

    Built once at startup and passed to
    :class:`~scanlink.connect.manager.ConnectionManager`. Tests substitute
    their own instance instead of patching module globals.
    """

    model_config = ConfigDict(frozen=True)

    service_id: str = "com.scanlink.xray"
    url_key: str = "xray.url"
    username_key: str = "xray.username"
    user_agent: str = f"scanlink/{__version__}"
    metadata_url: str = DEFAULT_METADATA_URL


# --- Connection models ---


class Credentials(BaseModel):
    """The in-memory credential triple for the scan server.

    Instances are immutable; the manager swaps the whole triple at once so
    no reader ever sees a half-updated set.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    username: str = ""
    password: str = Field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        """``True`` when url, username and password are all non-empty."""
        return bool(self.url and self.username and self.password)


class ProxyConfig(BaseModel):
    """Proxy address parsed from the ambient proxy URL.

    All fields are ``None`` when proxy support is enabled but no proxy URL
    is set. Such an empty config is still "configured" for the purpose of
    the ``Proxy-Authorization`` header, but :attr:`url` is ``None`` so the
    transport gets no proxy route.
    """

    model_config = ConfigDict(frozen=True)

    protocol: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None

    @property
    def url(self) -> Optional[str]:
        """The proxy URL to hand to the HTTP transport, or ``None``."""
        if not self.host:
            return None
        scheme = self.protocol or "http"
        if self.port is None:
            return f"{scheme}://{self.host}"
        return f"{scheme}://{self.host}:{self.port}"


class ProxyDisabled(BaseModel):
    """Proxy support is switched off."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["disabled"] = "disabled"


class ProxyConfigured(BaseModel):
    """Proxy support is on; ``config`` may still be empty."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["configured"] = "configured"
    config: ProxyConfig = Field(default_factory=ProxyConfig)


ProxySetting = Annotated[Union[ProxyDisabled, ProxyConfigured], Field(discriminator="kind")]


class ClientConfig(BaseModel):
    """Everything needed to construct a scan or metadata client.

    Built fresh by :meth:`~scanlink.connect.manager.ConnectionManager.create_client`
    for each client and never persisted. ``username`` and ``password`` are
    ``None`` for the metadata service.
    """

    server_url: str = ""
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    headers: dict[str, str] = Field(default_factory=dict)
    proxy: ProxySetting = Field(default_factory=ProxyConfigured)
    timeout: int = 30
    verify_ssl: bool = True


# --- Wire models ---


class ComponentDetails(BaseModel):
    """A component identifier such as ``go://github.com/pkg/errors:0.9.1``."""

    component_id: str


class SummaryRequest(BaseModel):
    """Body of the component summary and module metadata requests."""

    component_details: list[ComponentDetails] = Field(default_factory=list)


class Artifact(BaseModel):
    """One scanned component returned by the scan server."""

    model_config = ConfigDict(extra="allow")

    general: dict[str, Any] = Field(default_factory=dict)
    issues: list[dict[str, Any]] = Field(default_factory=list)
    licenses: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def component_id(self) -> str:
        return str(self.general.get("component_id", ""))


class SummaryResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    artifacts: list[Artifact] = Field(default_factory=list)


class ComponentMetadata(BaseModel):
    """Per-module metadata returned by the metadata service."""

    model_config = ConfigDict(extra="allow")

    component_id: str = ""
    description: Optional[str] = None
    latest_version: Optional[str] = None
    licenses: list[Any] = Field(default_factory=list)
    stars: Optional[int] = None
    downloads: Optional[int] = None


class ModuleResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    components_metadata: list[ComponentMetadata] = Field(default_factory=list)
