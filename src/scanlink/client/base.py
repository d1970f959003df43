"""Shared async HTTP plumbing for the scan and metadata clients.

:class:`BaseClient` turns a :class:`~scanlink.models.ClientConfig` into an
:class:`httpx.AsyncClient` (base URL, headers, Basic auth, proxy, timeout)
and maps failures onto the :mod:`scanlink.exceptions` hierarchy:

- network errors, timeouts, DNS failures -> :class:`ConnectionError_`
- 401 / 403 -> :class:`AuthError`
- 404 -> :class:`NotFoundError`
- any other status >= 400 -> :class:`ServerError`

No request is retried; retrying is up to the user.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from scanlink.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from scanlink.models import ClientConfig, ProxyConfigured, ProxyDisabled
from scanlink.output import debug


class BaseClient:
    """Async HTTP client configured from a :class:`~scanlink.models.ClientConfig`.

    Must be used as an async context manager.

    Args:
        config: Server URL, credentials, headers, and proxy for this client.
        transport: Optional transport override. When given, it replaces
            proxy routing entirely (tests pass :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> BaseClient:
        self._client = httpx.AsyncClient(**self._client_kwargs())
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _client_kwargs(self) -> dict[str, Any]:
        config = self._config
        kwargs: dict[str, Any] = {
            "base_url": config.server_url,
            "headers": dict(config.headers),
            "timeout": config.timeout,
            "verify": config.verify_ssl,
            "follow_redirects": True,
            # "off" must also ignore HTTP(S)_PROXY from the environment.
            "trust_env": not isinstance(config.proxy, ProxyDisabled),
        }
        if config.username is not None and config.password is not None:
            kwargs["auth"] = httpx.BasicAuth(config.username, config.password)
        if self._transport is not None:
            kwargs["transport"] = self._transport
        elif isinstance(config.proxy, ProxyConfigured) and config.proxy.config.url:
            kwargs["proxy"] = config.proxy.config.url
        return kwargs

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Any] = None,
    ) -> httpx.Response:
        """Send a request and raise a typed exception for failures.

        Args:
            method: HTTP method.
            path: Path relative to the configured server URL.
            json_body: Optional JSON-serialisable body.

        Returns:
            The successful :class:`httpx.Response`.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other error status.
            ConnectionError_: On network, timeout, redirect, decoding, or URL errors.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        debug(f"{method} {self._config.server_url.rstrip('/')}{path}")
        try:
            if json_body is None:
                response = await self._client.request(method, path)
            else:
                response = await self._client.request(method, path, json=json_body)
        except httpx.RequestError as exc:
            raise ConnectionError_(f"Connection to {self._config.server_url} failed: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise ConnectionError_(f"Invalid server URL {self._config.server_url!r}: {exc}") from exc

        self._map_response_error(response)
        return response

    async def post_json(self, path: str, json_body: Any) -> Any:
        """POST *json_body* and return the decoded JSON response.

        Raises:
            ServerError: If the response body is not valid JSON.
        """
        response = await self.request("POST", path, json_body=json_body)
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError(f"Invalid JSON in response from {path}: {exc}") from exc

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)
