"""Connection manager -- credentials, client construction, verify-before-persist.

:class:`ConnectionManager` owns the in-memory credential triple for the scan
server and is the only component that reads or writes it. Credentials come
from three sources, tried per field in a fixed order:

1. durable state (:class:`~scanlink.config.StateStore`) for url and username,
   the OS vault (:class:`~scanlink.auth.secret_store.SecretStore`) for the
   password;
2. an interactive :class:`~scanlink.auth.prompt.CredentialPrompt` when the
   caller asks for one.

Nothing is written to durable state or the vault until
:class:`~scanlink.connect.validator.ConnectionValidator` has confirmed the
server accepts the credentials. Non-interactive population (on startup and
before requests) is never persisted.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from scanlink.auth.prompt import CredentialPrompt, TerminalPrompt
from scanlink.auth.secret_store import SecretStore, create_account_id
from scanlink.client.metadata_client import MetadataClient
from scanlink.client.scan_client import ScanClient
from scanlink.config import StateStore, resolve_http_config
from scanlink.connect.proxy import ProxyResolver
from scanlink.connect.validator import ConnectionValidator, validate_field_not_empty, validate_url
from scanlink.models import (
    Artifact,
    ClientConfig,
    ComponentDetails,
    ComponentMetadata,
    ConnectionSettings,
    Credentials,
    HttpConfig,
    ProxyDisabled,
)
from scanlink.output import debug, get_output

logger = logging.getLogger(__name__)

DEFAULT_URL_VALUE = "https://"


class PopulateStage(enum.Enum):
    """States of the credential population flow."""

    AWAITING_URL = "awaiting_url"
    AWAITING_USERNAME = "awaiting_username"
    AWAITING_PASSWORD = "awaiting_password"
    COMPLETE = "complete"
    ABORTED = "aborted"


_NEXT_STAGE = {
    PopulateStage.AWAITING_URL: PopulateStage.AWAITING_USERNAME,
    PopulateStage.AWAITING_USERNAME: PopulateStage.AWAITING_PASSWORD,
    PopulateStage.AWAITING_PASSWORD: PopulateStage.COMPLETE,
}


@dataclass
class PopulateFlow:
    """Strictly sequential url -> username -> password resolution.

    Each stage either yields a value and moves on, or yields an empty string
    and aborts the whole flow. Values are collected here and only handed to
    the manager once the flow is complete.
    """

    stage: PopulateStage = PopulateStage.AWAITING_URL
    values: dict[PopulateStage, str] = field(default_factory=dict)

    @property
    def done(self) -> bool:
        return self.stage in (PopulateStage.COMPLETE, PopulateStage.ABORTED)

    def advance(self, value: str) -> None:
        if self.done:
            raise RuntimeError(f"Cannot advance a finished flow ({self.stage.value})")
        if not value:
            self.stage = PopulateStage.ABORTED
            return
        self.values[self.stage] = value
        self.stage = _NEXT_STAGE[self.stage]

    def credentials(self) -> Credentials:
        if self.stage is not PopulateStage.COMPLETE:
            raise RuntimeError(f"Credentials are not available in stage {self.stage.value}")
        return Credentials(
            url=self.values[PopulateStage.AWAITING_URL],
            username=self.values[PopulateStage.AWAITING_USERNAME],
            password=self.values[PopulateStage.AWAITING_PASSWORD],
        )


class ConnectionManager:
    """Manage scan server credentials and build configured clients.

    Args:
        settings: Constants (vault service id, state keys, User-Agent,
            metadata service URL).
        secret_store: OS vault adapter.
        prompt: Interactive input capability used by :meth:`connect`.
        http_settings: Callable returning the ambient
            :class:`~scanlink.models.HttpConfig` (timeout, SSL, proxy).
        proxy_resolver: Proxy resolution; built from *http_settings* when
            omitted.
        validator: Connection check used by :meth:`connect`.
        transport: Optional :mod:`httpx` transport passed to every client.

    Example::

        manager = await ConnectionManager().activate(StateStore())
        if not manager.are_credentials_set():
            await manager.connect()
        artifacts = await manager.get_components(details)
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        secret_store: Optional[SecretStore] = None,
        prompt: Optional[CredentialPrompt] = None,
        http_settings: Callable[[], HttpConfig] = resolve_http_config,
        proxy_resolver: Optional[ProxyResolver] = None,
        validator: Optional[ConnectionValidator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or ConnectionSettings()
        self._vault = secret_store or SecretStore()
        self._prompt = prompt or TerminalPrompt()
        self._http_settings = http_settings
        self._proxy_resolver = proxy_resolver or ProxyResolver(http_settings)
        self._validator = validator or ConnectionValidator()
        self._transport = transport
        self._storage: Optional[StateStore] = None
        self._credentials = Credentials()

    @property
    def credentials(self) -> Credentials:
        """The current in-memory credentials (possibly incomplete)."""
        return self._credentials

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def activate(self, storage: StateStore) -> ConnectionManager:
        """Attach durable state and load credentials without prompting.

        A missing field leaves the credentials empty; that is not an error.
        """
        self._storage = storage
        if not await self.populate_credentials(prompt=False):
            debug("No stored scan server credentials found")
        return self

    async def connect(self) -> bool:
        """Prompt for credentials, verify them, and persist them on success.

        Returns:
            ``False`` if the user left a field empty or the server could not
            be reached or rejected the credentials; nothing is persisted in
            either case. ``True`` once url, username, and password have been
            written to durable state and the vault.
        """
        if not await self.populate_credentials(prompt=True):
            return False
        with get_output().status("Checking connection with the scan server..."):
            client = self.create_scan_client()
            if not await self._validator.check_connection(client):
                return False
            self._store_url()
            self._store_username()
            await self._store_password()
        logger.info("Connected to %s as %s", self._credentials.url, self._credentials.username)
        return True

    async def disconnect(self) -> None:
        """Forget the credentials in memory, in durable state, and in the vault."""
        storage = self._require_storage()
        url = self._credentials.url or storage.get(self._settings.url_key)
        username = self._credentials.username or storage.get(self._settings.username_key)
        if url and username:
            await asyncio.to_thread(
                self._vault.delete, self._settings.service_id, create_account_id(url, username)
            )
        storage.update(self._settings.url_key, None)
        storage.update(self._settings.username_key, None)
        self._credentials = Credentials()

    def are_credentials_set(self) -> bool:
        return self._credentials.is_complete

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def get_components(self, component_details: list[ComponentDetails]) -> list[Artifact]:
        """Fetch the scan summary for *component_details*.

        Loads stored credentials first if none are in memory. Connectivity
        is not checked up front; request errors propagate.
        """
        if not self.are_credentials_set():
            await self.populate_credentials(prompt=False)
        async with self.create_scan_client() as client:
            return await client.summary_component(component_details)

    async def get_module_metadata(
        self, component_details: list[ComponentDetails]
    ) -> list[ComponentMetadata]:
        """Fetch module metadata from the metadata service (no scan credentials)."""
        async with self.create_metadata_client() as client:
            return await client.get_metadata_for_modules(component_details)

    # ------------------------------------------------------------------ #
    # Client construction
    # ------------------------------------------------------------------ #

    def create_client(self, for_primary: bool = True) -> ClientConfig:
        """Build a fresh client configuration.

        The scan server config carries the in-memory credentials; the
        metadata service config carries none. Both get the ``User-Agent``
        header and the resolved proxy. ``Proxy-Authorization`` is added only
        when proxy support is not off and an ambient value exists.

        Raises:
            ProxyConfigError: If the configured proxy URL is malformed.
        """
        http = self._http_settings()
        proxy = self._proxy_resolver.resolve()
        headers = {"User-Agent": self._settings.user_agent}
        if not isinstance(proxy, ProxyDisabled):
            proxy_auth = self._proxy_resolver.proxy_authorization()
            if proxy_auth:
                headers["Proxy-Authorization"] = proxy_auth

        if not for_primary:
            return ClientConfig(
                server_url=self._settings.metadata_url,
                headers=headers,
                proxy=proxy,
                timeout=http.timeout,
                verify_ssl=http.verify_ssl,
            )
        return ClientConfig(
            server_url=self._credentials.url,
            username=self._credentials.username,
            password=self._credentials.password,
            headers=headers,
            proxy=proxy,
            timeout=http.timeout,
            verify_ssl=http.verify_ssl,
        )

    def create_scan_client(self) -> ScanClient:
        return ScanClient(self.create_client(for_primary=True), transport=self._transport)

    def create_metadata_client(self) -> MetadataClient:
        return MetadataClient(self.create_client(for_primary=False), transport=self._transport)

    # ------------------------------------------------------------------ #
    # Credential population
    # ------------------------------------------------------------------ #

    async def populate_credentials(self, prompt: bool) -> bool:
        """Resolve url, username, and password, in that order.

        With ``prompt=False`` only durable state and the vault are read. With
        ``prompt=True`` every field is asked for again, pre-filled where it
        makes sense. The first empty field aborts the flow and the in-memory
        credentials stay as they were; otherwise all three are replaced at
        once.

        Raises:
            VaultError: If the vault cannot be read.
            ConfigError: If the state file cannot be read.
        """
        flow = PopulateFlow()
        while not flow.done:
            if flow.stage is PopulateStage.AWAITING_URL:
                value = await self._retrieve_url(prompt)
            elif flow.stage is PopulateStage.AWAITING_USERNAME:
                value = await self._retrieve_username(prompt)
            else:
                value = await self._retrieve_password(prompt)
            flow.advance(value)

        if flow.stage is PopulateStage.ABORTED:
            debug("Credential population aborted: a field was left empty")
            return False
        self._credentials = flow.credentials()
        return True

    async def _retrieve_url(self, prompt: bool) -> str:
        url = self._require_storage().get(self._settings.url_key)
        if prompt:
            url = await self._prompt.ask(
                "Enter scan server URL",
                default=self._credentials.url or DEFAULT_URL_VALUE,
                validator=validate_url,
            )
        return url

    async def _retrieve_username(self, prompt: bool) -> str:
        username = self._require_storage().get(self._settings.username_key)
        if prompt:
            username = await self._prompt.ask(
                "Enter scan server username",
                default=self._credentials.username,
                validator=validate_field_not_empty,
            )
        return username

    async def _retrieve_password(self, prompt: bool) -> str:
        # Keyed by what is stored now, not by values typed in this flow.
        storage = self._require_storage()
        account_id = create_account_id(
            storage.get(self._settings.url_key), storage.get(self._settings.username_key)
        )
        password = await asyncio.to_thread(self._vault.get, self._settings.service_id, account_id)
        if prompt:
            password = await self._prompt.ask(
                "Enter scan server password",
                secret=True,
                validator=validate_field_not_empty,
            )
        return password

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def _store_url(self) -> None:
        self._require_storage().update(self._settings.url_key, self._credentials.url)

    def _store_username(self) -> None:
        self._require_storage().update(self._settings.username_key, self._credentials.username)

    async def _store_password(self) -> None:
        account_id = create_account_id(self._credentials.url, self._credentials.username)
        await asyncio.to_thread(
            self._vault.set, self._settings.service_id, account_id, self._credentials.password
        )

    def _require_storage(self) -> StateStore:
        if self._storage is None:
            raise RuntimeError("ConnectionManager.activate() must be called first")
        return self._storage
