"""Shared test fixtures for scanlink.

Provides isolated config directories, an in-memory vault, a scripted
prompt, and a stub connection validator so that tests never touch the
real keyring, the user's config, or the network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from scanlink.auth.prompt import CredentialPrompt, Validator
from scanlink.auth.secret_store import SecretStore
from scanlink.client.scan_client import ScanClient
from scanlink.config import StateStore
from scanlink.connect.manager import ConnectionManager
from scanlink.connect.validator import ConnectionValidator
from scanlink.models import ConnectionSettings, HttpConfig
from scanlink.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class MemoryVault(SecretStore):
    """Dict-backed vault that records every call into a shared journal."""

    def __init__(self, journal: list[tuple[str, ...]]) -> None:
        self.secrets: dict[tuple[str, str], str] = {}
        self.journal = journal

    def get(self, service_id: str, account_id: str) -> str:
        self.journal.append(("vault.get", account_id))
        return self.secrets.get((service_id, account_id), "")

    def set(self, service_id: str, account_id: str, value: str) -> None:
        self.journal.append(("vault.set", account_id))
        self.secrets[(service_id, account_id)] = value

    def delete(self, service_id: str, account_id: str) -> None:
        self.journal.append(("vault.delete", account_id))
        self.secrets.pop((service_id, account_id), None)


class JournalStateStore(StateStore):
    """File-backed state store that also records writes into the journal."""

    def __init__(self, path: Path, journal: list[tuple[str, ...]]) -> None:
        super().__init__(path)
        self.journal = journal

    def update(self, key: str, value: Optional[str]) -> None:
        self.journal.append(("state.update", key))
        super().update(key, value)


class ScriptedPrompt(CredentialPrompt):
    """Answers prompts from a queue and records what was asked."""

    def __init__(self, answers: Optional[list[str]] = None) -> None:
        self.answers = list(answers or [])
        self.calls: list[dict[str, object]] = []

    async def ask(
        self,
        message: str,
        default: str = "",
        secret: bool = False,
        validator: Optional[Validator] = None,
    ) -> str:
        self.calls.append(
            {"message": message, "default": default, "secret": secret, "validator": validator}
        )
        if not self.answers:
            return ""
        return self.answers.pop(0)


class StubValidator(ConnectionValidator):
    """Connection validator with a fixed answer."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.clients: list[ScanClient] = []

    async def check_connection(self, client: ScanClient) -> bool:
        self.clients.append(client)
        return self.result


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_output() -> None:
    """Install a quiet, colourless OutputManager and reset it afterwards."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    forces the XDG layout, and clears all SCANLINK_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("scanlink.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "SCANLINK_HTTP_PROXY_SUPPORT",
        "SCANLINK_HTTP_PROXY",
        "SCANLINK_HTTP_PROXY_AUTHORIZATION",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Connection manager fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> ConnectionSettings:
    return ConnectionSettings(
        service_id="test.scanlink",
        url_key="test.url",
        username_key="test.username",
        user_agent="scanlink-tests/1.0",
        metadata_url="https://metadata.example",
    )


@pytest.fixture
def journal() -> list[tuple[str, ...]]:
    return []


@pytest.fixture
def vault(journal: list[tuple[str, ...]]) -> MemoryVault:
    return MemoryVault(journal)


@pytest.fixture
def state(tmp_path: Path, journal: list[tuple[str, ...]]) -> JournalStateStore:
    return JournalStateStore(tmp_path / "state.json", journal)


@pytest.fixture
def http_config() -> HttpConfig:
    """Mutable ambient HTTP settings; tests tweak fields in place."""
    return HttpConfig()


@pytest.fixture
def make_manager(
    settings: ConnectionSettings,
    vault: MemoryVault,
    http_config: HttpConfig,
):
    """Factory building a ConnectionManager wired to the fakes."""

    def _make(
        prompt: Optional[ScriptedPrompt] = None,
        validator: Optional[ConnectionValidator] = None,
        transport=None,
    ) -> ConnectionManager:
        return ConnectionManager(
            settings=settings,
            secret_store=vault,
            prompt=prompt or ScriptedPrompt(),
            http_settings=lambda: http_config,
            validator=validator or StubValidator(),
            transport=transport,
        )

    return _make


@pytest.fixture
def prompt_with():
    """Factory: ``prompt_with(["https://x", "bob", "pw"])`` -> ScriptedPrompt."""
    return ScriptedPrompt


@pytest.fixture
def validator_returning():
    """Factory: ``validator_returning(False)`` -> StubValidator."""
    return StubValidator
