"""Tests for the OS vault adapter and account id derivation."""

from __future__ import annotations

import hashlib
from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from scanlink.auth.secret_store import SecretStore, create_account_id
from scanlink.exceptions import VaultError
from scanlink.exit_codes import EXIT_VAULT_ERROR


class TestCreateAccountId:
    def test_sha256_of_concatenation(self) -> None:
        expected = hashlib.sha256(b"https://x.examplebob").hexdigest()
        assert create_account_id("https://x.example", "bob") == expected

    def test_deterministic(self) -> None:
        assert create_account_id("https://x", "bob") == create_account_id("https://x", "bob")

    def test_differs_per_pair(self) -> None:
        ids = {
            create_account_id("https://x", "bob"),
            create_account_id("https://y", "bob"),
            create_account_id("https://x", "alice"),
        }
        assert len(ids) == 3

    def test_reveals_neither_value(self) -> None:
        account_id = create_account_id("https://x.example", "bob")
        assert "bob" not in account_id
        assert "x.example" not in account_id
        assert len(account_id) == 64


@pytest.fixture()
def store() -> SecretStore:
    return SecretStore()


class TestSecretStore:
    def test_get_returns_stored_value(self, store: SecretStore) -> None:
        with patch("scanlink.auth.secret_store.keyring.get_password", return_value="pw") as mock_get:
            assert store.get("svc", "acct") == "pw"
        mock_get.assert_called_once_with("svc", "acct")

    def test_get_missing_returns_empty(self, store: SecretStore) -> None:
        with patch("scanlink.auth.secret_store.keyring.get_password", return_value=None):
            assert store.get("svc", "acct") == ""

    def test_set_passes_through(self, store: SecretStore) -> None:
        with patch("scanlink.auth.secret_store.keyring.set_password") as mock_set:
            store.set("svc", "acct", "pw")
        mock_set.assert_called_once_with("svc", "acct", "pw")

    def test_delete_missing_is_ignored(self, store: SecretStore) -> None:
        with patch(
            "scanlink.auth.secret_store.keyring.delete_password",
            side_effect=PasswordDeleteError("not found"),
        ):
            store.delete("svc", "acct")

    @pytest.mark.parametrize(
        "method, target, args",
        [
            ("get", "get_password", ("svc", "acct")),
            ("set", "set_password", ("svc", "acct", "pw")),
            ("delete", "delete_password", ("svc", "acct")),
        ],
    )
    def test_backend_failure_raises_vault_error(
        self, store: SecretStore, method: str, target: str, args: tuple[str, ...]
    ) -> None:
        with patch(
            f"scanlink.auth.secret_store.keyring.{target}",
            side_effect=KeyringError("no backend"),
        ):
            with pytest.raises(VaultError, match="no backend") as exc_info:
                getattr(store, method)(*args)
        assert exc_info.value.exit_code == EXIT_VAULT_ERROR
