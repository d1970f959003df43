"""Tests for the terminal credential prompt."""

from __future__ import annotations

import asyncio
import io
import threading
from unittest.mock import patch

import pytest
import typer

from scanlink.auth.prompt import TerminalPrompt
from scanlink.connect.validator import validate_url


class _InterruptedStdin(io.StringIO):
    """Stdin whose read is interrupted by Ctrl-C."""

    def readline(self, size: int = -1) -> str:
        raise KeyboardInterrupt


@pytest.fixture()
def prompt() -> TerminalPrompt:
    return TerminalPrompt()


@pytest.fixture()
def tty():
    with patch("scanlink.auth.prompt.sys.stdin") as mock_stdin:
        mock_stdin.isatty.return_value = True
        yield mock_stdin


@pytest.fixture()
def terminal() -> TerminalPrompt:
    """A prompt that always reads, with stdin set by the test."""
    return TerminalPrompt(interactive=lambda: True)


class TestTerminalPrompt:
    def test_returns_answer(self, prompt: TerminalPrompt, tty) -> None:
        with patch("scanlink.auth.prompt.typer.prompt", return_value="  bob  ") as mock_prompt:
            assert asyncio.run(prompt.ask("Username")) == "bob"
        mock_prompt.assert_called_once_with(
            "Username", default=None, hide_input=False, show_default=True
        )

    def test_passes_default(self, prompt: TerminalPrompt, tty) -> None:
        with patch("scanlink.auth.prompt.typer.prompt", return_value="https://") as mock_prompt:
            asyncio.run(prompt.ask("URL", default="https://"))
        assert mock_prompt.call_args.kwargs["default"] == "https://"

    def test_secret_input_hidden_and_not_stripped(self, prompt: TerminalPrompt, tty) -> None:
        with patch("scanlink.auth.prompt.typer.prompt", return_value=" pw ") as mock_prompt:
            assert asyncio.run(prompt.ask("Password", secret=True)) == " pw "
        assert mock_prompt.call_args.kwargs["hide_input"] is True
        assert mock_prompt.call_args.kwargs["show_default"] is False

    @pytest.mark.parametrize("exc", [typer.Abort(), EOFError(), KeyboardInterrupt()])
    def test_dismissed_returns_empty(self, prompt: TerminalPrompt, tty, exc: BaseException) -> None:
        with patch("scanlink.auth.prompt.typer.prompt", side_effect=exc):
            assert asyncio.run(prompt.ask("URL")) == ""

    def test_invalid_answer_is_asked_again(self, prompt: TerminalPrompt, tty) -> None:
        answers = ["not a url", "https://x.example"]
        with patch("scanlink.auth.prompt.typer.prompt", side_effect=answers) as mock_prompt:
            result = asyncio.run(prompt.ask("URL", validator=validate_url))
        assert result == "https://x.example"
        assert mock_prompt.call_count == 2

    def test_non_tty_is_dismissed(self, prompt: TerminalPrompt) -> None:
        with patch("scanlink.auth.prompt.sys.stdin") as mock_stdin:
            mock_stdin.isatty.return_value = False
            with patch("scanlink.auth.prompt.typer.prompt") as mock_prompt:
                assert asyncio.run(prompt.ask("URL")) == ""
        mock_prompt.assert_not_called()

    def test_reads_on_the_calling_thread(self, prompt: TerminalPrompt, tty) -> None:
        threads = []

        def _answer(*args, **kwargs) -> str:
            threads.append(threading.get_ident())
            return "bob"

        with patch("scanlink.auth.prompt.typer.prompt", side_effect=_answer):
            asyncio.run(prompt.ask("Username"))
        assert threads == [threading.get_ident()]


class TestTerminalPromptStdin:
    """The real typer prompt reading from a replaced stdin."""

    def test_end_of_input_returns_empty(
        self, terminal: TerminalPrompt, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert asyncio.run(terminal.ask("Enter scan server URL", default="https://")) == ""

    def test_ctrl_c_returns_empty(
        self, terminal: TerminalPrompt, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", _InterruptedStdin())
        assert asyncio.run(terminal.ask("Enter scan server URL", default="https://")) == ""

    def test_reads_line(self, terminal: TerminalPrompt, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("  bob  \n"))
        assert asyncio.run(terminal.ask("Enter username")) == "bob"

    def test_invalid_then_valid(
        self, terminal: TerminalPrompt, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("not a url\nhttps://x.example\n"))
        result = asyncio.run(terminal.ask("Enter scan server URL", validator=validate_url))
        assert result == "https://x.example"

    def test_invalid_then_end_of_input(
        self, terminal: TerminalPrompt, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("https://\n"))
        result = asyncio.run(
            terminal.ask("Enter scan server URL", default="https://", validator=validate_url)
        )
        assert result == ""
