"""Interactive credential prompts.

:class:`CredentialPrompt` is the capability the connection manager uses to
ask the user for a value: ``(message, default, secret, validator) -> str``.
A dismissed prompt yields an empty string, which the manager treats the
same as "field not provided".

:class:`TerminalPrompt` is the built-in implementation on top of
:func:`typer.prompt`. The validator runs inline: an invalid answer prints
the validator's message and asks again, so only valid values (or an empty
string on Ctrl-C / Ctrl-D) ever come back.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional

import typer

from scanlink.output import debug, error

Validator = Callable[[str], Optional[str]]
"""Returns an error message for an invalid value, or ``None`` when valid."""


class CredentialPrompt(ABC):
    """Asynchronous "ask the user for a string" capability."""

    @abstractmethod
    async def ask(
        self,
        message: str,
        default: str = "",
        secret: bool = False,
        validator: Optional[Validator] = None,
    ) -> str:
        """Ask for a value.

        Args:
            message: Text shown to the user.
            default: Pre-filled value accepted by pressing Enter.
            secret: Mask the input (passwords).
            validator: Inline validator; invalid answers are re-asked.

        Returns:
            The accepted value, or ``""`` if the user dismissed the prompt.
        """
        ...


def _stdin_is_tty() -> bool:
    return sys.stdin.isatty()


class TerminalPrompt(CredentialPrompt):
    """Prompt on the controlling terminal via :func:`typer.prompt`.

    The read happens on the calling thread, so Ctrl-C arrives as
    :class:`KeyboardInterrupt` inside the prompt and dismisses it.
    When stdin is not a TTY the prompt is treated as dismissed.

    Args:
        interactive: Returns whether prompting is possible; defaults to
            checking that stdin is a TTY.
    """

    def __init__(self, interactive: Optional[Callable[[], bool]] = None) -> None:
        self._interactive = interactive or _stdin_is_tty

    async def ask(
        self,
        message: str,
        default: str = "",
        secret: bool = False,
        validator: Optional[Validator] = None,
    ) -> str:
        if not self._interactive():
            debug(f"stdin is not a TTY, skipping prompt: {message}")
            return ""
        while True:
            try:
                value = typer.prompt(
                    message,
                    default=default or None,
                    hide_input=secret,
                    show_default=not secret,
                )
            except (typer.Abort, EOFError, KeyboardInterrupt):
                return ""
            value = str(value)
            if not secret:
                value = value.strip()
            problem = validator(value) if validator else None
            if problem is None:
                return value
            error(problem)
