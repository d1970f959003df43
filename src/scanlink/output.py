"""Terminal output for scanlink commands.

Data goes to stdout and everything else goes to stderr, so that
``scanlink --json components ... | jq`` sees only the scan results:

* **stdout** -- artifacts, module metadata, status tables, config.
* **stderr** -- progress, success and error messages, suggestions, debug.

The data format is chosen once per run:

* ``json`` -- indented JSON, one document per command.
* ``plain`` -- JSON Lines for lists (artifacts are nested, so tab-separated
  columns would lose information), ``key<TAB>value`` for mappings.
* ``rich`` -- syntax-highlighted JSON and Rich tables. ``auto`` picks this
  when stdout is a terminal and colour is allowed, otherwise ``plain``.

``NO_COLOR`` and ``TERM=dumb`` disable colour as if ``--no-color`` had been
passed.

Commands and library code call the module-level helpers (:func:`info`,
:func:`error`, ...), which go through the process-wide
:class:`OutputManager` installed by :func:`~scanlink.app.main_callback`.
"""

from __future__ import annotations

import contextlib
import json
import os
import sys
from enum import Enum
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Holds the output preferences for one run.

    Args:
        format: Data format; ``AUTO`` is resolved here, once.
        no_color: Plain ``print`` on stderr instead of Rich markup.
        quiet: Drop info, success, suggestion and progress messages.
            Errors are always shown.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            interactive = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if interactive and not self._no_color else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Write a JSON-compatible payload (dict or list of dicts) to stdout."""
        if self._format == OutputFormat.JSON:
            self._emit(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            if isinstance(data, list):
                for item in data:
                    self._emit(json.dumps(item, ensure_ascii=False, default=str))
            elif isinstance(data, dict):
                for key, value in data.items():
                    if isinstance(value, (dict, list)):
                        value = json.dumps(value, ensure_ascii=False, default=str)
                    self._emit(f"{key}\t{value}")
            else:
                self._emit(str(data))
        else:
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout.

        JSON mode emits a list of objects keyed by *headers*; plain mode
        emits tab-separated lines with a header line; rich mode draws a
        table with *title*.
        """
        if self._format == OutputFormat.JSON:
            self._emit(json.dumps([dict(zip(headers, row)) for row in rows], indent=2))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self._emit("\t".join(row))
            return
        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Print a next step, e.g. ``Run: scanlink connect``."""
        if not self._quiet:
            self._diagnostic(f"→ {message}", f"[dim]→ {message}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    @contextlib.contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show *message* on stderr while the block runs.

        A Rich spinner on an interactive, coloured stderr; a single plain
        line otherwise; nothing at all in quiet mode.

        Example::

            with get_output().status("Checking connection with the scan server..."):
                ok = await validator.check_connection(client)
        """
        if self._quiet:
            yield
        elif self._no_color or not self._stderr.is_terminal:
            print(message, file=sys.stderr, flush=True)
            yield
        else:
            with self._stderr.status(f"[dim]{message}[/dim]"):
                yield

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _emit(self, line: str) -> None:
        print(line, file=sys.stdout, flush=True)

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


def _color_disabled_by_env() -> bool:
    """``NO_COLOR`` (any value) or ``TERM=dumb``, per clig.dev."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
