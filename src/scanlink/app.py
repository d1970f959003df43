"""``scanlink`` command line.

Commands::

    scanlink connect                  ask for url, username, password; verify; save
    scanlink disconnect               forget saved credentials
    scanlink status                   show what is saved
    scanlink components ID...         scan summary for component ids
    scanlink metadata ID...           module metadata
    scanlink config show|set          global settings

:func:`main` is the console-script entry point. Errors derived from
:class:`~scanlink.exceptions.ScanlinkError` end the process with their own
exit code; any other exception leaves a traceback in ``<data_dir>/logs``.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from scanlink import __version__
from scanlink.commands.config import config_app
from scanlink.commands.connection import connect_command, disconnect_command, status_command
from scanlink.commands.query import components_command, metadata_command
from scanlink.exit_codes import EXIT_GENERIC_FAILURE

_EXIT_CANCELLED = 130

app = typer.Typer(
    name="scanlink",
    help="Connect to a security-scanning server and query components.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("connect")(connect_command)
app.command("disconnect")(disconnect_command)
app.command("status")(status_command)
app.command("components")(components_command)
app.command("metadata")(metadata_command)
app.add_typer(config_app, name="config", help="Show or change global settings.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"scanlink {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print data as plain text / JSON Lines."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug messages and HTTP calls."),
) -> None:
    """Install the output settings for this run."""
    from scanlink.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        _enable_debug_logging()


def _enable_debug_logging() -> None:
    """Route ``scanlink.*`` log records to stderr through Rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    logger = logging.getLogger("scanlink")
    logger.handlers = [RichHandler(console=Console(stderr=True), show_path=False)]
    logger.setLevel(logging.DEBUG)


def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
    # A prompt turns this into a dismissed answer; elsewhere main() reports
    # "Cancelled.". Installing any handler also stops asyncio.run from
    # replacing it with one that only cancels the main task.
    raise KeyboardInterrupt


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> str:
    """Save the traceback being handled and return the file path."""
    from scanlink.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Run the CLI; always ends in :class:`SystemExit`."""
    from scanlink.exceptions import ScanlinkError
    from scanlink.output import error

    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(_EXIT_CANCELLED)
    except ScanlinkError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
