"""Connection commands -- connect to, inspect, and forget the scan server.

Typical workflow::

    scanlink connect      # prompt for url, username, password and verify
    scanlink status       # show what is configured
    scanlink disconnect   # forget everything
"""

from __future__ import annotations

import asyncio

import typer

from scanlink.commands import session
from scanlink.connect import ConnectionManager
from scanlink.exit_codes import EXIT_AUTH_FAILURE
from scanlink.output import error, info, print_table, success, suggest


def connect_command() -> None:
    """Prompt for scan server credentials, verify them, and save them.

    Nothing is saved when a field is left empty or the server cannot be
    reached with the given credentials.

    Raises:
        typer.Exit: With code 3 if the connection could not be established.

    Example::

        scanlink connect
    """

    async def _connect() -> tuple[ConnectionManager, bool]:
        manager = await session.build_manager()
        return manager, await manager.connect()

    manager, connected = asyncio.run(_connect())
    if not connected:
        error("Could not connect to the scan server. Credentials were not saved.")
        suggest("Check the URL, username, and password, then run: scanlink connect")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)
    credentials = manager.credentials
    success(f"Connected to {credentials.url} as {credentials.username}.")


def disconnect_command() -> None:
    """Forget the saved scan server URL, username, and password.

    Example::

        scanlink disconnect
    """

    async def _disconnect() -> None:
        manager = await session.build_manager()
        await manager.disconnect()

    asyncio.run(_disconnect())
    success("Scan server credentials removed.")


def status_command() -> None:
    """Show the configured scan server and whether credentials are complete.

    Example::

        scanlink status
        scanlink --json status
    """
    manager = asyncio.run(session.build_manager())
    credentials = manager.credentials
    print_table(
        ["Field", "Value"],
        [
            ["url", credentials.url or "-"],
            ["username", credentials.username or "-"],
            ["password", "set" if credentials.password else "-"],
            ["complete", "yes" if manager.are_credentials_set() else "no"],
        ],
        title="Scan server",
    )
    if not manager.are_credentials_set():
        info("No complete credentials stored.")
        suggest("Run: scanlink connect")
