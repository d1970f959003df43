"""Build the connection manager used by CLI commands.

Kept in its own module so tests can replace :func:`build_manager` with a
manager wired to fakes.
"""

from __future__ import annotations

from scanlink.config import StateStore, load_global_config, resolve_http_config
from scanlink.connect import ConnectionManager
from scanlink.models import ConnectionSettings


async def build_manager() -> ConnectionManager:
    """Return an activated :class:`ConnectionManager` for the current user.

    The global config is read once; environment overrides are applied on
    every client construction.
    """
    global_config = load_global_config()
    manager = ConnectionManager(
        settings=ConnectionSettings(metadata_url=global_config.metadata_url),
        http_settings=lambda: resolve_http_config(global_config),
    )
    return await manager.activate(StateStore())
