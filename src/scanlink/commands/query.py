"""Query commands -- look up components on the scan server and module metadata.

Component ids use the scan server's ``<type>://<name>:<version>`` form,
for example ``npm://lodash:4.17.20`` or ``go://github.com/pkg/errors:0.9.1``.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from scanlink.commands import session
from scanlink.exit_codes import EXIT_AUTH_FAILURE
from scanlink.models import ComponentDetails
from scanlink.output import error, format_response, info, suggest


def components_command(
    component_ids: list[str] = typer.Argument(help="Component ids to look up."),
) -> None:
    """Print the vulnerability and license summary for components.

    Raises:
        typer.Exit: With code 3 if no complete credentials are stored.

    Example::

        scanlink components npm://lodash:4.17.20
    """
    details = [ComponentDetails(component_id=cid) for cid in component_ids]

    async def _fetch() -> Optional[list]:
        manager = await session.build_manager()
        if not manager.are_credentials_set():
            return None
        return await manager.get_components(details)

    artifacts = asyncio.run(_fetch())
    if artifacts is None:
        error("No complete scan server credentials stored.")
        suggest("Run: scanlink connect")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)
    if not artifacts:
        info("No artifacts returned.")
        return
    format_response([artifact.model_dump(mode="json") for artifact in artifacts])


def metadata_command(
    module_ids: list[str] = typer.Argument(help="Module ids to look up."),
) -> None:
    """Print module metadata from the metadata service.

    Example::

        scanlink metadata go://github.com/pkg/errors:0.9.1
    """
    details = [ComponentDetails(component_id=mid) for mid in module_ids]

    async def _fetch() -> list:
        manager = await session.build_manager()
        return await manager.get_module_metadata(details)

    modules = asyncio.run(_fetch())
    if not modules:
        info("No module metadata returned.")
        return
    format_response([module.model_dump(mode="json") for module in modules])
