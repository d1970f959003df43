"""Connection management for the scan server and the metadata service.

The main entry point is :class:`ConnectionManager`; the other classes are
its collaborators and are exported for callers that want to substitute
them.

Typical usage::

    from scanlink.config import StateStore
    from scanlink.connect import ConnectionManager

    manager = await ConnectionManager().activate(StateStore())
    if await manager.connect():
        artifacts = await manager.get_components(details)
"""

from scanlink.connect.manager import ConnectionManager, PopulateFlow, PopulateStage
from scanlink.connect.proxy import ProxyResolver, parse_proxy_url
from scanlink.connect.validator import (
    ConnectionValidator,
    validate_field_not_empty,
    validate_url,
)

__all__ = [
    "ConnectionManager",
    "ConnectionValidator",
    "PopulateFlow",
    "PopulateStage",
    "ProxyResolver",
    "parse_proxy_url",
    "validate_field_not_empty",
    "validate_url",
]
