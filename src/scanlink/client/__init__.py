"""HTTP clients for scanlink.

Classes:
    :class:`ScanClient` -- authenticated client for the scan server.
    :class:`MetadataClient` -- unauthenticated client for module metadata.

Both wrap :class:`httpx.AsyncClient`, are configured from a
:class:`~scanlink.models.ClientConfig`, and must be used as async context
managers.

Example::

    from scanlink.client import ScanClient

    async with ScanClient(config) as client:
        await client.ping()
"""

from scanlink.client.base import BaseClient
from scanlink.client.metadata_client import MetadataClient
from scanlink.client.scan_client import ScanClient

__all__ = ["BaseClient", "MetadataClient", "ScanClient"]
