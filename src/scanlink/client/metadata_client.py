"""Client for the public module-metadata service.

The service needs no scan-server credentials. It still goes through the
configured proxy and sends the scanlink ``User-Agent``.
"""

from __future__ import annotations

from scanlink.client.base import BaseClient
from scanlink.models import ComponentDetails, ComponentMetadata, ModuleResponse, SummaryRequest

MODULES_METADATA_PATH = "/api/ui/v1/modules/metadata"


class MetadataClient(BaseClient):
    """Unauthenticated client for module metadata lookups."""

    async def __aenter__(self) -> MetadataClient:
        await super().__aenter__()
        return self

    async def get_metadata_for_modules(
        self, component_details: list[ComponentDetails]
    ) -> list[ComponentMetadata]:
        """Return metadata for each requested module.

        Args:
            component_details: Module ids, same shape as the scan summary request.

        Returns:
            One :class:`~scanlink.models.ComponentMetadata` per module the
            service knows about.
        """
        body = SummaryRequest(component_details=component_details).model_dump(mode="json")
        data = await self.post_json(MODULES_METADATA_PATH, body)
        return ModuleResponse.model_validate(data).components_metadata
