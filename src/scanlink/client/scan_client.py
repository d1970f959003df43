"""Client for the security-scanning server.

Only two endpoints matter to scanlink:

- ``GET /api/v1/system/ping`` -- cheap authenticated round-trip used by
  :class:`~scanlink.connect.validator.ConnectionValidator`.
- ``POST /api/v1/summary/component`` -- vulnerability and license summary
  for a list of component ids.
"""

from __future__ import annotations

from scanlink.client.base import BaseClient
from scanlink.models import Artifact, ComponentDetails, SummaryRequest, SummaryResponse

PING_PATH = "/api/v1/system/ping"
SUMMARY_COMPONENT_PATH = "/api/v1/summary/component"


class ScanClient(BaseClient):
    """Authenticated client for the scan server.

    Example::

        async with ScanClient(config) as client:
            artifacts = await client.summary_component(
                [ComponentDetails(component_id="npm://lodash:4.17.20")]
            )
    """

    async def __aenter__(self) -> ScanClient:
        await super().__aenter__()
        return self

    async def ping(self) -> None:
        """Check that the server answers with the configured credentials.

        Raises:
            AuthError, NotFoundError, ServerError, ConnectionError_: As
                mapped by :meth:`~scanlink.client.base.BaseClient.request`.
        """
        await self.request("GET", PING_PATH)

    async def summary_component(self, component_details: list[ComponentDetails]) -> list[Artifact]:
        """Return the artifact summary for each requested component."""
        body = SummaryRequest(component_details=component_details).model_dump(mode="json")
        data = await self.post_json(SUMMARY_COMPONENT_PATH, body)
        return SummaryResponse.model_validate(data).artifacts
