from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

from sonatype_mcp.gateway.client import NexusClient

SEARCH_PATH = "/service/rest/v1/search"
COMPONENTS_PATH = "/service/rest/v1/components"

# (form field, (filename, content)) pairs as accepted by httpx `files=`
UploadFiles = Sequence[Tuple[str, Tuple[str, bytes]]]


class ComponentService:
    """Component search, lookup, upload and deletion on top of `NexusClient`."""

    def __init__(self, nexus: NexusClient) -> None:
        self.nexus = nexus
        self._logger = logging.getLogger(__name__)

    async def search_components(self, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Search components; booleans are sent as lowercase strings.

        Returns the raw search page: ``{"items": [...], "continuationToken": ...}``.
        """
        params: Dict[str, str] = {
            k: (str(v).lower() if isinstance(v, bool) else str(v))
            for k, v in (query or {}).items()
            if v is not None and v != ""
        }
        self._logger.debug("ComponentService.search_components: GET %s params=%s", SEARCH_PATH, params)
        page = await self.nexus.get(SEARCH_PATH, params=params or None)
        if not isinstance(page, dict):
            return {"items": [], "continuationToken": None}
        page.setdefault("items", [])
        return page

    async def get_component(self, component_id: str) -> Dict[str, Any]:
        return await self.nexus.get(f"{COMPONENTS_PATH}/{quote(component_id, safe='')}")

    async def delete_component(self, component_id: str) -> None:
        await self.nexus.delete(f"{COMPONENTS_PATH}/{quote(component_id, safe='')}")

    async def get_component_versions(
        self, repository: str, repository_format: str, group: str, name: str
    ) -> List[str]:
        page = await self.search_components(
            {
                "repository": repository,
                "format": repository_format,
                "group": group,
                "name": name,
                "sort": "version",
                "direction": "desc",
            }
        )
        return [item.get("version") for item in page["items"] if item.get("version") is not None]

    async def upload_component(self, repository: str, fields: Mapping[str, str], files: UploadFiles) -> Any:
        """Multipart upload to ``/components?repository=<repository>``."""
        self._logger.debug(
            "ComponentService.upload_component: repository=%s fields=%s files=%s",
            repository,
            sorted(fields),
            [name for name, _ in files],
        )
        return await self.nexus.post(
            COMPONENTS_PATH,
            params={"repository": repository},
            data=dict(fields),
            files=list(files),
        )
