from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from sonatype_mcp.gateway.client import NexusClient

REPOSITORIES_PATH = "/service/rest/v1/repositories"

# Nexus names the maven2 format "maven" in its format-specific endpoints.
_FORMAT_PATH_SEGMENTS = {"maven2": "maven"}


def format_path_segment(repository_format: str) -> str:
    return _FORMAT_PATH_SEGMENTS.get(repository_format, repository_format)


class RepositoryService:
    """Repository management on top of `NexusClient`."""

    def __init__(self, nexus: NexusClient) -> None:
        self.nexus = nexus
        self._logger = logging.getLogger(__name__)

    async def list_repositories(
        self, *, repository_format: Optional[str] = None, repository_type: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {}
        if repository_format:
            params["format"] = repository_format
        if repository_type:
            params["type"] = repository_type
        repositories = await self.nexus.get(REPOSITORIES_PATH, params=params or None)
        repositories = repositories or []
        # Not every Nexus release honours these query filters server-side.
        if repository_format:
            repositories = [r for r in repositories if r.get("format") == repository_format]
        if repository_type:
            repositories = [r for r in repositories if r.get("type") == repository_type]
        self._logger.debug("RepositoryService.list_repositories: got %d repositories", len(repositories))
        return repositories

    async def get_repository(self, name: str) -> Dict[str, Any]:
        return await self.nexus.get(f"{REPOSITORIES_PATH}/{quote(name, safe='')}")

    async def create_repository(self, repository_format: str, repository_type: str, config: Dict[str, Any]) -> Any:
        path = f"{REPOSITORIES_PATH}/{format_path_segment(repository_format)}/{repository_type}"
        self._logger.debug("RepositoryService.create_repository: POST %s name=%s", path, config.get("name"))
        return await self.nexus.post(path, config)

    async def update_repository(
        self, name: str, repository_format: str, repository_type: str, config: Dict[str, Any]
    ) -> Any:
        path = f"{REPOSITORIES_PATH}/{format_path_segment(repository_format)}/{repository_type}/{quote(name, safe='')}"
        self._logger.debug("RepositoryService.update_repository: PUT %s keys=%s", path, sorted(config))
        return await self.nexus.put(path, config)

    async def delete_repository(self, name: str) -> None:
        await self.nexus.delete(f"{REPOSITORIES_PATH}/{quote(name, safe='')}")
