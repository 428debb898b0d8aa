"""Repository management tools: list, get, create, update and delete."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TypeVar

from sonatype_mcp.errors import FailureKind, ValidationError
from sonatype_mcp.schemas.tools import (
    CreateRepositoryInput,
    ListRepositoriesInput,
    RepositoryNameInput,
    RepositorySections,
    StorageSection,
    UpdateRepositoryInput,
)
from sonatype_mcp.services.repositories import RepositoryService

from .registry import ToolDefinition

T = TypeVar("T")

DEFAULT_BLOB_STORE = "default"
DEFAULT_MAX_AGE_MINUTES = 1440
DEFAULT_NUGET_CACHE_SECONDS = 3600

# Format-specific section carried by each repository format.
FORMAT_SECTIONS = {
    "maven2": "maven",
    "docker": "docker",
    "npm": "npm",
    "pypi": "pypi",
    "nuget": "nuget",
}

WRITE_MODE_GUIDANCE = {
    (FailureKind.AUTHENTICATION, 403): "The user may lack the privileges required to administer repositories.",
}


def _or(value: Optional[T], default: T) -> T:
    return default if value is None else value


def _storage_payload(storage: StorageSection) -> Dict[str, Any]:
    payload = storage.to_payload()
    if storage.write_policy:
        payload["writePolicy"] = storage.write_policy.upper()
    return payload


def build_create_payload(params: CreateRepositoryInput) -> Dict[str, Any]:
    """Nexus request body for a new repository, with server-required sections defaulted."""
    config: Dict[str, Any] = {"name": params.name, "online": _or(params.online, True)}

    if params.storage is not None or params.type == "hosted":
        storage = params.storage or StorageSection()
        config["storage"] = {
            "blobStoreName": storage.blob_store_name or DEFAULT_BLOB_STORE,
            "strictContentTypeValidation": _or(storage.strict_content_type_validation, True),
        }
        if params.type == "hosted" and storage.write_policy:
            config["storage"]["writePolicy"] = storage.write_policy.upper()

    if params.cleanup is not None and params.cleanup.policy_names is not None:
        config["cleanup"] = {"policyNames": list(params.cleanup.policy_names)}

    if params.type == "proxy":
        if params.proxy is None or not params.proxy.remote_url:
            raise ValidationError("Remote URL is required for proxy repositories")
        config["proxy"] = {
            "remoteUrl": params.proxy.remote_url,
            "contentMaxAge": _or(params.proxy.content_max_age, DEFAULT_MAX_AGE_MINUTES),
            "metadataMaxAge": _or(params.proxy.metadata_max_age, DEFAULT_MAX_AGE_MINUTES),
        }
        negative_cache = params.negative_cache
        config["negativeCache"] = {
            "enabled": _or(negative_cache.enabled if negative_cache else None, True),
            "timeToLive": _or(negative_cache.time_to_live if negative_cache else None, DEFAULT_MAX_AGE_MINUTES),
        }
        http_client = params.http_client
        config["httpClient"] = {
            "blocked": _or(http_client.blocked if http_client else None, False),
            "autoBlock": _or(http_client.auto_block if http_client else None, True),
        }
        if http_client is not None and http_client.connection is not None:
            config["httpClient"]["connection"] = http_client.connection.to_payload()
        if http_client is not None and http_client.authentication is not None:
            config["httpClient"]["authentication"] = http_client.authentication.to_payload()
    elif params.type == "group":
        if params.group is None or not params.group.member_names:
            raise ValidationError("Member names are required for group repositories")
        config["group"] = {"memberNames": list(params.group.member_names)}
        if params.group.writable_member:
            config["group"]["writableMember"] = params.group.writable_member

    if params.format == "maven2" and (params.maven is not None or params.type != "group"):
        maven = params.maven
        config["maven"] = {
            "versionPolicy": _or(maven.version_policy if maven else None, "MIXED"),
            "layoutPolicy": _or(maven.layout_policy if maven else None, "STRICT"),
            "contentDisposition": _or(maven.content_disposition if maven else None, "ATTACHMENT"),
        }
    elif params.format == "docker":
        docker = params.docker
        config["docker"] = {
            "v1Enabled": _or(docker.v1_enabled if docker else None, False),
            "forceBasicAuth": _or(docker.force_basic_auth if docker else None, True),
        }
        if docker is not None:
            supplied = docker.to_payload()
            for key in ("httpPort", "httpsPort", "subdomain"):
                if supplied.get(key):
                    config["docker"][key] = supplied[key]
    elif params.format in ("npm", "pypi"):
        section = getattr(params, params.format)
        if section is not None:
            config[params.format] = section.to_payload()
    elif params.format == "nuget" and params.nuget is not None:
        config["nuget"] = {
            "nugetVersion": _or(params.nuget.nuget_version, "V3"),
            "queryCacheItemMaxAge": _or(params.nuget.query_cache_item_max_age, DEFAULT_NUGET_CACHE_SECONDS),
        }

    return config


def build_update_payload(params: RepositorySections, name: str, repository_type: str, repository_format: str) -> Dict[str, Any]:
    """Nexus request body carrying only the supplied sections relevant to the repository's type and format."""
    config: Dict[str, Any] = {"name": name}
    if params.online is not None:
        config["online"] = params.online
    if params.storage is not None:
        config["storage"] = _storage_payload(params.storage)
    if params.cleanup is not None:
        config["cleanup"] = params.cleanup.to_payload()

    if repository_type == "proxy":
        for field, key in (("proxy", "proxy"), ("negative_cache", "negativeCache"), ("http_client", "httpClient")):
            section = getattr(params, field)
            if section is not None:
                config[key] = section.to_payload()
    elif repository_type == "group" and params.group is not None:
        config["group"] = params.group.to_payload()

    section_name = FORMAT_SECTIONS.get(repository_format)
    if section_name is not None:
        section = getattr(params, section_name)
        if section is not None:
            config[section_name] = section.to_payload()
    return config


class RepositoryTools:
    """MCP handlers for repository management."""

    def __init__(self, service: RepositoryService) -> None:
        self.service = service

    async def list_repositories(self, params: ListRepositoriesInput) -> Dict[str, Any]:
        repositories = await self.service.list_repositories(
            repository_format=params.format, repository_type=params.type
        )
        return {"repositories": repositories, "count": len(repositories)}

    async def get_repository(self, params: RepositoryNameInput) -> Any:
        return await self.service.get_repository(params.name)

    async def create_repository(self, params: CreateRepositoryInput) -> Dict[str, Any]:
        config = build_create_payload(params)
        await self.service.create_repository(params.format, params.type, config)
        return {
            "message": f"Repository '{params.name}' created successfully",
            "repository": {"name": params.name, "format": params.format, "type": params.type},
        }

    async def update_repository(self, params: UpdateRepositoryInput) -> Dict[str, Any]:
        current = await self.service.get_repository(params.name)
        repository_format = current.get("format")
        repository_type = current.get("type")
        if not repository_format or not repository_type:
            raise ValidationError(f"Repository '{params.name}' did not report its format and type", details=current)
        config = build_update_payload(params, params.name, repository_type, repository_format)
        await self.service.update_repository(params.name, repository_format, repository_type, config)
        return {
            "message": f"Repository '{params.name}' updated successfully",
            "repository": {"name": params.name, "format": repository_format, "type": repository_type},
        }

    async def delete_repository(self, params: RepositoryNameInput) -> str:
        await self.service.delete_repository(params.name)
        return f"Repository '{params.name}' has been deleted successfully."

    def definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                name="nexus_list_repositories",
                description="List all repositories in the Nexus Repository Manager",
                input_schema=ListRepositoriesInput,
                handler=self.list_repositories,
                error_prefix="Error listing repositories",
            ),
            ToolDefinition(
                name="nexus_get_repository",
                description="Get detailed information about a specific repository",
                input_schema=RepositoryNameInput,
                handler=self.get_repository,
                error_prefix="Error getting repository",
            ),
            ToolDefinition(
                name="nexus_create_repository",
                description="Create a new repository in Nexus Repository Manager (requires write mode)",
                input_schema=CreateRepositoryInput,
                handler=self.create_repository,
                error_prefix="Error creating repository",
                guidance=WRITE_MODE_GUIDANCE,
            ),
            ToolDefinition(
                name="nexus_update_repository",
                description="Update an existing repository configuration in Nexus Repository Manager (requires write mode)",
                input_schema=UpdateRepositoryInput,
                handler=self.update_repository,
                error_prefix="Error updating repository",
                guidance=WRITE_MODE_GUIDANCE,
            ),
            ToolDefinition(
                name="nexus_delete_repository",
                description="Delete a repository (requires write mode)",
                input_schema=RepositoryNameInput,
                handler=self.delete_repository,
                error_prefix="Error deleting repository",
                guidance=WRITE_MODE_GUIDANCE,
            ),
        ]
