"""Component tools: search, lookup, versions, deletion and multipart uploads."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

from sonatype_mcp.errors import FailureKind, ValidationError
from sonatype_mcp.schemas.tools import (
    ComponentIdInput,
    ComponentVersionsInput,
    SearchComponentsInput,
    UploadComponentInput,
    UploadMultipleAssetsInput,
)
from sonatype_mcp.services.components import ComponentService

from .registry import ToolDefinition

DEFAULT_MAVEN_EXTENSION = "jar"

UPLOAD_GUIDANCE = {
    (FailureKind.AUTHENTICATION, 403): "The user may lack the privileges required to upload to this repository.",
    FailureKind.NOT_FOUND: "Check that the target repository exists and is a hosted repository.",
}


def read_upload_file(file: str) -> Tuple[str, bytes]:
    """Return (base name, content) of a local file to upload."""
    path = Path(file)
    if not path.is_file():
        raise ValidationError(f"File not found: {file}")
    return path.name, path.read_bytes()


def _extension(file_name: str) -> str:
    return Path(file_name).suffix.lstrip(".") or DEFAULT_MAVEN_EXTENSION


def maven_coordinates(params: UploadComponentInput | UploadMultipleAssetsInput) -> Dict[str, str]:
    fields = {
        "maven2.groupId": params.group_id or "",
        "maven2.artifactId": params.artifact_id or "",
        "maven2.version": params.version or "",
    }
    if params.packaging:
        fields["maven2.packaging"] = params.packaging
    if params.generate_pom is not None:
        fields["maven2.generate-pom"] = "true" if params.generate_pom else "false"
    return fields


class ComponentTools:
    """MCP handlers for component search, lookup and upload."""

    def __init__(self, service: ComponentService) -> None:
        self.service = service

    async def search_components(self, params: SearchComponentsInput) -> Dict[str, Any]:
        query = params.model_dump(by_alias=True, exclude={"limit", "offset"}, exclude_none=True)
        page = await self.service.search_components(query)
        window = page["items"][params.offset : params.offset + params.limit]
        return {
            "components": window,
            "count": len(window),
            "continuationToken": page.get("continuationToken"),
        }

    async def get_component(self, params: ComponentIdInput) -> Any:
        return await self.service.get_component(params.id)

    async def delete_component(self, params: ComponentIdInput) -> str:
        await self.service.delete_component(params.id)
        return f"Component '{params.id}' has been deleted successfully."

    async def get_component_versions(self, params: ComponentVersionsInput) -> Dict[str, Any]:
        versions = await self.service.get_component_versions(
            params.repository, params.format, params.group, params.name
        )
        return {
            "repository": params.repository,
            "format": params.format,
            "group": params.group,
            "name": params.name,
            "versions": versions,
            "count": len(versions),
        }

    async def upload_component(self, params: UploadComponentInput) -> Dict[str, Any]:
        file_name, content = read_upload_file(params.file)
        fields: Dict[str, str] = {}
        if params.format == "maven2":
            fields.update(maven_coordinates(params))
            files = [("maven2.asset1", (file_name, content))]
            fields["maven2.asset1.extension"] = _extension(file_name)
            if params.classifier:
                fields["maven2.asset1.classifier"] = params.classifier
        elif params.format == "raw":
            fields["raw.directory"] = params.directory or ""
            files = [("raw.asset1", (file_name, content))]
            fields["raw.asset1.filename"] = params.filename or file_name
        else:
            files = [(f"{params.format}.asset", (file_name, content))]

        result = await self.service.upload_component(params.repository, fields, files)
        return {
            "success": True,
            "component": result,
            "message": f"Successfully uploaded component to {params.repository}",
        }

    async def upload_multiple_assets(self, params: UploadMultipleAssetsInput) -> Dict[str, Any]:
        # Every file must exist before anything is sent.
        contents = [read_upload_file(asset.file) for asset in params.assets]
        fields: Dict[str, str] = {}
        files: List[Tuple[str, Tuple[str, bytes]]] = []
        if params.format == "maven2":
            fields.update(maven_coordinates(params))
            for number, (asset, (file_name, content)) in enumerate(zip(params.assets, contents), start=1):
                files.append((f"maven2.asset{number}", (file_name, content)))
                fields[f"maven2.asset{number}.extension"] = asset.extension or _extension(file_name)
                if asset.classifier:
                    fields[f"maven2.asset{number}.classifier"] = asset.classifier
        else:
            fields["raw.directory"] = params.directory or ""
            for number, (asset, (file_name, content)) in enumerate(zip(params.assets, contents), start=1):
                name = asset.filename or file_name
                files.append((f"raw.asset{number}", (name, content)))
                fields[f"raw.asset{number}.filename"] = name

        result = await self.service.upload_component(params.repository, fields, files)
        return {
            "success": True,
            "component": result,
            "message": f"Successfully uploaded {len(params.assets)} assets to {params.repository}",
        }

    def definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                name="nexus_search_components",
                description="Search for components across repositories",
                input_schema=SearchComponentsInput,
                handler=self.search_components,
                error_prefix="Error searching components",
            ),
            ToolDefinition(
                name="nexus_get_component",
                description="Get detailed information about a specific component",
                input_schema=ComponentIdInput,
                handler=self.get_component,
                error_prefix="Error getting component",
            ),
            ToolDefinition(
                name="nexus_delete_component",
                description="Delete a component (requires write mode)",
                input_schema=ComponentIdInput,
                handler=self.delete_component,
                error_prefix="Error deleting component",
            ),
            ToolDefinition(
                name="nexus_get_component_versions",
                description="Get all versions of a specific component",
                input_schema=ComponentVersionsInput,
                handler=self.get_component_versions,
                error_prefix="Error getting component versions",
            ),
            ToolDefinition(
                name="nexus_upload_component",
                description="Upload a component to a Nexus repository",
                input_schema=UploadComponentInput,
                handler=self.upload_component,
                error_prefix="Error uploading component",
                guidance=UPLOAD_GUIDANCE,
            ),
            ToolDefinition(
                name="nexus_upload_multiple_assets",
                description="Upload multiple assets to a Maven or Raw repository",
                input_schema=UploadMultipleAssetsInput,
                handler=self.upload_multiple_assets,
                error_prefix="Error uploading assets",
                guidance=UPLOAD_GUIDANCE,
            ),
        ]
