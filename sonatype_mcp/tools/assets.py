"""Raw asset upload tool."""

from __future__ import annotations

from typing import Any, Dict, List

from sonatype_mcp.schemas.tools import UploadAssetInput
from sonatype_mcp.services.components import ComponentService

from .components import UPLOAD_GUIDANCE, read_upload_file
from .registry import ToolDefinition


class AssetTools:
    def __init__(self, service: ComponentService) -> None:
        self.service = service

    async def upload_asset(self, params: UploadAssetInput) -> Dict[str, Any]:
        file_name, content = read_upload_file(params.file)
        name = params.filename or file_name
        fields = {"raw.directory": params.directory, "raw.asset1.filename": name}
        result = await self.service.upload_component(params.repository, fields, [("raw.asset1", (name, content))])
        return {
            "success": True,
            "asset": result,
            "message": f"Successfully uploaded asset to {params.repository}/{params.directory}/{name}",
        }

    def definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                name="nexus_upload_asset",
                description="Upload an asset directly to a raw repository",
                input_schema=UploadAssetInput,
                handler=self.upload_asset,
                error_prefix="Error uploading asset",
                guidance=UPLOAD_GUIDANCE,
            ),
        ]
