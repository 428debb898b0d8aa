"""Administrative tools: system status, blob stores, tasks, metrics and support zips."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from sonatype_mcp.errors import FailureKind, UnknownError
from sonatype_mcp.schemas.tools import EmptyInput, GenerateSupportZipInput
from sonatype_mcp.services.admin import AdminService, extract_usage_metrics

from .registry import ToolDefinition

logger = logging.getLogger(__name__)

USAGE_METRICS_GUIDANCE = {
    FailureKind.NOT_FOUND: (
        "Possible causes:\n"
        "• The Service Metrics Data API may not be available in your Nexus version\n"
        '• The user may lack the required "nexus:metrics:read" privilege\n'
        "• The API endpoint may be disabled in your Nexus configuration\n\n"
        "Try using nexus_get_metrics for basic system metrics instead."
    ),
    (FailureKind.AUTHENTICATION, 403): 'The user lacks the required "nexus:metrics:read" privilege.',
}

SUPPORT_ZIP_GUIDANCE = {
    (FailureKind.AUTHENTICATION, 403): (
        "The user may lack administrative privileges required to generate support zip files."
    ),
}


def format_megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


def default_support_zip_name(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return f"supportzip-{moment.strftime('%Y-%m-%dT%H-%M-%S')}Z.zip"


def save_archive(archive: bytes, output_path: str, filename: str) -> Path:
    target = Path(output_path) / filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(archive)
    except OSError as e:
        raise UnknownError(
            f"Unable to save support zip to {target}: {e.strerror or e}. "
            "Check that the output path exists and is writable."
        ) from e
    return target


class AdminTools:
    """MCP handlers for Nexus administration endpoints."""

    def __init__(self, service: AdminService) -> None:
        self.service = service

    async def get_system_status(self, params: EmptyInput) -> Any:
        return await self.service.get_system_status()

    async def list_blob_stores(self, params: EmptyInput) -> Dict[str, Any]:
        blob_stores = await self.service.list_blob_stores()
        return {"blobStores": blob_stores, "count": len(blob_stores)}

    async def list_tasks(self, params: EmptyInput) -> Dict[str, Any]:
        tasks = await self.service.list_tasks()
        return {"tasks": tasks, "count": len(tasks)}

    async def get_metrics(self, params: EmptyInput) -> Any:
        return await self.service.get_metrics()

    async def get_usage_metrics(self, params: EmptyInput) -> Dict[str, Any]:
        return extract_usage_metrics(await self.service.get_service_metrics_data())

    async def generate_support_zip(self, params: GenerateSupportZipInput) -> Dict[str, Any]:
        sections = params.sections()
        archive = await self.service.generate_support_zip(sections)

        saved_path: Optional[str] = None
        if params.output_path:
            target = save_archive(archive, params.output_path, params.filename or default_support_zip_name())
            saved_path = str(target)
            logger.info("Support zip saved to %s (%d bytes)", saved_path, len(archive))

        size = format_megabytes(len(archive))
        return {
            "success": True,
            "size": len(archive),
            "sizeFormatted": size,
            "savedPath": saved_path,
            "configuration": sections.to_payload(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": (
                f"Support zip generated and saved to {saved_path}"
                if saved_path
                else f"Support zip generated successfully ({size})"
            ),
        }

    def definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                name="nexus_get_system_status",
                description="Get system health status and checks",
                input_schema=EmptyInput,
                handler=self.get_system_status,
                error_prefix="Error getting system status",
            ),
            ToolDefinition(
                name="nexus_list_blob_stores",
                description="List all blob store configurations",
                input_schema=EmptyInput,
                handler=self.list_blob_stores,
                error_prefix="Error listing blob stores",
            ),
            ToolDefinition(
                name="nexus_list_tasks",
                description="List all scheduled tasks",
                input_schema=EmptyInput,
                handler=self.list_tasks,
                error_prefix="Error listing tasks",
            ),
            ToolDefinition(
                name="nexus_get_metrics",
                description="Retrieve system metrics including memory, threads, and file descriptors",
                input_schema=EmptyInput,
                handler=self.get_metrics,
                error_prefix="Error getting metrics",
            ),
            ToolDefinition(
                name="nexus_get_usage_metrics",
                description=(
                    "Retrieve Nexus usage metrics including total components and daily request counts. "
                    "Requires nexus:metrics:read privilege."
                ),
                input_schema=EmptyInput,
                handler=self.get_usage_metrics,
                error_prefix="Error getting usage metrics",
                guidance=USAGE_METRICS_GUIDANCE,
            ),
            ToolDefinition(
                name="nexus_generate_support_zip",
                description=(
                    "Generate and optionally save a support zip file containing diagnostic information for "
                    "troubleshooting. The zip includes system info, logs, metrics, and configuration data."
                ),
                input_schema=GenerateSupportZipInput,
                handler=self.generate_support_zip,
                error_prefix="Error generating support zip",
                guidance=SUPPORT_ZIP_GUIDANCE,
            ),
        ]
