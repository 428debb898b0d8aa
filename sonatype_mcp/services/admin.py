from __future__ import annotations

import logging
from typing import Any, Dict, List

from sonatype_mcp.errors import UnknownError
from sonatype_mcp.gateway.client import NexusClient
from sonatype_mcp.schemas.tools import SupportZipConfig

STATUS_CHECK_PATH = "/service/rest/v1/status/check"
BLOB_STORES_PATH = "/service/rest/v1/blobstores"
METRICS_PATH = "/service/rest/v1/metrics"
METRICS_DATA_PATH = "/service/metrics/data"
TASKS_PATH = "/service/rest/v1/tasks"
SUPPORT_ZIP_PATH = "/service/rest/v1/support/supportzip"

COMPONENT_TOTAL_GAUGE = "nexus.analytics.component_total_count"
CONTENT_REQUEST_GAUGE = "nexus.analytics.content_request_count"


def _items(payload: Any) -> List[Dict[str, Any]]:
    """Accept both bare lists and ``{"items": [...]}`` pages."""
    if isinstance(payload, dict):
        return list(payload.get("items") or [])
    return list(payload or [])


class AdminService:
    """System status, blob store, task, metrics and support operations on top of `NexusClient`."""

    def __init__(self, nexus: NexusClient) -> None:
        self.nexus = nexus
        self._logger = logging.getLogger(__name__)

    async def get_system_status(self) -> Dict[str, Any]:
        return await self.nexus.get(STATUS_CHECK_PATH)

    async def list_blob_stores(self) -> List[Dict[str, Any]]:
        return _items(await self.nexus.get(BLOB_STORES_PATH))

    async def get_metrics(self) -> Dict[str, Any]:
        return await self.nexus.get(METRICS_PATH)

    async def list_tasks(self) -> List[Dict[str, Any]]:
        return _items(await self.nexus.get(TASKS_PATH))

    async def get_service_metrics_data(self) -> Dict[str, Any]:
        """Raw Dropwizard metrics document; requires the ``nexus:metrics:read`` privilege."""
        data = await self.nexus.get(METRICS_DATA_PATH)
        return data if isinstance(data, dict) else {}

    async def generate_support_zip(self, config: SupportZipConfig) -> bytes:
        self._logger.debug("AdminService.generate_support_zip: POST %s", SUPPORT_ZIP_PATH)
        archive = await self.nexus.post(
            SUPPORT_ZIP_PATH,
            config.to_payload(),
            {"Accept": "application/octet-stream"},
        )
        if isinstance(archive, str):
            archive = archive.encode("utf-8")
        if not isinstance(archive, (bytes, bytearray)):
            raise UnknownError("Unexpected response from support zip endpoint: expected binary content")
        return bytes(archive)


def extract_usage_metrics(metrics_data: Dict[str, Any]) -> Dict[str, Any]:
    """Pick total component count and daily content requests out of the metrics gauges."""
    gauges = metrics_data.get("gauges") or {}
    total_components = (gauges.get(COMPONENT_TOTAL_GAUGE) or {}).get("value") or 0
    request_value = (gauges.get(CONTENT_REQUEST_GAUGE) or {}).get("value")
    daily_requests = (request_value.get("day") if isinstance(request_value, dict) else None) or 0
    return {
        "totalComponents": total_components,
        "dailyRequests": daily_requests,
        "rawData": metrics_data,
    }
