from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from sonatype_mcp.gateway.client import FirewallClient

QUARANTINED_REPORT_PATH = "/api/v2/reports/components/quarantined"
QUARANTINE_RELEASE_PATH = "/api/v2/repositories/quarantine/{quarantine_id}/release"


class QuarantineService:
    """Sonatype Firewall quarantine operations on top of `FirewallClient`."""

    def __init__(self, firewall: FirewallClient) -> None:
        self.firewall = firewall

    async def get_quarantined_components(self, package_url: Optional[str] = None) -> Dict[str, Any]:
        params = {"purl": package_url} if package_url else None
        report = await self.firewall.get(QUARANTINED_REPORT_PATH, params=params)
        return report if isinstance(report, dict) else {}

    async def get_quarantined_components_by_repository(self, repository: str) -> Optional[Dict[str, Any]]:
        report = await self.get_quarantined_components()
        for summary in report.get("repositoryQuarantineSummary") or []:
            if summary.get("repository") == repository:
                return summary
        return None

    async def search_quarantined_components(self, pattern: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match over package URL and display name."""
        needle = pattern.lower()
        report = await self.get_quarantined_components()
        matches: List[Dict[str, Any]] = []
        for summary in report.get("repositoryQuarantineSummary") or []:
            for component in summary.get("components") or []:
                package_url = (component.get("packageUrl") or "").lower()
                display_name = (component.get("displayName") or "").lower()
                if needle in package_url or needle in display_name:
                    matches.append(component)
        return matches

    async def release_from_quarantine(self, quarantine_id: str, comment: Optional[str] = None) -> Dict[str, Any]:
        body = {"comment": comment} if comment else {}
        path = QUARANTINE_RELEASE_PATH.format(quarantine_id=quote(quarantine_id, safe=""))
        response = await self.firewall.post(path, body)
        return response if isinstance(response, dict) else {}
