"""Sonatype Firewall quarantine tools. Registered only when a Firewall URL is configured."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sonatype_mcp.errors import FailureKind
from sonatype_mcp.schemas.tools import QuarantinedComponentsInput, ReleaseFromQuarantineInput
from sonatype_mcp.services.quarantine import QuarantineService

from .registry import ToolDefinition

CREDENTIALS_GUIDANCE = (
    "Firewall credentials are required. Please provide --firewall-username and --firewall-password arguments."
)
CONNECTIVITY_GUIDANCE = (
    "Cannot connect to Firewall. Check that:\n"
    "• Firewall is running and accessible\n"
    "• The --firewall-url is correct\n"
    "• Network connectivity allows access to Firewall"
)

QUARANTINE_REPORT_GUIDANCE = {
    (FailureKind.AUTHENTICATION, 403): (
        "The user may lack the required privileges to access Firewall quarantine information. "
        "Ensure the user has permissions to view firewall quarantine data."
    ),
    FailureKind.NOT_FOUND: (
        "The Firewall quarantine API may not be available. This could indicate:\n"
        "• Sonatype Firewall is not running or configured\n"
        "• The API endpoint is not available in your Firewall version\n"
        "• The Firewall URL is incorrect"
    ),
    FailureKind.CONFIGURATION: CREDENTIALS_GUIDANCE,
    FailureKind.NETWORK: CONNECTIVITY_GUIDANCE,
}

RELEASE_GUIDANCE = {
    (FailureKind.AUTHENTICATION, 403): (
        "The user may lack the required privileges to release components from Firewall quarantine. "
        "Ensure the user has permissions to manage firewall quarantine and waive policy violations."
    ),
    FailureKind.NOT_FOUND: (
        "The quarantine ID may not exist or may have already been released. "
        "Verify the quarantine ID is correct and the component is still in quarantine."
    ),
    (FailureKind.VALIDATION, 400): "The request may be invalid. Check that the quarantine ID is properly formatted.",
    FailureKind.CONFIGURATION: CREDENTIALS_GUIDANCE,
    FailureKind.NETWORK: CONNECTIVITY_GUIDANCE,
}


class FirewallTools:
    """MCP handlers for Firewall quarantine reports and releases."""

    def __init__(self, service: QuarantineService) -> None:
        self.service = service

    async def get_quarantined_components(self, params: QuarantinedComponentsInput) -> Dict[str, Any]:
        if params.repository:
            summary = await self.service.get_quarantined_components_by_repository(params.repository)
            if summary is None:
                return {
                    "repository": params.repository,
                    "componentsInQuarantine": 0,
                    "components": [],
                    "message": f"No quarantined components found in repository '{params.repository}'",
                }
            return {
                **summary,
                "message": (
                    f"Found {summary.get('componentsInQuarantine') or 0} quarantined component(s) "
                    f"in repository '{params.repository}'"
                ),
            }

        if params.search_pattern:
            matches = await self.service.search_quarantined_components(params.search_pattern)
            return {
                "searchPattern": params.search_pattern,
                "matchingComponents": matches,
                "totalMatches": len(matches),
                "message": (
                    f"Found {len(matches)} quarantined component(s) matching pattern '{params.search_pattern}'"
                ),
            }

        report = await self.service.get_quarantined_components(params.package_url)
        summaries = report.get("repositoryQuarantineSummary") or []
        total_quarantined = sum(summary.get("componentsInQuarantine") or 0 for summary in summaries)
        total_repositories = len(summaries)
        if params.package_url:
            message = f"Found quarantined components matching PURL '{params.package_url}'"
        else:
            message = (
                f"Found {total_quarantined} quarantined component(s) across "
                f"{total_repositories} repository/repositories"
            )
        return {
            **report,
            "summary": {
                "totalQuarantinedComponents": total_quarantined,
                "totalRepositoriesWithQuarantine": total_repositories,
                "packageUrlFilter": params.package_url,
            },
            "message": message,
        }

    async def release_from_quarantine(self, params: ReleaseFromQuarantineInput) -> Dict[str, Any]:
        response = await self.service.release_from_quarantine(params.quarantine_id, params.comment)
        waived = response.get("waivedPolicyViolations") or []
        return {
            "success": True,
            "quarantineId": params.quarantine_id,
            "releaseDate": response.get("releaseDate") or datetime.now(timezone.utc).isoformat(),
            "component": response.get("component"),
            "waivedPolicyViolations": response.get("waivedPolicyViolations"),
            "comment": params.comment,
            "message": (
                f"Component successfully released from Firewall quarantine. "
                f"{len(waived)} policy violation(s) were waived."
            ),
        }

    def definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                name="firewall_get_quarantined_components",
                description=(
                    "Retrieve components that have been quarantined by Sonatype Firewall policies. "
                    "Can filter by repository, package URL, or search pattern. Requires Firewall credentials."
                ),
                input_schema=QuarantinedComponentsInput,
                handler=self.get_quarantined_components,
                error_prefix="Error retrieving quarantined components from Firewall",
                guidance=QUARANTINE_REPORT_GUIDANCE,
            ),
            ToolDefinition(
                name="firewall_release_from_quarantine",
                description=(
                    "Release a component from quarantine by waiving policy violations in Sonatype Firewall. "
                    "This allows the component to be used despite failing firewall policies. "
                    "Write mode only. Requires Firewall credentials."
                ),
                input_schema=ReleaseFromQuarantineInput,
                handler=self.release_from_quarantine,
                error_prefix="Error releasing component from Firewall quarantine",
                guidance=RELEASE_GUIDANCE,
            ),
        ]
