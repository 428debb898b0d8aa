from __future__ import annotations

import json

import httpx
import pytest

from sonatype_mcp.config import AppConfig
from sonatype_mcp.tools import create_registry

REPORT = {
    "repositoryQuarantineSummary": [
        {
            "repository": "npm-proxy",
            "componentsInQuarantine": 2,
            "components": [
                {"packageUrl": "pkg:npm/left-pad@1.0.0", "displayName": "left-pad 1.0.0"},
                {"packageUrl": "pkg:npm/evil@6.6.6", "displayName": "Evil Package"},
            ],
        },
        {
            "repository": "pypi-proxy",
            "componentsInQuarantine": 1,
            "components": [{"packageUrl": "pkg:pypi/requests@0.0.1", "displayName": "requests"}],
        },
    ]
}


def _registry(nexus_factory, firewall):
    nexus, _ = nexus_factory(lambda request: httpx.Response(200))
    return create_registry(AppConfig(nexus=nexus.profile, firewall=firewall.profile), nexus, firewall)


@pytest.mark.asyncio
async def test_full_report_adds_summary(nexus_factory, firewall_factory):
    firewall, _ = firewall_factory(lambda request: httpx.Response(200, json=REPORT))

    output = await _registry(nexus_factory, firewall).call("firewall_get_quarantined_components", {})

    result = json.loads(output.text)
    assert result["repositoryQuarantineSummary"] == REPORT["repositoryQuarantineSummary"]
    assert result["summary"] == {
        "totalQuarantinedComponents": 3,
        "totalRepositoriesWithQuarantine": 2,
        "packageUrlFilter": None,
    }
    assert result["message"] == "Found 3 quarantined component(s) across 2 repository/repositories"


@pytest.mark.asyncio
async def test_package_url_filter_message(nexus_factory, firewall_factory):
    firewall, transport = firewall_factory(lambda request: httpx.Response(200, json=REPORT))

    output = await _registry(nexus_factory, firewall).call(
        "firewall_get_quarantined_components", {"packageUrl": "pkg:npm/evil@6.6.6"}
    )

    assert json.loads(output.text)["message"] == "Found quarantined components matching PURL 'pkg:npm/evil@6.6.6'"
    assert transport.requests[0].url.params["purl"] == "pkg:npm/evil@6.6.6"


@pytest.mark.asyncio
async def test_repository_filter(nexus_factory, firewall_factory):
    firewall, _ = firewall_factory(lambda request: httpx.Response(200, json=REPORT))
    registry = _registry(nexus_factory, firewall)

    found = json.loads((await registry.call("firewall_get_quarantined_components", {"repository": "npm-proxy"})).text)
    missing = json.loads(
        (await registry.call("firewall_get_quarantined_components", {"repository": "maven-proxy"})).text
    )

    assert found["componentsInQuarantine"] == 2
    assert found["message"] == "Found 2 quarantined component(s) in repository 'npm-proxy'"
    assert missing == {
        "repository": "maven-proxy",
        "componentsInQuarantine": 0,
        "components": [],
        "message": "No quarantined components found in repository 'maven-proxy'",
    }


@pytest.mark.asyncio
async def test_search_pattern(nexus_factory, firewall_factory):
    firewall, _ = firewall_factory(lambda request: httpx.Response(200, json=REPORT))

    output = await _registry(nexus_factory, firewall).call(
        "firewall_get_quarantined_components", {"searchPattern": "left"}
    )

    result = json.loads(output.text)
    assert result["totalMatches"] == 1
    assert result["matchingComponents"][0]["packageUrl"] == "pkg:npm/left-pad@1.0.0"
    assert result["message"] == "Found 1 quarantined component(s) matching pattern 'left'"


@pytest.mark.asyncio
async def test_release_reports_waived_violations(nexus_factory, firewall_factory):
    reply = {
        "releaseDate": "2024-01-01T00:00:00Z",
        "component": {"packageUrl": "pkg:npm/evil@6.6.6"},
        "waivedPolicyViolations": [{"policyName": "Security-High"}, {"policyName": "License"}],
    }
    firewall, _ = firewall_factory(lambda request: httpx.Response(200, json=reply))

    output = await _registry(nexus_factory, firewall).call(
        "firewall_release_from_quarantine", {"quarantineId": "q-1", "comment": "reviewed"}
    )

    result = json.loads(output.text)
    assert result["success"] is True
    assert result["quarantineId"] == "q-1"
    assert result["releaseDate"] == "2024-01-01T00:00:00Z"
    assert result["comment"] == "reviewed"
    assert result["message"] == (
        "Component successfully released from Firewall quarantine. 2 policy violation(s) were waived."
    )


@pytest.mark.asyncio
async def test_release_not_found_guidance(nexus_factory, firewall_factory):
    firewall, _ = firewall_factory(lambda request: httpx.Response(404, json={"error": "no such quarantine"}))

    output = await _registry(nexus_factory, firewall).call("firewall_release_from_quarantine", {"quarantineId": "q-9"})

    assert output.is_error is True
    assert output.text.startswith(
        "Error releasing component from Firewall quarantine: Resource not found: no such quarantine\n\n"
    )
    assert "may have already been released" in output.text


@pytest.mark.asyncio
async def test_release_blocked_in_read_only_mode(nexus_factory, firewall_factory):
    firewall, transport = firewall_factory(lambda request: httpx.Response(200, json={}), read_only=True)

    output = await _registry(nexus_factory, firewall).call("firewall_release_from_quarantine", {"quarantineId": "q-1"})

    assert output.is_error is True
    assert "read-only mode" in output.text
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_missing_credentials_guidance(nexus_factory, firewall_factory):
    firewall, transport = firewall_factory(lambda request: httpx.Response(200, json=REPORT), username="", password="")

    output = await _registry(nexus_factory, firewall).call("firewall_get_quarantined_components", {})

    assert output.is_error is True
    assert "Invalid Firewall credentials" in output.text
    assert output.text.endswith("Please provide --firewall-username and --firewall-password arguments.")
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_unreachable_firewall_guidance(nexus_factory, firewall_factory):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    firewall, _ = firewall_factory(handler)

    output = await _registry(nexus_factory, firewall).call("firewall_get_quarantined_components", {})

    assert output.text.startswith(
        "Error retrieving quarantined components from Firewall: Network error: Unable to connect to Firewall server"
    )
    assert "• The --firewall-url is correct" in output.text
