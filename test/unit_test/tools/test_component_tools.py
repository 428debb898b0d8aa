from __future__ import annotations

import json

import httpx
import pytest

from sonatype_mcp.config import AppConfig
from sonatype_mcp.tools import create_registry


def _registry(nexus):
    return create_registry(AppConfig(nexus=nexus.profile), nexus)


def _form_field(body: bytes, name: str) -> bytes:
    marker = f'name="{name}"\r\n\r\n'.encode()
    start = body.index(marker) + len(marker)
    return body[start : body.index(b"\r\n", start)]


@pytest.mark.asyncio
async def test_search_windows_page_and_passes_continuation_token(nexus_factory):
    items = [{"id": str(i)} for i in range(10)]
    nexus, transport = nexus_factory(
        lambda request: httpx.Response(200, json={"items": items, "continuationToken": "next-page"})
    )

    output = await _registry(nexus).call(
        "nexus_search_components",
        {"repository": "npm-hosted", "name": "left-pad", "offset": 2, "limit": 3, "continuationToken": "abc"},
    )

    result = json.loads(output.text)
    assert [c["id"] for c in result["components"]] == ["2", "3", "4"]
    assert result["count"] == 3
    assert result["continuationToken"] == "next-page"
    params = transport.requests[0].url.params
    assert params["continuationToken"] == "abc"
    assert "limit" not in params
    assert "offset" not in params


@pytest.mark.asyncio
async def test_search_limit_out_of_range(nexus_factory):
    nexus, transport = nexus_factory(lambda request: httpx.Response(200, json={"items": []}))

    output = await _registry(nexus).call("nexus_search_components", {"limit": 5000})

    assert output.is_error is True
    assert output.text.startswith("Error searching components: Validation failed: limit:")
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_get_and_delete_component(nexus_factory):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"id": "abc", "name": "lib"})
        return httpx.Response(204)

    nexus, _ = nexus_factory(handler)
    registry = _registry(nexus)

    fetched = await registry.call("nexus_get_component", {"id": "abc"})
    deleted = await registry.call("nexus_delete_component", {"id": "abc"})

    assert json.loads(fetched.text) == {"id": "abc", "name": "lib"}
    assert deleted.text == "Component 'abc' has been deleted successfully."


@pytest.mark.asyncio
async def test_component_versions_summary(nexus_factory):
    items = [{"version": "2.0.0"}, {"version": "1.0.0"}]
    nexus, _ = nexus_factory(lambda request: httpx.Response(200, json={"items": items}))

    output = await _registry(nexus).call(
        "nexus_get_component_versions",
        {"repository": "maven-releases", "format": "maven2", "group": "com.acme", "name": "lib"},
    )

    assert json.loads(output.text) == {
        "repository": "maven-releases",
        "format": "maven2",
        "group": "com.acme",
        "name": "lib",
        "versions": ["2.0.0", "1.0.0"],
        "count": 2,
    }


@pytest.mark.asyncio
async def test_maven_upload_sends_coordinates(nexus_factory, tmp_path):
    artifact = tmp_path / "lib-1.0.0.jar"
    artifact.write_bytes(b"jar-bytes")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_component",
        {
            "repository": "maven-releases",
            "format": "maven2",
            "file": str(artifact),
            "groupId": "com.acme",
            "artifactId": "lib",
            "version": "1.0.0",
            "generatePom": True,
        },
    )

    assert output.is_error is False
    assert json.loads(output.text) == {
        "success": True,
        "component": None,
        "message": "Successfully uploaded component to maven-releases",
    }
    request = transport.requests[0]
    assert request.url.params["repository"] == "maven-releases"
    body = request.content
    assert _form_field(body, "maven2.groupId") == b"com.acme"
    assert _form_field(body, "maven2.artifactId") == b"lib"
    assert _form_field(body, "maven2.version") == b"1.0.0"
    assert _form_field(body, "maven2.generate-pom") == b"true"
    assert _form_field(body, "maven2.asset1.extension") == b"jar"
    assert b'name="maven2.asset1"; filename="lib-1.0.0.jar"' in body


@pytest.mark.asyncio
async def test_maven_upload_requires_coordinates(nexus_factory, tmp_path):
    artifact = tmp_path / "lib.jar"
    artifact.write_bytes(b"jar")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_component",
        {"repository": "maven-releases", "format": "maven2", "file": str(artifact), "groupId": "com.acme"},
    )

    assert output.is_error is True
    assert "Maven uploads require groupId, artifactId, and version" in output.text
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_raw_upload_uses_directory_and_filename(nexus_factory, tmp_path):
    doc = tmp_path / "readme.txt"
    doc.write_text("hello")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    await _registry(nexus).call(
        "nexus_upload_component",
        {"repository": "raw-hosted", "format": "raw", "file": str(doc), "directory": "/docs", "filename": "README"},
    )

    body = transport.requests[0].content
    assert _form_field(body, "raw.directory") == b"/docs"
    assert _form_field(body, "raw.asset1.filename") == b"README"


@pytest.mark.asyncio
async def test_other_formats_use_single_asset_field(nexus_factory, tmp_path):
    package = tmp_path / "left-pad-1.0.0.tgz"
    package.write_bytes(b"tgz")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    await _registry(nexus).call("nexus_upload_component", {"repository": "npm-hosted", "format": "npm", "file": str(package)})

    assert b'name="npm.asset"; filename="left-pad-1.0.0.tgz"' in transport.requests[0].content


@pytest.mark.asyncio
async def test_upload_missing_file(nexus_factory, tmp_path):
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))
    missing = tmp_path / "nope.tgz"

    output = await _registry(nexus).call(
        "nexus_upload_component", {"repository": "npm-hosted", "format": "npm", "file": str(missing)}
    )

    assert output.is_error is True
    assert output.text == f"Error uploading component: File not found: {missing}"
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_upload_forbidden_adds_guidance(nexus_factory, tmp_path):
    package = tmp_path / "pkg.tgz"
    package.write_bytes(b"tgz")
    nexus, _ = nexus_factory(lambda request: httpx.Response(403, json={"message": "denied"}))

    output = await _registry(nexus).call(
        "nexus_upload_component", {"repository": "npm-hosted", "format": "npm", "file": str(package)}
    )

    assert output.is_error is True
    assert output.text.endswith("The user may lack the privileges required to upload to this repository.")


@pytest.mark.asyncio
async def test_upload_multiple_maven_assets(nexus_factory, tmp_path):
    jar = tmp_path / "lib.jar"
    jar.write_bytes(b"jar")
    sources = tmp_path / "lib-sources.jar"
    sources.write_bytes(b"src")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_multiple_assets",
        {
            "repository": "maven-releases",
            "format": "maven2",
            "groupId": "com.acme",
            "artifactId": "lib",
            "version": "1.0.0",
            "assets": [{"file": str(jar)}, {"file": str(sources), "classifier": "sources"}],
        },
    )

    assert json.loads(output.text)["message"] == "Successfully uploaded 2 assets to maven-releases"
    body = transport.requests[0].content
    assert b'name="maven2.asset1"; filename="lib.jar"' in body
    assert b'name="maven2.asset2"; filename="lib-sources.jar"' in body
    assert _form_field(body, "maven2.asset2.classifier") == b"sources"


@pytest.mark.asyncio
async def test_upload_multiple_checks_every_file_first(nexus_factory, tmp_path):
    present = tmp_path / "a.txt"
    present.write_text("a")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_multiple_assets",
        {
            "repository": "raw-hosted",
            "format": "raw",
            "directory": "/docs",
            "assets": [{"file": str(present)}, {"file": str(tmp_path / "b.txt")}],
        },
    )

    assert output.is_error is True
    assert "File not found" in output.text
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_raw_multiple_upload_requires_directory(nexus_factory, tmp_path):
    nexus, _ = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_multiple_assets",
        {"repository": "raw-hosted", "format": "raw", "assets": [{"file": str(tmp_path / "a.txt")}]},
    )

    assert "Raw uploads require directory parameter" in output.text


@pytest.mark.asyncio
async def test_upload_asset_message(nexus_factory, tmp_path):
    doc = tmp_path / "notes.txt"
    doc.write_text("notes")
    nexus, transport = nexus_factory(lambda request: httpx.Response(204))

    output = await _registry(nexus).call(
        "nexus_upload_asset", {"repository": "raw-hosted", "directory": "docs", "file": str(doc)}
    )

    assert json.loads(output.text)["message"] == "Successfully uploaded asset to raw-hosted/docs/notes.txt"
    assert _form_field(transport.requests[0].content, "raw.asset1.filename") == b"notes.txt"
