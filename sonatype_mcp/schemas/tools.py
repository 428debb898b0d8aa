"""Input models for every MCP tool.

Each tool validates its raw argument bag against one of these models before
any gateway call is made. Field aliases are camelCase, matching both the tool
argument names advertised to MCP clients and the Nexus request payloads.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, model_validator

from .base import BaseSchema

RepositoryFormat = Literal["npm", "maven2", "nuget", "pypi", "docker", "raw", "yum", "apt"]
RepositoryType = Literal["hosted", "proxy", "group"]
UploadFormat = Literal["maven2", "npm", "pypi", "docker", "raw", "helm", "nuget", "rubygems"]

RepositoryName = Field(..., min_length=1, max_length=100, description="Repository name")


class EmptyInput(BaseSchema):
    """Tools that take no arguments."""


# =====================================================================
# Repositories
# =====================================================================


class ListRepositoriesInput(BaseSchema):
    format: Optional[RepositoryFormat] = Field(
        None, description="Filter by repository format (npm, maven2, nuget, pypi, docker, raw, yum, apt)"
    )
    type: Optional[RepositoryType] = Field(None, description="Filter by repository type")


class RepositoryNameInput(BaseSchema):
    name: str = RepositoryName


class StorageSection(BaseSchema):
    blob_store_name: Optional[str] = Field(None, description="Blob store name (default: default)")
    strict_content_type_validation: Optional[bool] = Field(
        None, description="Enable strict content type validation (default: true)"
    )
    write_policy: Optional[Literal["allow", "allow_once", "deny"]] = Field(
        None, description="Write policy for hosted repositories"
    )


class CleanupSection(BaseSchema):
    policy_names: Optional[List[str]] = Field(None, description="Cleanup policy names to apply")


class ProxySection(BaseSchema):
    remote_url: Optional[str] = Field(None, description="URL of the remote repository to proxy")
    content_max_age: Optional[int] = Field(
        None, description="How long to cache artifacts before rechecking (minutes, default: 1440)"
    )
    metadata_max_age: Optional[int] = Field(
        None, description="How long to cache metadata before rechecking (minutes, default: 1440)"
    )


class NegativeCacheSection(BaseSchema):
    enabled: Optional[bool] = Field(None, description="Enable negative cache (default: true)")
    time_to_live: Optional[int] = Field(None, description="How long to cache failures (minutes, default: 1440)")


class HttpClientConnection(BaseSchema):
    retries: Optional[int] = Field(None, description="Connection retry attempts")
    user_agent_suffix: Optional[str] = None
    timeout: Optional[int] = Field(None, description="Connection timeout (seconds)")
    enable_circular_redirects: Optional[bool] = None
    enable_cookies: Optional[bool] = None
    use_trust_store: Optional[bool] = None


class HttpClientAuthentication(BaseSchema):
    type: Optional[Literal["username", "ntlm", "bearerToken"]] = None
    username: Optional[str] = None
    password: Optional[str] = None
    ntlm_host: Optional[str] = None
    ntlm_domain: Optional[str] = None
    bearer_token: Optional[str] = None


class HttpClientSection(BaseSchema):
    blocked: Optional[bool] = Field(None, description="Block outbound connections (default: false)")
    auto_block: Optional[bool] = Field(
        None, description="Auto-block when the remote peer is detected as unreachable (default: true)"
    )
    connection: Optional[HttpClientConnection] = None
    authentication: Optional[HttpClientAuthentication] = None


class GroupSection(BaseSchema):
    member_names: Optional[List[str]] = Field(None, description="Member repository names")
    writable_member: Optional[str] = Field(None, description="Member that receives deployments")


class MavenSection(BaseSchema):
    version_policy: Optional[Literal["RELEASE", "SNAPSHOT", "MIXED"]] = None
    layout_policy: Optional[Literal["STRICT", "PERMISSIVE"]] = None
    content_disposition: Optional[Literal["INLINE", "ATTACHMENT"]] = None


class DockerSection(BaseSchema):
    v1_enabled: Optional[bool] = None
    force_basic_auth: Optional[bool] = None
    http_port: Optional[int] = None
    https_port: Optional[int] = None
    subdomain: Optional[str] = None


class CatalogSection(BaseSchema):
    """npm / PyPI metadata filtering."""

    remove_non_cataloged: Optional[bool] = Field(None, description="Remove non-cataloged versions from metadata")
    remove_quarantined: Optional[bool] = Field(None, description="Remove quarantined versions from metadata")


class NugetSection(BaseSchema):
    nuget_version: Optional[Literal["V2", "V3"]] = Field(None, description="NuGet protocol version")
    query_cache_item_max_age: Optional[int] = Field(None, description="Query cache item max age in seconds")


class RepositorySections(BaseSchema):
    online: Optional[bool] = Field(None, description="Whether the repository is online (default: true)")
    storage: Optional[StorageSection] = None
    cleanup: Optional[CleanupSection] = None
    proxy: Optional[ProxySection] = Field(None, description="Proxy configuration (required for proxy type)")
    negative_cache: Optional[NegativeCacheSection] = None
    http_client: Optional[HttpClientSection] = None
    group: Optional[GroupSection] = Field(None, description="Group configuration (required for group type)")
    maven: Optional[MavenSection] = None
    docker: Optional[DockerSection] = None
    npm: Optional[CatalogSection] = None
    pypi: Optional[CatalogSection] = None
    nuget: Optional[NugetSection] = None


class CreateRepositoryInput(RepositorySections):
    name: str = Field(..., min_length=1, max_length=100, description="Unique repository identifier")
    format: RepositoryFormat = Field(..., description="Repository format")
    type: RepositoryType = Field(..., description="Repository type")


class UpdateRepositoryInput(RepositorySections):
    name: str = Field(..., min_length=1, max_length=100, description="Name of the repository to update")


# =====================================================================
# Components and assets
# =====================================================================


class SearchComponentsInput(BaseSchema):
    repository: Optional[str] = Field(None, min_length=1, max_length=100, description="Repository name to search in")
    format: Optional[RepositoryFormat] = Field(None, description="Component format")
    group: Optional[str] = Field(None, description="Component group/namespace")
    name: Optional[str] = Field(None, description="Component name")
    version: Optional[str] = Field(None, description="Component version")
    prerelease: Optional[bool] = Field(None, description="Include prerelease versions")
    sort: Optional[Literal["name", "version", "format"]] = Field(None, description="Sort field")
    direction: Optional[Literal["asc", "desc"]] = Field(None, description="Sort direction")
    limit: int = Field(25, ge=1, le=1000, description="Maximum number of results")
    offset: int = Field(0, ge=0, description="Offset into the returned page")
    continuation_token: Optional[str] = Field(None, description="Token from a previous search to fetch the next page")


class ComponentIdInput(BaseSchema):
    id: str = Field(..., min_length=1, description="Component ID")


class ComponentVersionsInput(BaseSchema):
    repository: str = RepositoryName
    format: RepositoryFormat = Field(..., description="Component format")
    group: str = Field(..., min_length=1, description="Component group/namespace")
    name: str = Field(..., min_length=1, max_length=200, description="Component name")


def _check_coordinates(model: "UploadComponentInput | UploadMultipleAssetsInput") -> None:
    if model.format == "maven2" and not (model.group_id and model.artifact_id and model.version):
        raise ValueError("Maven uploads require groupId, artifactId, and version")
    if model.format == "raw" and not model.directory:
        raise ValueError("Raw uploads require directory parameter")


class UploadComponentInput(BaseSchema):
    repository: str = Field(..., min_length=1, description="The repository to upload to")
    format: UploadFormat = Field(..., description="Repository format")
    file: str = Field(..., min_length=1, description="Path to the file to upload")
    group_id: Optional[str] = Field(None, description="Maven group ID (e.g., com.example) - required for maven2")
    artifact_id: Optional[str] = Field(None, description="Maven artifact ID - required for maven2")
    version: Optional[str] = Field(None, description="Component version - required for maven2")
    packaging: Optional[str] = Field(None, description="Packaging type (e.g., jar, war, pom)")
    generate_pom: Optional[bool] = Field(None, description="Whether to generate a POM file")
    classifier: Optional[str] = Field(None, description="Classifier for the artifact")
    directory: Optional[str] = Field(None, description="Directory path in the repository - required for raw")
    filename: Optional[str] = Field(None, description="Filename to use in the repository")

    @model_validator(mode="after")
    def _check_format_fields(self) -> "UploadComponentInput":
        _check_coordinates(self)
        return self


class AssetItem(BaseSchema):
    file: str = Field(..., min_length=1, description="Path to the file to upload")
    filename: Optional[str] = Field(None, description="Filename to use in the repository")
    classifier: Optional[str] = Field(None, description="Classifier for Maven assets")
    extension: Optional[str] = Field(None, description="Extension for Maven assets")


class UploadMultipleAssetsInput(BaseSchema):
    repository: str = Field(..., min_length=1, description="The repository to upload to")
    format: Literal["maven2", "raw"] = Field(
        ..., description="Repository format (only maven2 and raw support multiple assets)"
    )
    assets: List[AssetItem] = Field(..., min_length=1, description="Assets to upload")
    group_id: Optional[str] = Field(None, description="Maven group ID - required for maven2")
    artifact_id: Optional[str] = Field(None, description="Maven artifact ID - required for maven2")
    version: Optional[str] = Field(None, description="Component version - required for maven2")
    packaging: Optional[str] = Field(None, description="Packaging type")
    generate_pom: Optional[bool] = Field(None, description="Generate POM file")
    directory: Optional[str] = Field(None, description="Directory path - required for raw")

    @model_validator(mode="after")
    def _check_format_fields(self) -> "UploadMultipleAssetsInput":
        _check_coordinates(self)
        return self


class UploadAssetInput(BaseSchema):
    repository: str = Field(..., min_length=1, description="The repository to upload to")
    directory: str = Field(..., min_length=1, description="Directory path in the repository")
    file: str = Field(..., min_length=1, description="Path to the file to upload")
    filename: Optional[str] = Field(None, description="Filename to use in the repository (defaults to original filename)")


# =====================================================================
# Administration
# =====================================================================


class SupportZipConfig(BaseSchema):
    """Sections included in a generated support zip. Aliases match the Nexus request body."""

    system_information: bool = Field(True, description="Include system information")
    thread_dump: bool = Field(True, description="Include thread dump")
    metrics: bool = Field(True, description="Include metrics")
    configuration: bool = Field(True, description="Include configuration (may contain sensitive data)")
    security: bool = Field(False, description="Include security information (contains sensitive data)")
    log_files: bool = Field(True, description="Include log files")
    task_log_files: bool = Field(False, description="Include task log files")
    audit_log_files: bool = Field(False, description="Include audit log files")
    jmx: bool = Field(False, description="Include JMX information")


class GenerateSupportZipInput(SupportZipConfig):
    output_path: Optional[str] = Field(None, description="Directory path where to save the support zip file")
    filename: Optional[str] = Field(
        None, description="Custom filename for the support zip (defaults to supportzip-{timestamp}.zip)"
    )

    def sections(self) -> SupportZipConfig:
        return SupportZipConfig.model_validate(self.model_dump(exclude={"output_path", "filename"}))


# =====================================================================
# Firewall
# =====================================================================


class QuarantinedComponentsInput(BaseSchema):
    repository: Optional[str] = Field(None, description="Filter quarantined components by repository name")
    package_url: Optional[str] = Field(None, description="Filter by package URL (PURL)")
    search_pattern: Optional[str] = Field(
        None, description="Pattern matched against package URLs or display names (case-insensitive)"
    )


class ReleaseFromQuarantineInput(BaseSchema):
    quarantine_id: str = Field(..., min_length=1, description="Quarantine ID of the component to release")
    comment: Optional[str] = Field(None, description="Reason for the release")
