"""
Configuration Settings.

This module defines the process configuration using Pydantic's BaseSettings.
Values come from environment variables and an optional .env file; command-line
flags are passed in as init overrides and therefore take precedence.

The resulting `AppConfig` is built once at startup and handed to every
collaborator (gateway clients, tool registry, MCP server) explicitly.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__

DEFAULT_NEXUS_URL = "http://localhost:8081"
DEFAULT_TIMEOUT_MS = 30000


def _normalize_base_url(value: str) -> str:
    candidate = value.strip().rstrip("/")
    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Invalid base URL {value!r}: expected an absolute http(s) URL")
    return candidate


def parse_tool_list(value: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated allow-list, dropping blanks."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


# =====================================================================
# Runtime Configuration Models
# =====================================================================


class ConnectionProfile(BaseModel):
    """Reachability and identity of one remote REST API. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Absolute base URL of the service", examples=["http://localhost:8081"])
    username: str = Field(default="", description="Basic-auth user name")
    password: str = Field(default="", repr=False, description="Basic-auth password")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="Per-request timeout in milliseconds")
    validate_ssl: bool = Field(default=True, description="Verify TLS certificates")
    read_only: bool = Field(default=False, description="Block every mutating call before dispatch")

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        return _normalize_base_url(value)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


class ServerOptions(BaseModel):
    """Identity and behavior of the MCP server process."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="sonatype-mcp", min_length=1)
    version: str = Field(default=__version__, min_length=1)
    read_only: bool = False


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    nexus: ConnectionProfile
    firewall: Optional[ConnectionProfile] = None
    server: ServerOptions = Field(default_factory=ServerOptions)
    enabled_tools: tuple[str, ...] = ()
    log_level: str = "INFO"
    log_format: str = "detailed"
    log_file_dir: str = "logs"
    enable_file_logging: bool = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AppConfig":
        read_only = settings.read_only_mode
        nexus = ConnectionProfile(
            base_url=settings.nexus_base_url,
            username=settings.nexus_username,
            password=settings.nexus_password,
            timeout_ms=settings.nexus_timeout,
            validate_ssl=settings.nexus_validate_ssl,
            read_only=read_only,
        )
        firewall: Optional[ConnectionProfile] = None
        if settings.firewall_base_url:
            firewall = ConnectionProfile(
                base_url=settings.firewall_base_url,
                username=settings.firewall_username,
                password=settings.firewall_password,
                timeout_ms=settings.firewall_timeout,
                validate_ssl=settings.firewall_validate_ssl,
                read_only=read_only,
            )
        return cls(
            nexus=nexus,
            firewall=firewall,
            server=ServerOptions(
                name=settings.mcp_server_name,
                version=settings.mcp_server_version,
                read_only=read_only,
            ),
            enabled_tools=parse_tool_list(settings.enabled_tools),
            log_level=settings.log_level.upper(),
            log_format=settings.log_format,
            log_file_dir=settings.log_file_dir,
            enable_file_logging=settings.enable_file_logging,
        )


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Process settings model.

    All properties are bound from environment variables and the .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Nexus Repository Manager
    # =====================================================================
    nexus_base_url: str = Field(default=DEFAULT_NEXUS_URL, alias="NEXUS_BASE_URL", description="Nexus base URL")
    nexus_username: str = Field(default="", alias="NEXUS_USERNAME", description="Nexus user name")
    nexus_password: str = Field(default="", alias="NEXUS_PASSWORD", description="Nexus password")
    nexus_timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, alias="NEXUS_TIMEOUT", description="Nexus request timeout (ms)"
    )
    nexus_validate_ssl: bool = Field(
        default=True, alias="NEXUS_VALIDATE_SSL", description="Validate Nexus TLS certificates"
    )

    # =====================================================================
    # Sonatype Firewall (optional)
    # =====================================================================
    firewall_base_url: Optional[str] = Field(
        default=None, alias="FIREWALL_BASE_URL", description="Firewall base URL; unset disables Firewall tools"
    )
    firewall_username: str = Field(default="", alias="FIREWALL_USERNAME", description="Firewall user name")
    firewall_password: str = Field(default="", alias="FIREWALL_PASSWORD", description="Firewall password")
    firewall_timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, alias="FIREWALL_TIMEOUT", description="Firewall request timeout (ms)"
    )
    firewall_validate_ssl: bool = Field(
        default=True, alias="FIREWALL_VALIDATE_SSL", description="Validate Firewall TLS certificates"
    )

    # =====================================================================
    # MCP Server
    # =====================================================================
    mcp_server_name: str = Field(default="sonatype-mcp", alias="MCP_SERVER_NAME", description="MCP server name")
    mcp_server_version: str = Field(
        default=__version__, alias="MCP_SERVER_VERSION", description="MCP server version"
    )
    read_only_mode: bool = Field(default=False, alias="READ_ONLY_MODE", description="Disable all write operations")
    enabled_tools: Optional[str] = Field(
        default=None, alias="ENABLED_TOOLS", description="Comma-separated allow-list of tool names"
    )

    # =====================================================================
    # Logging
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        alias="SONATYPE_MCP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(default="detailed", alias="LOG_FORMAT", description="Log format (simple, detailed, json)")
    log_file_dir: str = Field(default="logs", alias="LOG_FILE_DIR", description="Directory for the log file")
    enable_file_logging: bool = Field(
        default=False, alias="ENABLE_FILE_LOGGING", description="Also write logs to <LOG_FILE_DIR>/sonatype_mcp.log"
    )

    @field_validator("nexus_base_url")
    @classmethod
    def _check_nexus_url(cls, value: str) -> str:
        return _normalize_base_url(value)

    @field_validator("firewall_base_url")
    @classmethod
    def _check_firewall_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return _normalize_base_url(value)


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment, with `overrides` (keyed by env alias) taking precedence."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
