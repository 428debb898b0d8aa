"""MCP tool definitions and the registry that dispatches them."""

from __future__ import annotations

import logging
from typing import List, Optional

from sonatype_mcp.config import AppConfig
from sonatype_mcp.gateway.client import FirewallClient, NexusClient
from sonatype_mcp.services import AdminService, ComponentService, QuarantineService, RepositoryService

from .admin import AdminTools
from .assets import AssetTools
from .components import ComponentTools
from .firewall import FirewallTools
from .registry import ToolDefinition, ToolNotFoundError, ToolOutput, ToolRegistry
from .repository import RepositoryTools

logger = logging.getLogger(__name__)


def build_definitions(nexus: NexusClient, firewall: Optional[FirewallClient] = None) -> List[ToolDefinition]:
    """Every tool available for the given clients, in registration order."""
    components = ComponentService(nexus)
    definitions = [
        *RepositoryTools(RepositoryService(nexus)).definitions(),
        *ComponentTools(components).definitions(),
        *AssetTools(components).definitions(),
        *AdminTools(AdminService(nexus)).definitions(),
    ]
    if firewall is not None:
        definitions.extend(FirewallTools(QuarantineService(firewall)).definitions())
    return definitions


def create_registry(
    config: AppConfig, nexus: NexusClient, firewall: Optional[FirewallClient] = None
) -> ToolRegistry:
    definitions = build_definitions(nexus, firewall)
    available = {definition.name for definition in definitions}
    for name in config.enabled_tools:
        if name not in available:
            logger.warning("Enabled tool %r is not available and will be ignored", name)
    registry = ToolRegistry(definitions, enabled=config.enabled_tools)
    logger.debug("Registered tools: %s", ", ".join(registry.names()))
    return registry


__all__ = [
    "ToolDefinition",
    "ToolNotFoundError",
    "ToolOutput",
    "ToolRegistry",
    "build_definitions",
    "create_registry",
]
