"""MCP server binding.

Binds a ``ToolRegistry`` to the low-level ``mcp`` server and runs it over
stdio. ``tools/list`` advertises every registered definition; ``tools/call``
delegates to the registry and raises on failure so the MCP runtime returns an
``isError`` result carrying the rendered failure text.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from sonatype_mcp.config import AppConfig
from sonatype_mcp.gateway.client import FirewallClient, NexusClient
from sonatype_mcp.tools import ToolRegistry, create_registry

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """Carries the rendered failure text of a tool call to the MCP runtime."""


def tool_descriptors(registry: ToolRegistry) -> List[types.Tool]:
    return [
        types.Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.get_input_schema_json(),
        )
        for definition in registry.definitions()
    ]


async def dispatch(registry: ToolRegistry, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    """Run one tool call; failures are raised as ``ToolCallError`` (or ``ToolNotFoundError``)."""
    output = await registry.call(name, arguments)
    if output.is_error:
        raise ToolCallError(output.text)
    return [types.TextContent(type="text", text=output.text)]


def build_server(config: AppConfig, registry: ToolRegistry) -> Server:
    server: Server = Server(config.server.name, version=config.server.version)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tool_descriptors(registry)

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        return await dispatch(registry, name, arguments)

    return server


async def log_connectivity(nexus: NexusClient, firewall: Optional[FirewallClient] = None) -> None:
    """Probe each configured service once and log the outcome. Never raises."""
    if await nexus.probe():
        logger.info("Successfully connected to Nexus at %s", nexus.base_url)
    else:
        logger.warning("Unable to reach Nexus at %s; tool calls will fail until it is reachable", nexus.base_url)
    if firewall is None:
        return
    if await firewall.probe():
        logger.info("Successfully connected to Firewall at %s", firewall.base_url)
    else:
        logger.warning(
            "Unable to reach Firewall at %s; Firewall tool calls will fail until it is reachable", firewall.base_url
        )


async def serve(config: AppConfig) -> None:
    """Open the gateway clients, register the tools and serve MCP over stdio until the stream closes."""
    async with AsyncExitStack() as stack:
        nexus = NexusClient(config.nexus)
        stack.push_async_callback(nexus.aclose)
        firewall: Optional[FirewallClient] = None
        if config.firewall is not None:
            firewall = FirewallClient(config.firewall)
            stack.push_async_callback(firewall.aclose)

        registry = create_registry(config, nexus, firewall)
        server = build_server(config, registry)

        logger.info("Starting %s v%s", config.server.name, config.server.version)
        logger.info("Nexus URL: %s", config.nexus.base_url)
        if config.firewall is not None:
            logger.info("Firewall URL: %s", config.firewall.base_url)
        logger.info("Read-only mode: %s", config.server.read_only)
        logger.info("Registered %d tools", len(registry))
        await log_connectivity(nexus, firewall)

        read_stream, write_stream = await stack.enter_async_context(stdio_server())
        await server.run(read_stream, write_stream, server.create_initialization_options())
