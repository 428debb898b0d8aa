"""MCP server exposing Sonatype Nexus Repository Manager and Firewall operations as tools."""

__version__ = "1.0.0"

__all__ = ["__version__"]
