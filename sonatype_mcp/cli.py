"""Command-line entry point.

Flags are parsed with argparse and handed to `Settings` as init overrides keyed
by the environment variable they replace, so a flag always wins over the
environment and the environment wins over defaults.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

import pydantic

from . import __version__
from .config import AppConfig, load_settings
from .logging_config import LOG_FORMATS, setup_logging
from .server import serve
from .tools.registry import describe_validation_error

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sonatype-mcp",
        description="MCP server exposing Sonatype Nexus Repository Manager and Firewall operations as tools",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    nexus = parser.add_argument_group("Nexus Repository Manager")
    nexus.add_argument("--nexus-url", dest="NEXUS_BASE_URL", help="Nexus base URL (env: NEXUS_BASE_URL)")
    nexus.add_argument("--nexus-username", dest="NEXUS_USERNAME", help="Nexus user name (env: NEXUS_USERNAME)")
    nexus.add_argument("--nexus-password", dest="NEXUS_PASSWORD", help="Nexus password (env: NEXUS_PASSWORD)")
    nexus.add_argument(
        "--nexus-timeout", dest="NEXUS_TIMEOUT", type=int, help="Request timeout in milliseconds (env: NEXUS_TIMEOUT)"
    )
    nexus.add_argument(
        "--nexus-validate-ssl",
        dest="NEXUS_VALIDATE_SSL",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Verify Nexus TLS certificates (env: NEXUS_VALIDATE_SSL)",
    )

    firewall = parser.add_argument_group("Sonatype Firewall")
    firewall.add_argument(
        "--firewall-url", dest="FIREWALL_BASE_URL", help="Firewall base URL; enables Firewall tools (env: FIREWALL_BASE_URL)"
    )
    firewall.add_argument("--firewall-username", dest="FIREWALL_USERNAME", help="Firewall user name (env: FIREWALL_USERNAME)")
    firewall.add_argument("--firewall-password", dest="FIREWALL_PASSWORD", help="Firewall password (env: FIREWALL_PASSWORD)")
    firewall.add_argument(
        "--firewall-timeout",
        dest="FIREWALL_TIMEOUT",
        type=int,
        help="Request timeout in milliseconds (env: FIREWALL_TIMEOUT)",
    )
    firewall.add_argument(
        "--firewall-validate-ssl",
        dest="FIREWALL_VALIDATE_SSL",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Verify Firewall TLS certificates (env: FIREWALL_VALIDATE_SSL)",
    )

    server = parser.add_argument_group("Server")
    server.add_argument(
        "--read-only",
        dest="READ_ONLY_MODE",
        action="store_true",
        default=None,
        help="Disable all write operations (env: READ_ONLY_MODE)",
    )
    server.add_argument(
        "--enabled-tools",
        dest="ENABLED_TOOLS",
        help="Comma-separated list of tools to expose; default is all (env: ENABLED_TOOLS)",
    )
    server.add_argument(
        "--log-level",
        dest="SONATYPE_MCP_LOG_LEVEL",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Console log level (env: SONATYPE_MCP_LOG_LEVEL)",
    )
    server.add_argument(
        "--log-format",
        dest="LOG_FORMAT",
        choices=sorted(LOG_FORMATS),
        help="Log format (env: LOG_FORMAT)",
    )
    server.add_argument("--debug", action="store_true", help="Shorthand for --log-level DEBUG")
    return parser


def load_config(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """Parse `argv`, merge it with the environment and build the immutable `AppConfig`.

    Invalid configuration exits with status 2 and a usage message.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides: Dict[str, Any] = {key: value for key, value in vars(args).items() if key != "debug"}
    if args.debug:
        overrides["SONATYPE_MCP_LOG_LEVEL"] = "DEBUG"
    try:
        return AppConfig.from_settings(load_settings(**overrides))
    except pydantic.ValidationError as e:
        parser.error(f"invalid configuration: {describe_validation_error(e)}")
        raise  # parser.error exits


def warn_missing_credentials(config: AppConfig) -> None:
    if not config.nexus.has_credentials:
        logger.warning(
            "Nexus credentials are not configured (NEXUS_USERNAME / NEXUS_PASSWORD or "
            "--nexus-username / --nexus-password); authenticated tool calls will fail"
        )
    if config.firewall is not None and not config.firewall.has_credentials:
        logger.warning(
            "Firewall credentials are not configured (FIREWALL_USERNAME / FIREWALL_PASSWORD or "
            "--firewall-username / --firewall-password); Firewall tool calls will fail"
        )


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = load_config(argv)
    setup_logging(
        config.log_level,
        config.log_format,
        enable_file=config.enable_file_logging,
        log_file_dir=config.log_file_dir,
    )
    warn_missing_credentials(config)
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
