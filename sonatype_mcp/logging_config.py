"""
Logging Configuration Module.

This module provides centralized logging configuration for sonatype_mcp.

Features:
- Configurable log levels per module
- Console logging on stderr (stdout carries the MCP stdio stream)
- Optional file logging
- Simple, detailed and JSON-shaped formats

Nothing is configured on import; the CLI calls `setup_logging` once at startup.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "detailed"
DEFAULT_LOG_FILE_DIR = "logs"
LOG_FILE_NAME = "sonatype_mcp.log"

# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

LOG_FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}


# Module-specific log levels
MODULE_LOG_LEVELS = {
    "sonatype_mcp.gateway": "DEBUG",
    "sonatype_mcp.services": "DEBUG",
    "sonatype_mcp.tools": "DEBUG",
    "sonatype_mcp.server": "DEBUG",
    # Third-party libraries (reduce noise)
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "mcp": "WARNING",
    "asyncio": "WARNING",
}


def resolve_format(log_format: Optional[str]) -> str:
    """Map a format name to its format string; unknown names fall back to the detailed format."""
    return LOG_FORMATS.get((log_format or DEFAULT_LOG_FORMAT).lower(), DETAILED_FORMAT)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = False,
    log_file_dir: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format name (simple, detailed, json)
        enable_file: Whether to also write a log file
        log_file_dir: Directory for the log file when file logging is enabled
    """
    level = (log_level or DEFAULT_LOG_LEVEL).upper()
    fmt = (log_format or DEFAULT_LOG_FORMAT).lower()

    formatter = logging.Formatter(resolve_format(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if enable_file:
        directory = Path(log_file_dir or DEFAULT_LOG_FILE_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(directory / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.debug("Logging configured: level=%s, format=%s, file_logging=%s", level, fmt, enable_file)

