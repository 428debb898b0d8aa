"""Tool registry.

The registry maps an MCP tool name to a ``ToolDefinition``: its input model,
its async handler and the text used when it fails. ``ToolRegistry.call`` is the
boundary where a raw argument bag is validated and where every outcome,
success or classified failure, becomes a ``ToolOutput`` value.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from sonatype_mcp.errors import FailureKind, NexusApiError, UnknownError, ValidationError

logger = logging.getLogger(__name__)

# Guidance is keyed by failure kind, or by (kind, status code) where one kind covers several statuses.
GuidanceKey = Union[FailureKind, Tuple[FailureKind, int]]
ToolHandler = Callable[[Any], Awaitable[Any]]


class ToolNotFoundError(KeyError):
    """Raised when a tool name is not registered (unknown or excluded by the allow-list)."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


@dataclass(frozen=True)
class ToolOutput:
    """Rendered outcome of one tool call."""

    text: str
    is_error: bool = False


class ToolDefinition(BaseModel):
    """Name, schema and handler of one MCP tool."""

    name: str = Field(..., description="Unique identifier for the tool")
    description: str = Field(..., description="Human-readable description of what the tool does")
    input_schema: Type[BaseModel] = Field(..., description="Pydantic model class for input validation")
    handler: ToolHandler = Field(..., description="Async handler receiving the validated input model")
    error_prefix: str = Field(..., description="Leading text of every failure message")
    guidance: Dict[Any, str] = Field(default_factory=dict, description="Troubleshooting text per failure kind")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def get_input_schema_json(self) -> Dict[str, Any]:
        """JSON schema advertised to MCP clients (camelCase argument names)."""
        return self.input_schema.model_json_schema(by_alias=True)

    def guidance_for(self, error: NexusApiError) -> Optional[str]:
        if error.status_code is not None:
            specific = self.guidance.get((error.kind, error.status_code))
            if specific:
                return specific
        return self.guidance.get(error.kind)


def describe_validation_error(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors(include_url=False):
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return ", ".join(parts)


def to_failure(exc: BaseException) -> NexusApiError:
    """Turn anything raised by validation or a handler into a classified failure."""
    if isinstance(exc, NexusApiError):
        return exc
    if isinstance(exc, pydantic.ValidationError):
        return ValidationError(f"Validation failed: {describe_validation_error(exc)}")
    return UnknownError(str(exc) or "An unknown error occurred")


def render_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2, ensure_ascii=False, default=str)


def render_failure(tool: ToolDefinition, error: NexusApiError) -> str:
    text = f"{tool.error_prefix}: {error.message}"
    guidance = tool.guidance_for(error)
    if guidance:
        text += f"\n\n{guidance}"
    return text


class ToolRegistry:
    """
    In-memory mapping of tool names to definitions.

    Notes:
        - When ``enabled`` is non-empty, only the named tools are registered.
        - ``register`` overwrites any existing definition with the same name.
        - ``get`` raises ``ToolNotFoundError`` for unregistered names.
    """

    def __init__(self, tools: Iterable[ToolDefinition] = (), *, enabled: Sequence[str] = ()) -> None:
        self._tools: Dict[str, ToolDefinition] = {}
        self._enabled = frozenset(enabled)
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> bool:
        """Register a tool; returns False when the allow-list excludes it."""
        if self._enabled and tool.name not in self._enabled:
            logger.debug("Tool %s is not in the enabled tools list; skipping", tool.name)
            return False
        self._tools[tool.name] = tool
        return True

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def has(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> List[str]:
        return list(self._tools)

    def definitions(self) -> List[ToolDefinition]:
        return list(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolOutput:
        """
        Validate ``arguments`` against the tool's input model and run its handler.

        Raises:
            ToolNotFoundError: If ``name`` is not registered. Every other failure is
                returned as a ``ToolOutput`` with ``is_error`` set.
        """
        tool = self.get(name)
        logger.info("Executing tool: %s", name)
        try:
            params = tool.input_schema.model_validate(dict(arguments or {}))
            result = await tool.handler(params)
        except Exception as exc:
            error = to_failure(exc)
            logger.warning("Tool execution failed: %s (%s): %s", name, error.kind.value, error.message)
            if error.kind is FailureKind.UNKNOWN:
                logger.debug("Tool %s raised an unclassified error", name, exc_info=exc)
            return ToolOutput(render_failure(tool, error), is_error=True)
        logger.info("Tool execution completed: %s", name)
        return ToolOutput(render_result(result))
