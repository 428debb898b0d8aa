"""Pydantic base schema utilities for sonatype_mcp models.

Provides a common `BaseSchema` that enforces aliasing and extra-field policy
for tool inputs and configuration models. Tool arguments and Nexus payloads
both use camelCase on the wire, so one alias generator serves both.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """Shared base for all Pydantic models in sonatype_mcp.

    - Rejects unknown fields
    - Enables populate_by_name for using either snake_case or camelCase
    - Uses a snake->camel alias generator for JSON interop
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        alias_generator=_to_camel,
    )

    def to_payload(self) -> dict:
        """Dump set fields with camelCase keys, dropping None values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
