"""Base types for tool system."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class ToolResult:
    """Result from tool execution.

    When ``error`` is set the result is a failure and ``output`` is not the
    authoritative payload.
    """

    output: str = ""
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, output: str) -> "ToolResult":
        return cls(output=output, error=None)

    @classmethod
    def failure(cls, error: str, output: str = "") -> "ToolResult":
        return cls(output=output, error=error)

    def to_json(self) -> str:
        """Serialize for a tool_result block; ``error`` is omitted on success."""
        payload: dict[str, Any] = {"content": self.output}
        if self.error is not None:
            payload["error"] = self.error
        return json.dumps(payload, ensure_ascii=False)


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool advertised to the model."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


class ToolHandler(Protocol):
    """Executable capability bound to a ToolDefinition.

    Handlers translate their own domain failures into failure results
    instead of raising.
    """

    mutating: bool

    def execute(self, args: dict[str, Any]) -> ToolResult:
        ...


_JSON_TYPES: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "boolean": bool,
    "integer": int,
    "object": dict,
    "array": list,
}


def check_args(args: Any, definition: ToolDefinition) -> ToolResult | None:
    """Validate tool input against the definition's schema.

    Returns a failure result describing the first problem, or None when the
    input is usable.
    """
    if not isinstance(args, dict):
        return ToolResult.failure(f"{definition.name}: input must be an object")

    schema = definition.input_schema
    for key in schema.get("required", []):
        if key not in args:
            return ToolResult.failure(f"{definition.name}: missing required argument '{key}'")

    for key, spec in schema.get("properties", {}).items():
        if key not in args:
            continue
        expected = _JSON_TYPES.get(spec.get("type", ""))
        if expected is not None and not isinstance(args[key], expected):
            return ToolResult.failure(
                f"{definition.name}: argument '{key}' must be of type {spec['type']}"
            )
    return None
