"""Name-keyed tool registry and dispatch."""

from __future__ import annotations

import logging
from typing import Any

from agentic_coder.tools.base import ToolDefinition, ToolHandler, ToolResult

_log = logging.getLogger(__name__)


class ToolRegistry:
    """Handlers keyed by name plus the definition list advertised to the model.

    Built once at startup and read-only during a run, so it can be shared by
    parallel dispatch.

    Registering a name twice overwrites the earlier tool: the new handler
    wins and its definition takes the old one's slot in the advertised list.
    This is logged as a warning because it usually means two tools collide.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}
        self._definitions: list[ToolDefinition] = []

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        name = definition.name
        if name in self._handlers:
            _log.warning("Tool %r registered twice; the later registration wins", name)
            self._definitions = [
                definition if d.name == name else d for d in self._definitions
            ]
        else:
            self._definitions.append(definition)
        self._handlers[name] = handler

    def advertised_definitions(self) -> list[ToolDefinition]:
        """Definitions in registration order."""
        return list(self._definitions)

    def to_wire(self) -> list[dict[str, Any]]:
        return [d.to_wire() for d in self._definitions]

    def names(self) -> list[str]:
        return [d.name for d in self._definitions]

    def is_mutating(self, name: str) -> bool:
        handler = self._handlers.get(name)
        return bool(getattr(handler, "mutating", False))

    def dispatch(self, name: str, args: dict[str, Any]) -> ToolResult:
        """Run the handler registered under ``name``.

        An unknown name means the model called a tool that was never
        advertised; that comes back as a failure result so the model can
        correct itself.
        """
        handler = self._handlers.get(name)
        if handler is None:
            _log.warning("Model invoked unregistered tool %r", name)
            return ToolResult.failure(f"Tool not found: {name}")
        return handler.execute(args)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
