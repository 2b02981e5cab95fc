"""
agentic_coder.tools
~~~~~~~~~~~~~~~~~~~
All tool classes in one place. Import from here so callers don't need to know
individual module paths.

Quick registration example::

    from agentic_coder.tools import build_registry

    registry = build_registry(confirm=TerminalConfirmer(), workspace_root="/workspace")
    schemas = registry.to_wire()
    result = registry.dispatch("readFile", {"path": "README.md"})
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from agentic_coder.permissions import Confirm
from agentic_coder.tools.base import ToolDefinition, ToolHandler, ToolResult
from agentic_coder.tools.file_edit import EditFileTool, Preview
from agentic_coder.tools.file_list import ListFilesTool
from agentic_coder.tools.file_read import ReadFileTool
from agentic_coder.tools.file_write import WriteFileTool
from agentic_coder.tools.registry import ToolRegistry
from agentic_coder.tools.search import SearchInDirectoryTool

__all__ = [
    "ToolDefinition", "ToolHandler", "ToolResult", "ToolRegistry",
    "ReadFileTool", "ListFilesTool", "SearchInDirectoryTool",
    "WriteFileTool", "EditFileTool",
    "build_tools", "build_registry",
]


def build_tools(
    confirm: Confirm,
    workspace_root: str | Path | None = None,
    preview: Optional[Preview] = None,
) -> list:
    """Instantiate the built-in tools in advertised order."""
    root = Path(workspace_root) if workspace_root is not None else Path.cwd()
    return [
        ReadFileTool(root),
        ListFilesTool(root),
        SearchInDirectoryTool(root),
        WriteFileTool(root, confirm),
        EditFileTool(root, confirm, preview),
    ]


def build_registry(
    confirm: Confirm,
    workspace_root: str | Path | None = None,
    preview: Optional[Preview] = None,
) -> ToolRegistry:
    registry = ToolRegistry()
    for tool in build_tools(confirm, workspace_root, preview):
        registry.register(tool.schema(), tool)
    return registry
