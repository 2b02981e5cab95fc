from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from agentic_coder.tools.base import ToolDefinition, ToolResult, check_args
from agentic_coder.utils import resolve_path

_log = logging.getLogger(__name__)

SCHEMA = ToolDefinition(
    name="readFile",
    description=(
        "Read the full contents of a file. "
        "Accepts a path relative to the workspace or an absolute path."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path of the file to read, e.g. README.md or src/main.py."},
        },
        "required": ["path"],
    },
)


class ReadFileTool:
    name = SCHEMA.name
    mutating = False

    def __init__(self, workspace_root: str | Path) -> None:
        self._workspace_root = Path(workspace_root).resolve()

    def schema(self) -> ToolDefinition:
        return SCHEMA

    def execute(self, args: Dict[str, Any]) -> ToolResult:
        invalid = check_args(args, SCHEMA)
        if invalid is not None:
            return invalid

        path = resolve_path(args["path"], self._workspace_root)
        _log.debug("readFile: %s", path)

        if not path.exists():
            return ToolResult.failure(f"File not found: {args['path']}")
        if not path.is_file():
            return ToolResult.failure(f"Path is not a file: {args['path']}")

        try:
            # newline="" keeps CRLF line endings as they are on disk
            with path.open(encoding="utf-8", newline="") as f:
                content = f.read()
        except UnicodeDecodeError:
            return ToolResult.failure(f"File is not valid UTF-8 text: {args['path']}")
        except OSError as exc:
            return ToolResult.failure(f"Could not read file: {exc}")

        _log.debug("readFile: %d characters from %s", len(content), path)
        return ToolResult.success(content)
