from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from agentic_coder.tools.base import ToolDefinition, ToolResult, check_args
from agentic_coder.utils import resolve_path

_log = logging.getLogger(__name__)

SCHEMA = ToolDefinition(
    name="listFiles",
    description=(
        "List the files and directories inside a directory. "
        "Set recursive to true to include everything below it."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Directory to list, e.g. ., src or ./docs."},
            "recursive": {"type": "boolean", "description": "Include subdirectories recursively. Default: false."},
        },
        "required": ["path"],
    },
)


def _entries(root: Path, recursive: bool) -> List[Path]:
    if recursive:
        return sorted(root.rglob("*"))
    return sorted(root.iterdir())


class ListFilesTool:
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

        recursive = bool(args.get("recursive", False))
        root = resolve_path(args["path"], self._workspace_root)
        _log.debug("listFiles: %s (recursive=%s)", root, recursive)

        if not root.exists():
            return ToolResult.failure(f"Directory not found: {args['path']}")
        if not root.is_dir():
            return ToolResult.failure(f"Path is not a directory: {args['path']}")

        try:
            entries = _entries(root, recursive)
        except OSError as exc:
            return ToolResult.failure(f"Could not read directory: {exc}")

        files: List[Dict[str, Any]] = []
        for entry in entries:
            try:
                stat = entry.stat()
            except OSError as exc:
                _log.warning("listFiles: skipping %s: %s", entry, exc)
                continue
            is_dir = entry.is_dir()
            files.append({
                "path": str(entry),
                "is_dir": is_dir,
                "size": 0 if is_dir else stat.st_size,
            })

        _log.debug("listFiles: %d entries", len(files))
        return ToolResult.success(json.dumps(files, indent=2))
