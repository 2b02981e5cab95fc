from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from agentic_coder.permissions import Confirm
from agentic_coder.tools.base import ToolDefinition, ToolResult, check_args
from agentic_coder.tools.mutation import confirm_then_write
from agentic_coder.utils import resolve_path

_log = logging.getLogger(__name__)

SCHEMA = ToolDefinition(
    name="writeFile",
    description=(
        "Create a new file with the given content. Intermediate directories are "
        "created automatically. If the file already exists it is overwritten. "
        "The operator is asked to confirm before anything is written."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path of the file to create, e.g. notes.txt or src/new_module.py."},
            "content": {"type": "string", "description": "Full content to write."},
        },
        "required": ["path", "content"],
    },
)


class WriteFileTool:
    name = SCHEMA.name
    mutating = True

    def __init__(self, workspace_root: str | Path, confirm: Confirm) -> None:
        self._workspace_root = Path(workspace_root).resolve()
        self._confirm = confirm

    def schema(self) -> ToolDefinition:
        return SCHEMA

    def execute(self, args: Dict[str, Any]) -> ToolResult:
        invalid = check_args(args, SCHEMA)
        if invalid is not None:
            return invalid

        path = resolve_path(args["path"], self._workspace_root)
        content: str = args["content"]
        _log.debug("writeFile: %s (%d characters)", path, len(content))

        if path.is_dir():
            return ToolResult.failure(f"Path is a directory: {args['path']}")

        existed = path.exists()
        if existed:
            prompt = f"File '{path}' already exists. Overwrite it?"
        else:
            prompt = f"Create new file '{path}'?"

        return confirm_then_write(
            path,
            content,
            confirm=self._confirm,
            prompt=prompt,
            verb="Overwrote" if existed else "Created",
            create_parents=True,
        )
