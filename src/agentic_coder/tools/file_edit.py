from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from agentic_coder.permissions import Confirm
from agentic_coder.tools.base import ToolDefinition, ToolResult, check_args
from agentic_coder.tools.mutation import confirm_then_write
from agentic_coder.utils import resolve_path, strip_control_chars

_log = logging.getLogger(__name__)

# preview(old_content, new_content, file_path)
Preview = Callable[[str, str, str], None]

MISSING_FILE_MESSAGE = "File does not exist. Use writeFile to create a new file."

SCHEMA = ToolDefinition(
    name="editFile",
    description=(
        "Replace the entire content of an existing file. To avoid corrupting the file:\n"
        "1. Use readFile to get its current full content.\n"
        "2. Build the complete new version of the file from what you read.\n"
        "3. Call this tool with that complete content.\n"
        "Partial edits are not supported; always send the whole file. "
        "The operator is asked to confirm before the file is changed."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path of the existing file to edit."},
            "new_content": {"type": "string", "description": "Complete new content replacing the whole file."},
        },
        "required": ["path", "new_content"],
    },
)


class EditFileTool:
    name = SCHEMA.name
    mutating = True

    def __init__(
        self,
        workspace_root: str | Path,
        confirm: Confirm,
        preview: Optional[Preview] = None,
    ) -> None:
        self._workspace_root = Path(workspace_root).resolve()
        self._confirm = confirm
        self._preview = preview

    def schema(self) -> ToolDefinition:
        return SCHEMA

    def execute(self, args: Dict[str, Any]) -> ToolResult:
        invalid = check_args(args, SCHEMA)
        if invalid is not None:
            return invalid

        path = resolve_path(args["path"], self._workspace_root)
        new_content: str = args["new_content"]
        _log.debug("editFile: %s (%d characters)", path, len(new_content))

        if not path.exists():
            _log.warning("editFile: %s does not exist", path)
            return ToolResult.failure(MISSING_FILE_MESSAGE)
        if not path.is_file():
            return ToolResult.failure(f"{args['path']} is not a regular file.")

        if self._preview is not None:
            try:
                with path.open(encoding="utf-8", newline="") as f:
                    current = f.read()
                # preview what will actually be written
                self._preview(current, strip_control_chars(new_content), args["path"])
            except (OSError, UnicodeDecodeError) as e:
                _log.debug("Skipping diff preview for %s: %s", path, e)

        return confirm_then_write(
            path,
            new_content,
            confirm=self._confirm,
            prompt=f"Edit existing file '{path}' (full content replacement)?",
            verb="Updated",
        )
