from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List

from agentic_coder.tools.base import ToolDefinition, ToolResult, check_args
from agentic_coder.utils import resolve_path

_log = logging.getLogger(__name__)

SCHEMA = ToolDefinition(
    name="searchInDirectory",
    description=(
        "Search every file below a directory for a keyword and return the matching lines "
        "with file path and line number. Matching is case-insensitive."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Directory (or single file) to search."},
            "keyword": {"type": "string", "description": "Text to look for."},
        },
        "required": ["path", "keyword"],
    },
)


def _iter_files(root: Path) -> Iterator[Path]:
    if root.is_file():
        yield root
        return
    for path in sorted(root.rglob("*")):
        if path.is_file():
            yield path


class SearchInDirectoryTool:
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

        keyword: str = args["keyword"]
        if not keyword:
            return ToolResult.failure("keyword must not be empty")

        root = resolve_path(args["path"], self._workspace_root)
        _log.debug("searchInDirectory: %r in %s", keyword, root)

        if not root.exists():
            return ToolResult.failure(f"Directory not found: {args['path']}")

        needle = keyword.lower()
        matches: List[Dict[str, Any]] = []
        for file_path in _iter_files(root):
            try:
                content = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                # binary or unreadable
                _log.debug("searchInDirectory: skipping %s", file_path)
                continue

            for line_number, line in enumerate(content.splitlines(), start=1):
                if needle in line.lower():
                    matches.append({
                        "path": str(file_path),
                        "line_number": line_number,
                        "line": line,
                    })

        _log.debug("searchInDirectory: %d matches", len(matches))
        return ToolResult.success(json.dumps(matches, indent=2, ensure_ascii=False))
