"""Confirm-then-mutate: the only path by which tools change files."""

from __future__ import annotations

import logging
from pathlib import Path

from agentic_coder.permissions import Confirm
from agentic_coder.tools.base import ToolResult
from agentic_coder.utils import atomic_write, strip_control_chars

_log = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Cancelled by user"


def confirm_then_write(
    path: Path,
    content: str,
    *,
    confirm: Confirm,
    prompt: str,
    verb: str,
    create_parents: bool = False,
) -> ToolResult:
    """Ask the operator, then replace the whole file with sanitized content.

    Args:
        path: Resolved target path
        content: New full file content from the model
        confirm: Operator confirmation callable
        prompt: Question shown to the operator, naming path and operation
        verb: Past-tense verb for the success message ("Created", "Updated", ...)
        create_parents: Create missing parent directories first

    Returns:
        Success with the byte count, or a failure for cancellation and
        filesystem errors.
    """
    if not confirm(prompt):
        _log.warning("Write to %s cancelled by user", path)
        return ToolResult.failure(CANCELLED_MESSAGE)

    clean = strip_control_chars(content)
    removed = len(content) - len(clean)
    if removed:
        _log.info("Stripped %d control characters from content for %s", removed, path)

    try:
        if create_parents:
            path.parent.mkdir(parents=True, exist_ok=True)
        written = atomic_write(path, clean)
    except OSError as exc:
        _log.warning("Failed to write %s: %s", path, exc)
        return ToolResult.failure(f"Could not write file {path}: {exc}")

    _log.debug("Wrote %d bytes to %s", written, path)
    message = f"{verb} {path} ({written} bytes)"
    if removed:
        message += f"; removed {removed} control characters"
    return ToolResult.success(message)
