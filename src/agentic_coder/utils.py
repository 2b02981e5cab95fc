"""Shared helpers for tools and output."""

from __future__ import annotations

import os
import tempfile
import unicodedata
from pathlib import Path

_KEPT_CONTROL_CHARS = frozenset("\n\r\t")


def strip_control_chars(text: str) -> str:
    """Remove Unicode control characters except newline, carriage return and tab."""
    return "".join(
        ch for ch in text
        if ch in _KEPT_CONTROL_CHARS or unicodedata.category(ch) != "Cc"
    )


def resolve_path(raw_path: str, workspace_root: Path) -> Path:
    """Resolve a tool path argument; relative paths are taken from the workspace root."""
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = workspace_root / path
    return path.resolve()


def atomic_write(path: Path, content: str) -> int:
    """Replace the contents of ``path`` with ``content`` all at once.

    Writes a temporary file in the same directory, then renames it over the
    target, so readers see either the old file or the new one. Line endings
    are written exactly as given.

    Returns:
        Number of bytes written.

    Raises:
        OSError: If the temporary file cannot be written or renamed.
    """
    data = content.encode("utf-8")
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        else:
            os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, str(path))
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return len(data)
