"""Tests for the editFile tool."""

from __future__ import annotations

from unittest.mock import MagicMock

from conftest import ScriptedConfirm, assert_fail, assert_ok, make_file

from agentic_coder.tools.file_edit import MISSING_FILE_MESSAGE, EditFileTool
from agentic_coder.tools.mutation import CANCELLED_MESSAGE


class TestEditFile:
    """Test editFile tool."""

    def test_replaces_whole_file(self, workspace):
        """Confirmed edits replace the whole file."""
        make_file(workspace, "a.py", "x = 1\ny = 2\n")
        result = EditFileTool(workspace, ScriptedConfirm(True)).execute(
            {"path": "a.py", "new_content": "x = 1\ny = 3\n"}
        )
        assert_ok(result)
        assert (workspace / "a.py").read_text() == "x = 1\ny = 3\n"
        assert "Updated" in result.output

    def test_prompt_names_path_and_operation(self, workspace):
        """The prompt names the file and the edit."""
        make_file(workspace, "a.py", "x")
        confirm = ScriptedConfirm(True)
        EditFileTool(workspace, confirm).execute({"path": "a.py", "new_content": "y"})
        assert str(workspace / "a.py") in confirm.prompts[0]
        assert "Edit" in confirm.prompts[0]

    def test_missing_file_points_to_write_tool(self, workspace):
        """Editing a missing file points the model to writeFile."""
        confirm = ScriptedConfirm(True)
        result = EditFileTool(workspace, confirm).execute({"path": "ghost.txt", "new_content": "boo"})
        assert_fail(result, "writeFile")
        assert result.error == MISSING_FILE_MESSAGE
        assert not (workspace / "ghost.txt").exists()
        assert confirm.prompts == []

    def test_directory_is_rejected(self, workspace):
        """A directory cannot be edited."""
        (workspace / "pkg").mkdir()
        result = EditFileTool(workspace, ScriptedConfirm(True)).execute({"path": "pkg", "new_content": "x"})
        assert_fail(result, "not a regular file")

    def test_denied_leaves_file_unchanged(self, workspace):
        """Declining leaves the original content."""
        make_file(workspace, "a.txt", "original\n")
        result = EditFileTool(workspace, ScriptedConfirm(False)).execute({"path": "a.txt", "new_content": "changed"})
        assert_fail(result, CANCELLED_MESSAGE)
        assert (workspace / "a.txt").read_text() == "original\n"

    def test_sanitizes_content(self, workspace):
        """Control characters are stripped before writing."""
        make_file(workspace, "a.txt", "old")
        EditFileTool(workspace, ScriptedConfirm(True)).execute({"path": "a.txt", "new_content": "vis\x06ible\r\n\t!"})
        assert (workspace / "a.txt").read_bytes() == b"visible\r\n\t!"

    def test_preview_called_with_old_and_new(self, workspace):
        """The preview gets the current and new content."""
        make_file(workspace, "a.txt", "old\n")
        preview = MagicMock()
        EditFileTool(workspace, ScriptedConfirm(False), preview=preview).execute(
            {"path": "a.txt", "new_content": "new\n"}
        )
        preview.assert_called_once_with("old\n", "new\n", "a.txt")

    def test_preview_shows_sanitized_content(self, workspace):
        """The diff the operator approves matches the bytes that get written."""
        make_file(workspace, "a.txt", "old\n")
        preview = MagicMock()
        EditFileTool(workspace, ScriptedConfirm(True), preview=preview).execute(
            {"path": "a.txt", "new_content": "n\x06ew\r\n\tx\n"}
        )
        shown = preview.call_args[0][1]
        assert shown == "new\r\n\tx\n"
        assert (workspace / "a.txt").read_bytes() == shown.encode("utf-8")

    def test_missing_new_content(self, workspace):
        """new_content is required."""
        make_file(workspace, "a.txt")
        assert_fail(EditFileTool(workspace, ScriptedConfirm(True)).execute({"path": "a.txt"}), "new_content")

    def test_preserves_file_mode(self, workspace):
        """Edits keep the file's permission bits."""
        f = make_file(workspace, "run.sh", "echo hi\n")
        f.chmod(0o755)
        EditFileTool(workspace, ScriptedConfirm(True)).execute({"path": "run.sh", "new_content": "echo bye\n"})
        assert f.stat().st_mode & 0o777 == 0o755
