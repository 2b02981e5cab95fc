"""Rich terminal output helpers for the CLI."""

import contextlib
import difflib
import io

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule
from rich.status import Status
from rich.syntax import Syntax
from rich.text import Text

_MAX_ARG_DISPLAY = 50
_MAX_DIFF_LINES = 80


class Renderer:
    """Render markdown and styled status/error output in terminal."""

    def __init__(self, output_file: io.TextIOBase | None = None) -> None:
        self._output_file = output_file
        if output_file is not None:
            self.console = Console(file=output_file, force_terminal=False, highlight=False, width=120)
        else:
            self.console = Console()

    def render_markdown(self, text: str) -> None:
        """Render markdown content with Rich formatting."""
        self.console.print(Markdown(text))

    def print_error(self, message: str) -> None:
        """Print a styled error message."""
        self.console.print(Text(message, style="red"), highlight=False)

    def print_info(self, message: str) -> None:
        """Print a styled informational message."""
        self.console.print(Text(message, style="dim"), highlight=False)

    def print_warning(self, message: str) -> None:
        """Print a styled warning message."""
        self.console.print(Text(message, style="yellow"), highlight=False)

    def print_success(self, message: str) -> None:
        """Print a styled success message."""
        self.console.print(Text(message, style="green"), highlight=False)

    def status_spinner(self, message: str) -> "Status | contextlib.AbstractContextManager":
        """Return a spinner context manager for status display.

        Returns a no-op context manager when output goes to a file or a
        non-terminal, so no cursor-movement codes end up in the output.
        """
        if self._output_file is not None or not self.console.is_terminal:
            return contextlib.nullcontext()
        return self.console.status(message)

    def render_separator(self) -> None:
        """Render a dim horizontal rule as a separator."""
        self.console.print(Rule(style="dim"))

    def render_tool_panel(self, tool_name: str, tool_args: dict) -> None:
        """Render a compact inline display for tool execution.

        Args:
            tool_name: Name of the tool being executed
            tool_args: Dictionary of tool arguments
        """
        self.console.print(Text.assemble(("◆ ", "bold cyan"), (tool_name, "cyan")))
        for key, value in tool_args.items():
            value_str = str(value)
            if len(value_str) > _MAX_ARG_DISPLAY:
                value_str = value_str[:_MAX_ARG_DISPLAY - 3] + "..."
            self.console.print(Text.assemble((f"  {key}", "dim"), (": " + value_str, "")), highlight=False)

    def render_tool_outcome(self, tool_name: str, error: str | None) -> None:
        if error is None:
            self.print_success("  ✓ done")
        else:
            self.print_error(f"  {tool_name} failed: {error}")

    def render_diff_preview(self, old_content: str, new_content: str, file_path: str = "") -> None:
        """Render before/after diff preview for file edits using unified diff format.

        Args:
            old_content: Original file content
            new_content: New file content
            file_path: File path for diff header labels
        """
        diff = list(difflib.unified_diff(
            old_content.splitlines(keepends=True),
            new_content.splitlines(keepends=True),
            fromfile=f"a/{file_path}" if file_path else "before",
            tofile=f"b/{file_path}" if file_path else "after",
            n=3,
        ))
        if not diff:
            self.print_info("  (no changes)")
            return
        diff_text = "".join(diff[:_MAX_DIFF_LINES])
        if len(diff) > _MAX_DIFF_LINES:
            diff_text += f"\n  ... ({len(diff) - _MAX_DIFF_LINES} more lines)"
        self.console.print(Syntax(diff_text, "diff", theme="ansi_dark"))

    def render_response(self, text: str) -> None:
        self.console.print()
        self.console.print(Text("--- Response ---", style="bold"))
        if text:
            self.render_markdown(text)

    def render_metadata(self, iterations: int, input_tokens: int, output_tokens: int) -> None:
        self.console.print()
        self.console.print(Text("--- Metadata ---", style="bold"))
        for key, value in (
            ("Iterations", iterations),
            ("Input tokens", input_tokens),
            ("Output tokens", output_tokens),
        ):
            self.console.print(Text.assemble((f"{key}: ", "dim"), (str(value), "")), highlight=False)
