"""Shared pytest fixtures and helpers for agentic_coder tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from agentic_coder.llm import STOP_END_TURN, STOP_TOOL_USE, ModelReply, Usage
from agentic_coder.messages import TextBlock, ToolUseBlock
from agentic_coder.tools.base import ToolResult


@pytest.fixture
def workspace(tmp_path):
    """A temporary directory that acts as the workspace root."""
    return tmp_path.resolve()


class ScriptedConfirm:
    """Confirmer test double: answers from a fixed list and records prompts."""

    def __init__(self, *answers: bool) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self._answers.pop(0) if self._answers else False


class ScriptedLLM:
    """LLM client test double returning queued replies and recording each call."""

    def __init__(self, *replies: ModelReply) -> None:
        self._replies = list(replies)
        self.calls: list[dict] = []

    def create_message(self, messages, tools, system=None) -> ModelReply:
        self.calls.append({"messages": list(messages), "tools": list(tools), "system": system})
        if not self._replies:
            raise AssertionError("ScriptedLLM ran out of replies")
        return self._replies.pop(0)


@pytest.fixture
def confirm_yes():
    return ScriptedConfirm(True, True, True, True)


@pytest.fixture
def confirm_no():
    return ScriptedConfirm()


# ── Plain helper functions ─────────────────────────────────────────────────
# Each test file imports these directly:
#   from conftest import assert_ok, assert_fail, make_file

def make_file(workspace: Path, relative_path: str, content: str = "hello\n") -> Path:
    p = workspace / relative_path
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
    return p


def assert_ok(result: ToolResult) -> None:
    assert not result.is_error, f"Expected success but got error: {result.error}"


def assert_fail(result: ToolResult, contains: str | None = None) -> None:
    assert result.is_error, f"Expected failure but result succeeded: {result.output}"
    if contains:
        assert contains in result.error, f"Expected {contains!r} in error {result.error!r}"


def text_reply(text: str, usage: Usage | None = None) -> ModelReply:
    return ModelReply(content=[TextBlock(text=text)], stop_reason=STOP_END_TURN, usage=usage or Usage())


def tool_reply(*calls: tuple[str, str, dict], text: str = "") -> ModelReply:
    """Reply asking for tools; each call is (id, name, input)."""
    content = [TextBlock(text=text)] if text else []
    content += [ToolUseBlock(id=i, name=n, input=args) for i, n, args in calls]
    return ModelReply(content=content, stop_reason=STOP_TOOL_USE, usage=Usage(10, 5))
