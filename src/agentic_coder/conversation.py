"""Conversation history for one agent run."""

from __future__ import annotations

import logging

from agentic_coder.errors import ProtocolError
from agentic_coder.messages import ContentBlock, Message, ToolResultBlock

_log = logging.getLogger(__name__)


class Conversation:
    """Ordered, append-only message history.

    Tool results appended with ``add_tool_results`` must answer exactly the
    tool_use blocks of the immediately preceding assistant message.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def add_user_text(self, text: str) -> Message:
        """Append a user message carrying plain text."""
        return self._append(Message.user_text(text))

    def add_assistant(self, blocks: list[ContentBlock]) -> Message:
        """Append the model's reply, blocks kept verbatim.

        Args:
            blocks: Content blocks as returned by the model (may be empty)
        """
        return self._append(Message(role="assistant", content=list(blocks)))

    def add_tool_results(self, results: list[ToolResultBlock]) -> Message:
        """Append one user message answering the last assistant's tool calls.

        Raises:
            ProtocolError: If an id is orphaned, duplicated or missing.
        """
        last = self.last()
        if last is None or last.role != "assistant":
            raise ProtocolError("Tool results must follow an assistant message")

        expected = [b.id for b in last.tool_uses()]
        answered = [r.tool_use_id for r in results]
        if sorted(answered) != sorted(expected):
            raise ProtocolError(
                f"Tool results {answered} do not match tool calls {expected}"
            )
        return self._append(Message.tool_results(results))

    def _append(self, message: Message) -> Message:
        self._messages.append(message)
        _log.debug("conversation: +%s message (%d total)", message.role, len(self._messages))
        return message

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def get_messages(self) -> list[Message]:
        """Return a copy of the history."""
        return self._messages.copy()

    def __len__(self) -> int:
        return len(self._messages)
