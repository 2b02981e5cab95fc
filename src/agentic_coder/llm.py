"""LiteLLM client wrapper - translates the block protocol to chat completions and back."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import litellm

from agentic_coder.config import AgentConfig
from agentic_coder.errors import ProtocolError
from agentic_coder.messages import (
    ContentBlock,
    Message,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from agentic_coder.tools.base import ToolDefinition

_log = logging.getLogger(__name__)

STOP_TOOL_USE = "tool_use"
STOP_END_TURN = "end_turn"
STOP_MAX_TOKENS = "max_tokens"


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class ModelReply:
    """One model reply expressed as content blocks."""

    content: list[ContentBlock] = field(default_factory=list)
    stop_reason: str = STOP_END_TURN
    usage: Usage = field(default_factory=Usage)
    model: str = ""

    @property
    def wants_tools(self) -> bool:
        """Only an explicit tool_use stop continues the loop."""
        return self.stop_reason == STOP_TOOL_USE

    def text(self) -> str:
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))

    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


def to_chat_messages(messages: list[Message], system: str | None = None) -> list[dict[str, Any]]:
    """Convert block-protocol messages to the chat format litellm expects.

    tool_use blocks become assistant ``tool_calls``; tool_result blocks become
    ``role="tool"`` messages placed directly after the calls they answer.
    """
    chat: list[dict[str, Any]] = []
    if system:
        chat.append({"role": "system", "content": system})

    for message in messages:
        blocks = message.blocks()
        text = "".join(b.text for b in blocks if isinstance(b, TextBlock))

        if message.role == "assistant":
            calls = [b for b in blocks if isinstance(b, ToolUseBlock)]
            if any(isinstance(b, ToolResultBlock) for b in blocks):
                raise ProtocolError("Assistant messages cannot carry tool_result blocks")
            entry: dict[str, Any] = {"role": "assistant", "content": text or (None if calls else "")}
            if calls:
                entry["tool_calls"] = [
                    {
                        "id": c.id,
                        "type": "function",
                        "function": {"name": c.name, "arguments": json.dumps(c.input)},
                    }
                    for c in calls
                ]
            chat.append(entry)
            continue

        results = [b for b in blocks if isinstance(b, ToolResultBlock)]
        if any(isinstance(b, ToolUseBlock) for b in blocks):
            raise ProtocolError("User messages cannot carry tool_use blocks")
        for r in results:
            chat.append({"role": "tool", "tool_call_id": r.tool_use_id, "content": r.content})
        if text or not results:
            chat.append({"role": "user", "content": text})
    return chat


def to_chat_tools(definitions: list[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": d.name,
                "description": d.description,
                "parameters": d.input_schema,
            },
        }
        for d in definitions
    ]


def _parse_arguments(raw: Any, tool_name: str) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if raw is None or raw == "":
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        raise ProtocolError(f"Invalid JSON in arguments for tool {tool_name!r}: {raw!r}") from None
    if not isinstance(parsed, dict):
        raise ProtocolError(f"Arguments for tool {tool_name!r} must be a JSON object: {raw!r}")
    return parsed


def parse_completion(response: Any) -> ModelReply:
    """Build a ModelReply from a litellm ModelResponse.

    Raises:
        ProtocolError: If the response has no choices or malformed tool calls.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise ProtocolError("Model reply contained no choices")
    choice = choices[0]
    message = choice.message

    content: list[ContentBlock] = []
    if message.content:
        content.append(TextBlock(text=message.content))
    for tc in message.tool_calls or []:
        if not tc.id or not tc.function or not tc.function.name:
            raise ProtocolError(f"Malformed tool call in model reply: {tc!r}")
        content.append(ToolUseBlock(
            id=tc.id,
            name=tc.function.name,
            input=_parse_arguments(tc.function.arguments, tc.function.name),
        ))

    if any(isinstance(b, ToolUseBlock) for b in content):
        stop_reason = STOP_TOOL_USE
    elif choice.finish_reason == "length":
        stop_reason = STOP_MAX_TOKENS
    else:
        stop_reason = STOP_END_TURN

    usage = Usage()
    raw_usage = getattr(response, "usage", None)
    if raw_usage is not None:
        usage = Usage(
            input_tokens=getattr(raw_usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(raw_usage, "completion_tokens", 0) or 0,
        )

    return ModelReply(
        content=content,
        stop_reason=stop_reason,
        usage=usage,
        model=getattr(response, "model", "") or "",
    )


class LLMClient:
    """LiteLLM client for model communication."""

    def __init__(self, config: AgentConfig) -> None:
        self.model = config.model
        self.api_base = config.api_base
        self.api_key = config.api_key
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self.last_response = None

    @property
    def _server(self) -> str:
        return self.api_base or "provider default"

    def _handle_llm_error(self, error: Exception) -> None:
        """Convert exceptions from LiteLLM calls to ConnectionError with clear messages.

        Raises:
            ConnectionError: Always. With differentiated messages for
                authentication, timeout, connectivity, rejected requests,
                server errors and unexpected failures.
        """
        if isinstance(error, litellm.AuthenticationError):
            raise ConnectionError(
                f"Authentication failed for model {self.model}.\n\n"
                f"  Server: {self._server}\n"
                f"  Error: {error.message}\n\n"
                f"Check ANTHROPIC_API_KEY, --api-key or api_key in ~/.agentic-coder/config.yaml"
            ) from None
        if isinstance(error, litellm.Timeout):
            raise ConnectionError(
                f"Request to the model timed out.\n\n"
                f"  Server: {self._server}\n\n"
                f"The server may be overloaded or unreachable. "
                f"Check your network connection."
            ) from None
        if isinstance(error, litellm.APIConnectionError):
            raise ConnectionError(
                f"Cannot connect to the model provider.\n\n"
                f"  Server: {self._server}\n"
                f"  Error: {error.message}\n\n"
                f"Suggestions:\n"
                f"  1. Check your network/firewall settings\n"
                f"  2. Verify api_base in ~/.agentic-coder/config.yaml"
            ) from None
        if isinstance(error, litellm.BadRequestError):
            raise ConnectionError(
                f"Model rejected the request.\n\n"
                f"  Model: {self.model}\n"
                f"  Error: {error}\n\n"
                f"The model may not support tool calls or this message format."
            ) from None
        if isinstance(error, litellm.APIError):
            raise ConnectionError(
                f"Model request failed (status {error.status_code}).\n\n"
                f"  Server: {self._server}\n"
                f"  Error: {error.message}"
            ) from None
        raise ConnectionError(
            f"Unexpected error from LiteLLM.\n\n"
            f"  Server: {self._server}\n"
            f"  Error: {type(error).__name__}: {error}"
        ) from None

    def create_message(
        self,
        messages: list[Message],
        tools: list[ToolDefinition],
        system: str | None = None,
    ) -> ModelReply:
        """Send the conversation and tool schemas; return the reply as blocks.

        Raises:
            ConnectionError: On transport, authentication or provider errors.
            ProtocolError: If the reply cannot be mapped to content blocks.
        """
        chat = to_chat_messages(messages, system)
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": chat,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": 300,
        }
        if tools:
            kwargs["tools"] = to_chat_tools(tools)
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.api_key:
            kwargs["api_key"] = self.api_key

        _log.debug("Sending %d messages and %d tools to %s", len(chat), len(tools), self.model)
        self.last_response = None
        try:
            self.last_response = litellm.completion(**kwargs)
        except Exception as e:
            self._handle_llm_error(e)

        reply = parse_completion(self.last_response)
        _log.info(
            "Model replied (stop=%s, in=%d, out=%d)",
            reply.stop_reason, reply.usage.input_tokens, reply.usage.output_tokens,
        )
        return reply
