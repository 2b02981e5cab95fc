"""Message and content-block protocol exchanged with the model.

A content block is a tagged union discriminated by its ``type`` field:

* ``text``        - plain text
* ``tool_use``    - the model asks for a tool invocation
* ``tool_result`` - the outcome of one invocation, answered by id

Message content is either a bare string (shorthand for a single text block)
or an explicit list of blocks; ``Message.blocks()`` normalizes both forms.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from agentic_coder.errors import ProtocolError
from agentic_coder.tools.base import ToolResult

BLOCK_TYPES = ("text", "tool_use", "tool_result")


class TextBlock(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text"] = "text"
    text: str

    def to_wire(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


class ToolUseBlock(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {"type": self.type, "id": self.id, "name": self.name, "input": self.input}


class ToolResultBlock(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: bool | None = None

    @classmethod
    def from_result(cls, tool_use_id: str, result: ToolResult) -> "ToolResultBlock":
        return cls(
            tool_use_id=tool_use_id,
            content=result.to_json(),
            is_error=True if result.is_error else None,
        )

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "type": self.type,
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }
        # false and absent serialize the same way: omitted
        if self.is_error:
            wire["is_error"] = True
        return wire


ContentBlock = Annotated[
    Union[TextBlock, ToolUseBlock, ToolResultBlock],
    Field(discriminator="type"),
]

_block_adapter: TypeAdapter = TypeAdapter(ContentBlock)


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_content_block(data: Any) -> TextBlock | ToolUseBlock | ToolResultBlock:
    """Validate one wire record into a content block.

    Raises:
        ProtocolError: If the record is not a mapping, its ``type`` is missing
            or unknown, or its fields do not match the tagged variant.
    """
    if not isinstance(data, dict):
        raise ProtocolError(f"Content block must be an object, got {type(data).__name__}")
    kind = data.get("type")
    if kind not in BLOCK_TYPES:
        raise ProtocolError(f"Unknown content block type: {kind!r}")
    try:
        return _block_adapter.validate_python(data)
    except ValidationError as e:
        raise ProtocolError(f"Invalid {kind} block: {_describe(e)}") from None


class Message(BaseModel):
    """One conversation turn."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Literal["user", "assistant"]
    content: Union[str, list[ContentBlock]]

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(role="user", content=text)

    @classmethod
    def assistant_text(cls, text: str) -> "Message":
        return cls(role="assistant", content=text)

    @classmethod
    def tool_results(cls, results: list[ToolResultBlock]) -> "Message":
        return cls(role="user", content=list(results))

    def blocks(self) -> list[TextBlock | ToolUseBlock | ToolResultBlock]:
        """Return the content as a block list, expanding the string shorthand."""
        if isinstance(self.content, str):
            return [TextBlock(text=self.content)]
        return list(self.content)

    def text(self) -> str:
        """Concatenate the text of all text blocks."""
        return "".join(b.text for b in self.blocks() if isinstance(b, TextBlock))

    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.blocks() if isinstance(b, ToolUseBlock)]

    def tool_results_blocks(self) -> list[ToolResultBlock]:
        return [b for b in self.blocks() if isinstance(b, ToolResultBlock)]

    def to_wire(self) -> dict[str, Any]:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [b.to_wire() for b in self.content]}


def parse_message(data: Any) -> Message:
    """Validate a wire message, routing each block through ``parse_content_block``.

    Raises:
        ProtocolError: On a malformed message or any malformed block.
    """
    if not isinstance(data, dict):
        raise ProtocolError(f"Message must be an object, got {type(data).__name__}")
    content = data.get("content")
    if isinstance(content, list):
        content = [parse_content_block(item) for item in content]
    try:
        return Message(role=data.get("role"), content=content)
    except ValidationError as e:
        raise ProtocolError(f"Invalid message: {_describe(e)}") from None
