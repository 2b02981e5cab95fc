"""Agentic-Coder - LLM coding agent with confirm-before-write file tools."""

__version__ = "0.1.0"

from agentic_coder.agent import Agent, ConversationResult
from agentic_coder.config import AgentConfig, ConfigError, load_config
from agentic_coder.conversation import Conversation
from agentic_coder.errors import AgentError, IterationLimitExceeded, ProtocolError
from agentic_coder.llm import LLMClient, ModelReply, Usage
from agentic_coder.messages import Message, TextBlock, ToolResultBlock, ToolUseBlock
from agentic_coder.tools import ToolDefinition, ToolRegistry, ToolResult, build_registry
