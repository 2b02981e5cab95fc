"""Agent - tool-use loop orchestrator."""

from __future__ import annotations

import contextlib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial

from agentic_coder.conversation import Conversation
from agentic_coder.errors import IterationLimitExceeded, ProtocolError
from agentic_coder.llm import ModelReply, Usage
from agentic_coder.messages import ToolResultBlock, ToolUseBlock
from agentic_coder.tools.registry import ToolRegistry

_log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass
class ConversationResult:
    """Outcome of a successful run."""

    reply: ModelReply
    conversation: Conversation
    iterations: int
    usage: Usage = field(default_factory=Usage)


class Agent:
    """Drive model calls and tool dispatch until the model ends its turn."""

    def __init__(
        self,
        llm_client,
        registry: ToolRegistry,
        max_iterations: int = 10,
        system_prompt: str | None = None,
        renderer=None,
        parallel_tools: bool = False,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Initialize the agent.

        Args:
            llm_client: Object with create_message(messages, tools, system) -> ModelReply
            registry: Tools advertised to the model and used for dispatch
            max_iterations: Maximum number of model calls in one run
            system_prompt: Optional system text sent with every call
            renderer: Renderer for tool progress output (optional)
            parallel_tools: Run read-only tool batches on a thread pool
            max_workers: Thread pool size for parallel batches
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.llm_client = llm_client
        self.registry = registry
        self.max_iterations = max_iterations
        self.system_prompt = system_prompt
        self.renderer = renderer
        self.parallel_tools = parallel_tools
        self.max_workers = max_workers

    def run(self, prompt: str) -> ConversationResult:
        """Run the loop for one user prompt.

        Args:
            prompt: The user's request

        Returns:
            The final reply, the full conversation and the number of model calls.

        Raises:
            IterationLimitExceeded: If no final reply arrives within max_iterations.
            ProtocolError: If a reply breaks the block protocol.
            ConnectionError: If the model call fails.
        """
        conversation = Conversation()
        conversation.add_user_text(prompt)
        definitions = self.registry.advertised_definitions()
        usage = Usage()

        for iteration in range(1, self.max_iterations + 1):
            _log.info("Iteration %d/%d", iteration, self.max_iterations)

            reply = self.llm_client.create_message(
                conversation.get_messages(),
                definitions,
                system=self.system_prompt,
            )
            conversation.add_assistant(reply.content)
            usage.input_tokens += reply.usage.input_tokens
            usage.output_tokens += reply.usage.output_tokens

            if not reply.wants_tools:
                _log.info(
                    "Conversation completed in %d iterations (%d messages)", iteration, len(conversation),
                )
                return ConversationResult(
                    reply=reply, conversation=conversation, iterations=iteration, usage=usage,
                )

            invocations = reply.tool_uses()
            if not invocations:
                raise ProtocolError("Model requested tool use but sent no tool_use blocks")

            results = self._execute_tools(invocations)
            conversation.add_tool_results(results)
            if self.renderer:
                self.renderer.render_separator()

        raise IterationLimitExceeded(self.max_iterations)

    def _can_parallelize(self, invocations: list[ToolUseBlock]) -> bool:
        # confirmation prompts share one terminal, so any mutating tool serializes the batch
        return (
            self.parallel_tools
            and len(invocations) > 1
            and all(b.name in self.registry and not self.registry.is_mutating(b.name) for b in invocations)
        )

    def _execute_tools(self, invocations: list[ToolUseBlock]) -> list[ToolResultBlock]:
        """Dispatch every invocation; results come back in invocation order."""
        if self._can_parallelize(invocations):
            _log.info("Executing %d tools in parallel", len(invocations))
            workers = min(len(invocations), self.max_workers)
            # rich allows one live display at a time, so the batch shares a spinner
            spinner = (
                self.renderer.status_spinner(f"Running {len(invocations)} tools...")
                if self.renderer else contextlib.nullcontext()
            )
            with spinner, ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(partial(self._execute_one, spin=False), invocations))

        _log.info("Executing %d tools", len(invocations))
        return [self._execute_one(b) for b in invocations]

    def _execute_one(self, invocation: ToolUseBlock, spin: bool = True) -> ToolResultBlock:
        _log.info("Executing tool: %s", invocation.name)
        _log.debug("Tool input for %s: %r", invocation.id, invocation.input)

        if self.renderer:
            self.renderer.render_tool_panel(invocation.name, invocation.input)

        if spin and self.renderer and not self.registry.is_mutating(invocation.name):
            with self.renderer.status_spinner(f"Running {invocation.name}..."):
                result = self.registry.dispatch(invocation.name, invocation.input)
        else:
            result = self.registry.dispatch(invocation.name, invocation.input)

        if result.is_error:
            _log.warning("Tool %s failed: %s", invocation.name, result.error)
        if self.renderer:
            self.renderer.render_tool_outcome(invocation.name, result.error)

        return ToolResultBlock.from_result(invocation.id, result)
