"""Errors that abort an agent run."""


class AgentError(Exception):
    """Base class for failures that end a run (not fed back to the model)."""


class ProtocolError(AgentError):
    """Raised when a message or model reply does not follow the block protocol."""


class IterationLimitExceeded(AgentError):
    """Raised when the loop runs out of iterations without a final reply."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(
            f"Max iterations ({max_iterations}) reached without final response"
        )
