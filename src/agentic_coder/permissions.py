"""Operator confirmation for file mutations."""

from __future__ import annotations

import logging
import threading
from typing import Callable

_log = logging.getLogger(__name__)

# confirm(prompt) -> True only when the operator approved
Confirm = Callable[[str], bool]


def is_affirmative(response: str) -> bool:
    """Only "y" or "Y" approves; anything else, including empty input, denies."""
    return response.strip().lower() == "y"


class TerminalConfirmer:
    """Ask the operator on the terminal before a tool mutates a file."""

    def __init__(self, renderer=None, input_func: Callable[[str], str] = input) -> None:
        """Initialize the confirmer.

        Args:
            renderer: Optional renderer used to highlight the prompt
            input_func: Reads one line after writing a prompt (default: input)
        """
        self.renderer = renderer
        self._input = input_func
        # one prompt at a time on a shared terminal
        self._lock = threading.Lock()

    def __call__(self, prompt: str) -> bool:
        with self._lock:
            if self.renderer:
                self.renderer.print_warning(f"\n{prompt}")
                prompt_text = "Proceed? [y/N]: "
            else:
                prompt_text = f"\n{prompt} [y/N]: "
            try:
                response = self._input(prompt_text)
            except EOFError:
                _log.warning("No input available for confirmation; treating as denial")
                return False
            except OSError as e:
                _log.warning("Could not read confirmation: %s", e)
                return False
        return is_affirmative(response)
