"""Agentic-Coder CLI entry point."""

import logging
import sys
from pathlib import Path

import click
import litellm

from agentic_coder import __version__
from agentic_coder.agent import Agent
from agentic_coder.config import ConfigError, apply_cli_overrides, load_config
from agentic_coder.errors import AgentError
from agentic_coder.llm import LLMClient
from agentic_coder.permissions import TerminalConfirmer
from agentic_coder.renderer import Renderer
from agentic_coder.system_prompt import SYSTEM_PROMPT
from agentic_coder.tools import build_registry

litellm.suppress_debug_info = True

_log = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        logging.getLogger("LiteLLM").setLevel(logging.WARNING)


@click.command()
@click.argument("message")
@click.option("--api-key", envvar="ANTHROPIC_API_KEY", default=None, help="Provider API key (or set ANTHROPIC_API_KEY)")
@click.option("--model", "-m", default=None, help="Model to use (e.g., anthropic/claude-sonnet-4-5)")
@click.option("--api-base", default=None, help="Override the provider API base URL")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens to generate per reply")
@click.option("--max-iterations", type=int, default=None, help="Maximum tool use iterations")
@click.option("--workspace", type=click.Path(exists=True, file_okay=False), default=None,
              help="Directory relative tool paths resolve against (default: cwd)")
@click.option("--parallel-tools", is_flag=True, help="Run read-only tool batches in parallel")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Config file (default: ~/.agentic-coder/config.yaml)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.version_option(__version__, prog_name="agentic-coder")
def main(
    message: str,
    api_key: str | None,
    model: str | None,
    api_base: str | None,
    max_tokens: int | None,
    max_iterations: int | None,
    workspace: str | None,
    parallel_tools: bool,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Send MESSAGE to the model and let it work on the files in the workspace."""
    _setup_logging(verbose)

    try:
        config = load_config(config_path)
        config = apply_cli_overrides(
            config,
            api_key=api_key,
            model=model,
            api_base=api_base,
            max_tokens=max_tokens,
            max_iterations=max_iterations,
            workspace_root=workspace,
            parallel_tools=True if parallel_tools else None,
        )
    except ConfigError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    _log.info("Using %r", config)

    renderer = Renderer()
    registry = build_registry(
        confirm=TerminalConfirmer(renderer),
        workspace_root=config.workspace_root,
        preview=renderer.render_diff_preview,
    )
    _log.info("Registered tools: %s", ", ".join(registry.names()))

    agent = Agent(
        LLMClient(config),
        registry,
        max_iterations=config.max_iterations,
        system_prompt=SYSTEM_PROMPT,
        renderer=renderer,
        parallel_tools=config.parallel_tools,
    )

    try:
        result = agent.run(message)
    except KeyboardInterrupt:
        renderer.print_warning("\nInterrupted.")
        sys.exit(130)
    except (ConnectionError, AgentError) as e:
        renderer.print_error(f"Error: {e}")
        sys.exit(1)

    renderer.render_response(result.reply.text())
    renderer.render_metadata(
        result.iterations,
        result.usage.input_tokens,
        result.usage.output_tokens,
    )


if __name__ == "__main__":
    main()
