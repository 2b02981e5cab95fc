"""Tests for CLI entry point."""

from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner
from conftest import ScriptedLLM, make_file, text_reply, tool_reply

from agentic_coder import __version__
from agentic_coder.agent import ConversationResult
from agentic_coder.cli import main
from agentic_coder.conversation import Conversation
from agentic_coder.errors import IterationLimitExceeded
from agentic_coder.llm import Usage


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    """Keep the real ~/.agentic-coder/config.yaml out of CLI tests."""
    monkeypatch.setattr("agentic_coder.config.DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture()
def mock_llm_client():
    """Mock LLMClient to prevent real network calls in CLI tests."""
    with patch("agentic_coder.cli.LLMClient") as mock_cls:
        yield mock_cls


@pytest.fixture()
def mock_agent():
    with patch("agentic_coder.cli.Agent") as mock_cls:
        mock_cls.return_value.run.return_value = ConversationResult(
            reply=text_reply("All done."),
            conversation=Conversation(),
            iterations=2,
            usage=Usage(120, 45),
        )
        yield mock_cls


class TestCliBasics:
    """Version and argument handling."""

    def test_version(self):
        """--version prints the package version."""
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_message_required(self):
        """MESSAGE is a required argument."""
        result = CliRunner().invoke(main, [])
        assert result.exit_code != 0
        assert "MESSAGE" in result.output


class TestCliRun:
    """Successful runs through the CLI."""

    def test_prints_response_and_metadata(self, mock_llm_client, mock_agent):
        """The final reply and the metadata footer are printed."""
        result = CliRunner().invoke(main, ["say hi"])
        assert result.exit_code == 0, result.output
        mock_agent.return_value.run.assert_called_once_with("say hi")
        assert "--- Response ---" in result.output
        assert "All done." in result.output
        assert "Iterations: 2" in result.output
        assert "Input tokens: 120" in result.output
        assert "Output tokens: 45" in result.output

    def test_cli_flags_override_config(self, tmp_path, mock_llm_client, mock_agent):
        """Command-line flags win over values from the config file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"model": "anthropic/claude-haiku-4-5", "max_tokens": 512}))
        result = CliRunner().invoke(main, [
            "hi", "--config", str(config_file), "--max-tokens", "2048", "--max-iterations", "7",
        ])
        assert result.exit_code == 0, result.output
        config = mock_llm_client.call_args[0][0]
        assert config.model == "anthropic/claude-haiku-4-5"
        assert config.max_tokens == 2048
        assert mock_agent.call_args.kwargs["max_iterations"] == 7

    def test_api_key_from_environment(self, mock_llm_client, mock_agent):
        """ANTHROPIC_API_KEY supplies the API key."""
        result = CliRunner().invoke(main, ["hi"], env={"ANTHROPIC_API_KEY": "sk-env-key"})
        assert result.exit_code == 0, result.output
        assert mock_llm_client.call_args[0][0].api_key == "sk-env-key"

    def test_parallel_flag(self, mock_llm_client, mock_agent):
        """--parallel-tools enables parallel dispatch."""
        CliRunner().invoke(main, ["hi", "--parallel-tools"])
        assert mock_agent.call_args.kwargs["parallel_tools"] is True

    def test_system_prompt_passed(self, mock_llm_client, mock_agent):
        """The agent receives the default system prompt."""
        CliRunner().invoke(main, ["hi"])
        assert "readFile" in mock_agent.call_args.kwargs["system_prompt"]


class TestCliErrors:
    """Failures and exit codes."""

    def test_missing_config_file(self, tmp_path):
        """A missing --config file exits with status 1."""
        result = CliRunner().invoke(main, ["hi", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_invalid_override(self):
        """An invalid flag value exits with status 1."""
        result = CliRunner().invoke(main, ["hi", "--max-tokens", "0"])
        assert result.exit_code == 1
        assert "Invalid CLI override" in result.output

    def test_connection_error(self, mock_llm_client, mock_agent):
        """Provider errors are printed and exit with status 1."""
        mock_agent.return_value.run.side_effect = ConnectionError("Cannot connect to the model provider.")
        result = CliRunner().invoke(main, ["hi"])
        assert result.exit_code == 1
        assert "Error: Cannot connect to the model provider." in result.output

    def test_iteration_limit(self, mock_llm_client, mock_agent):
        """Hitting the iteration limit exits with status 1."""
        mock_agent.return_value.run.side_effect = IterationLimitExceeded(3)
        result = CliRunner().invoke(main, ["hi"])
        assert result.exit_code == 1
        assert "Max iterations (3) reached without final response" in result.output

    def test_keyboard_interrupt(self, mock_llm_client, mock_agent):
        """Ctrl-C exits with status 130."""
        mock_agent.return_value.run.side_effect = KeyboardInterrupt
        result = CliRunner().invoke(main, ["hi"])
        assert result.exit_code == 130


class TestCliEndToEnd:
    """Confirmation prompts answered on stdin."""

    def test_write_confirmed_on_stdin(self, tmp_path, mock_llm_client):
        """Answering y creates the file."""
        workspace = tmp_path / "ws"
        workspace.mkdir()
        mock_llm_client.return_value = ScriptedLLM(
            tool_reply(("w1", "writeFile", {"path": "notes.txt", "content": "remember\n"})),
            text_reply("Created notes.txt."),
        )
        result = CliRunner().invoke(main, ["make notes", "--workspace", str(workspace)], input="y\n")
        assert result.exit_code == 0, result.output
        assert (workspace / "notes.txt").read_text() == "remember\n"
        assert "Created notes.txt." in result.output

    def test_edit_denied_on_stdin(self, tmp_path, mock_llm_client):
        """Answering n leaves the file alone and reports the cancellation."""
        workspace = tmp_path / "ws"
        target = make_file(workspace, "a.txt", "keep\n")
        mock_llm_client.return_value = ScriptedLLM(
            tool_reply(("e1", "editFile", {"path": "a.txt", "new_content": "gone\n"})),
            text_reply("Left it alone."),
        )
        result = CliRunner().invoke(main, ["edit a.txt", "--workspace", str(workspace)], input="n\n")
        assert result.exit_code == 0, result.output
        assert target.read_text() == "keep\n"
        assert "Cancelled by user" in result.output

    def test_no_stdin_denies(self, tmp_path, mock_llm_client):
        """End of input counts as a denial."""
        workspace = tmp_path / "ws"
        workspace.mkdir()
        mock_llm_client.return_value = ScriptedLLM(
            tool_reply(("w1", "writeFile", {"path": "x.txt", "content": "x"})),
            text_reply("ok"),
        )
        result = CliRunner().invoke(main, ["write", "--workspace", str(workspace)], input="")
        assert result.exit_code == 0, result.output
        assert not (workspace / "x.txt").exists()


def test_mock_agent_result_is_rendered_as_markdown(mock_llm_client):
    """The reply text and metadata are handed to the renderer."""
    with patch("agentic_coder.cli.Agent") as agent_cls, patch("agentic_coder.cli.Renderer") as renderer_cls:
        agent_cls.return_value.run.return_value = MagicMock(iterations=1, usage=Usage(1, 1))
        agent_cls.return_value.run.return_value.reply.text.return_value = "**bold**"
        result = CliRunner().invoke(main, ["hi"])
    assert result.exit_code == 0, result.output
    renderer_cls.return_value.render_response.assert_called_once_with("**bold**")
    renderer_cls.return_value.render_metadata.assert_called_once_with(1, 1, 1)
