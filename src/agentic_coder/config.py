"""Configuration management - Pydantic model with YAML loading and CLI overrides."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_CONFIG_DIR = Path.home() / ".agentic-coder"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

DEFAULT_MODEL = "anthropic/claude-sonnet-4-5"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


class AgentConfig(BaseModel):
    """Agent configuration with validation."""

    model_config = ConfigDict(extra="forbid")

    model: str = DEFAULT_MODEL
    api_base: str | None = None
    api_key: str | None = None

    max_tokens: int = Field(default=1024, gt=0)
    max_iterations: int = Field(default=10, gt=0)
    temperature: float = 0.0

    workspace_root: str | None = None
    parallel_tools: bool = False

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("Must start with http:// or https://")
        return v.rstrip("/")

    def __repr__(self) -> str:
        api_key_display = "***" if self.api_key else "None"
        return (
            f"AgentConfig(model={self.model!r}, "
            f"api_base={self.api_base!r}, "
            f"api_key={api_key_display!r}, "
            f"max_tokens={self.max_tokens!r}, "
            f"max_iterations={self.max_iterations!r}, "
            f"temperature={self.temperature!r})"
        )

    def __str__(self) -> str:
        return self.__repr__()


def _format_errors(e: ValidationError) -> str:
    errors = []
    for err in e.errors():
        field = ".".join(str(loc) for loc in err["loc"])
        errors.append(f"  - {field}: {err['msg']}")
    return "\n".join(errors)


def load_config(config_path: Path | None = None) -> AgentConfig:
    """Load and validate config from YAML file.

    Args:
        config_path: Path to config file. Defaults to ~/.agentic-coder/config.yaml.

    Returns:
        Validated AgentConfig instance. A missing default file yields defaults.

    Raises:
        ConfigError: If an explicit file is missing, or the file is not a
            YAML mapping or contains invalid values.
    """
    path = config_path or DEFAULT_CONFIG_FILE

    if not path.exists():
        if config_path is None:
            return AgentConfig()
        raise ConfigError(f"Configuration file not found: {path}")

    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}\n\n  {e}") from None

    if data is None:
        return AgentConfig()

    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid configuration in {path}\n\n"
            f"  Config file is not a YAML mapping.\n\n"
            f"Example:\n"
            f"  model: {DEFAULT_MODEL}\n"
            f"  max_tokens: 1024\n"
            f"  max_iterations: 10"
        )

    try:
        return AgentConfig(**data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {path}\n\n{_format_errors(e)}"
        ) from None


def apply_cli_overrides(config: AgentConfig, **overrides) -> AgentConfig:
    """Apply CLI flag overrides to config. Returns a new AgentConfig instance.

    Keyword arguments left as None are ignored.
    Override precedence: Defaults → YAML → CLI flags.
    """
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config

    try:
        return AgentConfig.model_validate(config.model_dump() | updates)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid CLI override:\n\n{_format_errors(e)}"
        ) from None
