"""Settings for apidocgen runs.

Values come from defaults, a TOML file, ``APIDOCGEN_*`` environment
variables and command-line flags, in increasing order of precedence. The
API key is looked up here, so providers only ever see a resolved string.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from apidocgen.llm.base import LLMConfig, LLMProviderName
from apidocgen.renderers.base import OutputFormat

CONFIG_FILE_NAME = "apidocgen.toml"
ENV_PREFIX = "APIDOCGEN_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


def _one_of(field: str, value: str, allowed: Sequence[str]) -> str:
    if value not in allowed:
        raise ValueError(f"{field} must be one of {', '.join(allowed)}, got {value!r}")
    return value


class ApiDocConfig(BaseSettings):
    """Effective settings for one apidocgen invocation.

    Attributes:
        provider: Backend identifier; unknown values are kept and rejected
            when the provider is created
        model: Model override, the backend default when unset
        api_key: The key itself, or the name of a variable that holds it
        api_key_env: Variable read when ``api_key`` is unset
        ollama_host: Base URL of the Ollama server
        ollama_model: Model requested from Ollama when ``model`` is unset
        temperature: Sampling temperature
        max_tokens: Completion token limit
        timeout: Per-request timeout in seconds
        output_format: markdown, html or json
        output_dir: Directory receiving the rendered document
        include_examples: Whether prompts ask for code examples
        exclude_patterns: Gitignore-style patterns skipped during discovery
        concurrency: Files documented at the same time
        verbose: Debug messages and per-file summaries
        quiet: Errors only
        log_level: structlog threshold
        log_format: json or console log lines
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(default=LLMProviderName.OPENAI.value, description="Completion backend")
    model: Optional[str] = Field(default=None, description="Model override")
    api_key: Optional[str] = Field(default=None, description="Key or variable name")
    api_key_env: str = Field(default="OPENAI_API_KEY", description="Fallback key variable")
    ollama_host: str = Field(default="http://localhost:11434", description="Ollama base URL")
    ollama_model: str = Field(default="llama2", description="Default Ollama model")
    temperature: float = Field(default=0.1, ge=0.0, le=1.0, description="Sampling temperature")
    max_tokens: int = Field(default=4000, gt=0, description="Completion token limit")
    timeout: Optional[float] = Field(default=None, gt=0, description="Request timeout")

    output_format: OutputFormat = Field(default=OutputFormat.MARKDOWN, description="Document format")
    output_dir: Path = Field(default=Path("docs"), description="Document directory")
    include_examples: bool = Field(default=True, description="Ask for code examples")

    exclude_patterns: list[str] = Field(default_factory=list, description="Skipped patterns")
    concurrency: int = Field(default=1, ge=1, le=32, description="Parallel files")

    verbose: bool = Field(default=False, description="Debug output")
    quiet: bool = Field(default=False, description="Errors only")
    log_level: str = Field(default="INFO", description="structlog threshold")
    log_format: str = Field(default="console", description="json or console")

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("output_format", mode="before")
    @classmethod
    def check_output_format(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _one_of("output_format", v.strip().lower(), [f.value for f in OutputFormat])
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        return _one_of("log_level", v.upper(), LOG_LEVELS)

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        return _one_of("log_format", v.lower(), LOG_FORMATS)

    def to_llm_config(self) -> LLMConfig:
        """Convert to LLMConfig with a resolved credential.

        Returns:
            LLMConfig instance
        """
        if self.provider == LLMProviderName.OLLAMA.value:
            return LLMConfig(
                provider=self.provider,
                model=self.model or self.ollama_model,
                base_url=self.ollama_host,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )

        return LLMConfig(
            provider=self.provider,
            model=self.model,
            api_key=resolve_api_key(self.api_key, self.api_key_env),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
        )


def resolve_api_key(api_key: Optional[str], api_key_env: Optional[str] = None) -> str:
    """Resolve the credential to hand to a provider.

    ``api_key`` may hold the key itself or the name of an environment
    variable that holds it. When it is empty, the variable named by
    ``api_key_env`` is consulted.

    Args:
        api_key: Configured key or variable name
        api_key_env: Fallback environment variable name

    Returns:
        Resolved key, or an empty string if none is available
    """
    value = (api_key or "").strip()
    if value:
        return os.environ.get(value) or value

    if api_key_env:
        return os.environ.get(api_key_env, "").strip()

    return ""


def load_config(
    config_path: Path | None = None,
    **overrides: Any,
) -> ApiDocConfig:
    """Build the effective settings.

    Args:
        config_path: Explicit TOML file; discovered with
            :func:`find_config_file` when omitted
        **overrides: Command-line values; ``None`` means "not given"

    Returns:
        Validated settings

    Raises:
        FileNotFoundError: If ``config_path`` does not exist
        ValueError: If the file is not valid TOML or a value is rejected
    """
    source = config_path if config_path is not None else find_config_file()
    from_file = load_config_file(source) if source is not None else {}

    # pydantic-settings ranks init kwargs above the environment, so file
    # values shadowed by an APIDOCGEN_ variable are dropped here.
    env_keys = {key.upper() for key in os.environ}
    from_file = {k: v for k, v in from_file.items() if f"{ENV_PREFIX}{k}".upper() not in env_keys}

    given = {k: v for k, v in overrides.items() if v is not None}
    return ApiDocConfig(**{**from_file, **given})


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def find_config_file() -> Path | None:
    """Locate the settings file for the current directory.

    Candidates, first match wins: ``./apidocgen.toml``, ``./pyproject.toml``
    when it has a ``[tool.apidocgen]`` table, then
    ``~/.config/apidocgen/config.toml``.

    Returns:
        The file to load, or None
    """
    local = Path.cwd() / CONFIG_FILE_NAME
    if local.is_file():
        return local

    pyproject = Path.cwd() / "pyproject.toml"
    if pyproject.is_file():
        try:
            if "apidocgen" in _read_toml(pyproject).get("tool", {}):
                return pyproject
        except (OSError, tomllib.TOMLDecodeError):
            pass

    user = Path.home() / ".config" / "apidocgen" / "config.toml"
    return user if user.is_file() else None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Read the apidocgen table of a TOML file.

    ``pyproject.toml`` is read from ``[tool.apidocgen]``; other files from
    ``[apidocgen]``, or their top level when that table is absent.

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the file is not valid TOML
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        data = _read_toml(config_path)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        return dict(data.get("tool", {}).get("apidocgen", {}))
    return dict(data.get("apidocgen", data))


def create_default_config(output_path: Path) -> None:
    """Write a commented settings template.

    Raises:
        FileExistsError: If ``output_path`` is already present
    """
    if output_path.exists():
        raise FileExistsError(f"Config file already exists: {output_path}")

    default_config = """# apidocgen configuration

[apidocgen]
# LLM provider: openai or ollama
provider = "openai"

# Model name; leave unset for the provider default (gpt-4 / llama2)
# model = "gpt-4"

# API key for the hosted provider. Either the key itself or the name of an
# environment variable holding it. Leave unset to read api_key_env.
# api_key = "OPENAI_API_KEY"
api_key_env = "OPENAI_API_KEY"

# Local inference (provider = "ollama")
ollama_host = "http://localhost:11434"
ollama_model = "llama2"

temperature = 0.1
max_tokens = 4000
# timeout = 120

# Output: markdown, html or json
output_format = "markdown"
output_dir = "docs"
include_examples = true

# Extra gitignore-style patterns to skip (dot directories and
# node_modules are always skipped)
exclude_patterns = []

# Files documented at the same time
concurrency = 1

# Logging
verbose = false
quiet = false
log_level = "INFO"
log_format = "console"
"""

    output_path.write_text(default_config, encoding="utf-8")
