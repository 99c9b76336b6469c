"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from apidocgen.renderers.base import OutputFormat
from apidocgen.utils.config import (
    ApiDocConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_file,
    resolve_api_key,
)


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self) -> None:
        """Test the out-of-the-box settings."""
        config = ApiDocConfig()

        assert config.provider == "openai"
        assert config.model is None
        assert config.api_key_env == "OPENAI_API_KEY"
        assert config.ollama_host == "http://localhost:11434"
        assert config.ollama_model == "llama2"
        assert config.temperature == 0.1
        assert config.max_tokens == 4000
        assert config.output_format == OutputFormat.MARKDOWN
        assert config.output_dir == Path("docs")
        assert config.include_examples is True
        assert config.concurrency == 1

    def test_validators_normalize(self) -> None:
        """Test case normalization of enumerated settings."""
        config = ApiDocConfig(provider=" Ollama ", output_format="HTML", log_level="debug")

        assert config.provider == "ollama"
        assert config.output_format == OutputFormat.HTML
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field,value",
        [("output_format", "pdf"), ("log_level", "LOUD"), ("log_format", "xml"), ("concurrency", 0)],
    )
    def test_invalid_values(self, field: str, value) -> None:
        """Test that invalid settings are rejected."""
        with pytest.raises(ValidationError):
            ApiDocConfig(**{field: value})

    def test_unknown_provider_kept(self) -> None:
        """Test that an unknown provider is left for the factory to reject."""
        assert ApiDocConfig(provider="claude").provider == "claude"


class TestResolveApiKey:
    """Test credential resolution."""

    def test_literal_key(self) -> None:
        """Test that a literal key is used as-is."""
        assert resolve_api_key("sk-literal") == "sk-literal"

    def test_fallback_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the fallback variable is read when no key is set."""
        monkeypatch.setenv("MY_KEY", "sk-env")

        assert resolve_api_key(None, "MY_KEY") == "sk-env"
        assert resolve_api_key("  ", "MY_KEY") == "sk-env"

    def test_key_names_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a key naming a set variable resolves to its value."""
        monkeypatch.setenv("TEAM_OPENAI_KEY", "sk-team")

        assert resolve_api_key("TEAM_OPENAI_KEY", "OPENAI_API_KEY") == "sk-team"

    def test_nothing_available(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a missing credential resolves to an empty string."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        assert resolve_api_key(None, "OPENAI_API_KEY") == ""


class TestToLLMConfig:
    """Test conversion to provider configuration."""

    def test_openai(self) -> None:
        """Test that the environment credential is resolved."""
        llm_config = ApiDocConfig().to_llm_config()

        assert llm_config.provider == "openai"
        assert llm_config.api_key == "test-key-12345"
        assert llm_config.model is None

    def test_ollama(self) -> None:
        """Test that Ollama settings map to host and model."""
        config = ApiDocConfig(provider="ollama", ollama_host="http://gpu:11434", ollama_model="mistral")

        llm_config = config.to_llm_config()

        assert llm_config.base_url == "http://gpu:11434"
        assert llm_config.model == "mistral"
        assert llm_config.api_key is None

    def test_ollama_explicit_model_wins(self) -> None:
        """Test that the generic model setting overrides the Ollama default."""
        config = ApiDocConfig(provider="ollama", model="codellama")

        assert config.to_llm_config().model == "codellama"


class TestConfigFiles:
    """Test file discovery and precedence."""

    def test_find_dedicated_file(self, isolated_env: Path) -> None:
        """Test that apidocgen.toml in the working directory is found."""
        (isolated_env / "apidocgen.toml").write_text('[apidocgen]\nprovider = "ollama"\n')

        assert find_config_file() == isolated_env / "apidocgen.toml"

    def test_pyproject_requires_section(self, isolated_env: Path) -> None:
        """Test that pyproject.toml only counts with a tool.apidocgen table."""
        pyproject = isolated_env / "pyproject.toml"
        pyproject.write_text('[project]\nname = "x"\n')
        assert find_config_file() is None

        pyproject.write_text('[tool.apidocgen]\noutput_format = "html"\n')
        assert find_config_file() == pyproject
        assert load_config_file(pyproject) == {"output_format": "html"}

    def test_no_config_file(self) -> None:
        """Test that defaults apply without any file."""
        assert find_config_file() is None
        assert load_config().provider == "openai"

    def test_precedence(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults < file < environment < overrides."""
        config_path = isolated_env / "apidocgen.toml"
        config_path.write_text(
            '[apidocgen]\nprovider = "ollama"\nmax_tokens = 1000\noutput_format = "html"\n'
        )
        monkeypatch.setenv("APIDOCGEN_MAX_TOKENS", "2000")

        config = load_config(config_path, output_format="json", model=None)

        assert config.provider == "ollama"
        assert config.max_tokens == 2000
        assert config.output_format == OutputFormat.JSON

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """Test that a missing explicit config file is an error."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test that broken TOML is reported as ValueError."""
        config_path = tmp_path / "apidocgen.toml"
        config_path.write_text("[apidocgen\n")

        with pytest.raises(ValueError, match="Invalid config file"):
            load_config_file(config_path)


class TestCreateDefaultConfig:
    """Test the generated config template."""

    def test_template_loads(self, tmp_path: Path) -> None:
        """Test that the template is valid and matches the defaults."""
        config_path = tmp_path / "apidocgen.toml"
        create_default_config(config_path)

        config = load_config(config_path)

        assert config.provider == "openai"
        assert config.output_dir == Path("docs")
        assert config.exclude_patterns == []

    def test_refuses_overwrite(self, tmp_path: Path) -> None:
        """Test that an existing file is not overwritten."""
        config_path = tmp_path / "apidocgen.toml"
        config_path.write_text("keep me")

        with pytest.raises(FileExistsError):
            create_default_config(config_path)

        assert config_path.read_text() == "keep me"
