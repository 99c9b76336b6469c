"""Unit tests for the documentation generator."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from apidocgen.core.generator import DocumentationGenerator, GenerationError
from apidocgen.core.models import GenerationOptions
from apidocgen.core.normalizer import MalformedResponseError
from apidocgen.llm.base import (
    AuthenticationError,
    LLMConfig,
    ProviderError,
    UnsupportedProviderError,
)
from apidocgen.renderers import render_documentation

CODE = "export function add(a: number, b: number): number { return a + b; }"


class TestGenerate:
    """Test DocumentationGenerator.generate."""

    @pytest.mark.asyncio
    async def test_round_trip(self, fake_provider, sample_reply: str) -> None:
        """Test that a chatty reply becomes a unit and renders as Markdown."""
        provider = fake_provider(sample_reply)
        generator = DocumentationGenerator(llm_provider=provider)

        unit = await generator.generate(CODE, "typescript", GenerationOptions(file_path="math.ts"))

        assert unit.overview == "demo"
        assert [f.name for f in unit.functions] == ["add"]
        assert "#### add" in render_documentation([unit], "markdown")

    @pytest.mark.asyncio
    async def test_single_request(self, fake_provider, sample_reply: str) -> None:
        """Test that exactly one request carrying the code is made."""
        provider = fake_provider(sample_reply)
        generator = DocumentationGenerator(llm_provider=provider)

        await generator.generate(CODE, "typescript", GenerationOptions(file_path="math.ts"))

        assert len(provider.prompts) == 1
        assert CODE in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_malformed_reply(self, fake_provider) -> None:
        """Test that an unusable reply surfaces as GenerationError."""
        generator = DocumentationGenerator(llm_provider=fake_provider("No JSON here."))

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate(CODE, "typescript", GenerationOptions(file_path="math.ts"))

        error = exc_info.value
        assert isinstance(error.cause, MalformedResponseError)
        assert error.__cause__ is error.cause
        assert error.file_path == "math.ts"

    @pytest.mark.asyncio
    async def test_provider_failure(self, fake_provider) -> None:
        """Test that a provider error is wrapped, not leaked."""
        failure = ProviderError("backend down", provider="openai")
        generator = DocumentationGenerator(llm_provider=fake_provider(failure))

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate(CODE, "typescript", GenerationOptions(file_path="math.ts"))

        assert exc_info.value.cause is failure

    @pytest.mark.asyncio
    async def test_unsupported_provider(self) -> None:
        """Test that an unknown provider fails the call without any request."""
        generator = DocumentationGenerator(llm_config=LLMConfig(provider="claude", api_key="k"))

        with patch("apidocgen.llm.openai.AsyncOpenAI") as mock_client:
            with pytest.raises(GenerationError) as exc_info:
                await generator.generate(CODE, "typescript", GenerationOptions(file_path="a.ts"))

        assert isinstance(exc_info.value.cause, UnsupportedProviderError)
        mock_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_credential(self) -> None:
        """Test that a blank hosted credential fails before any request."""
        generator = DocumentationGenerator(llm_config=LLMConfig(provider="openai", api_key=""))

        with patch("apidocgen.llm.openai.AsyncOpenAI") as mock_client:
            with pytest.raises(GenerationError) as exc_info:
                await generator.generate(CODE, "typescript", GenerationOptions(file_path="a.ts"))

        assert isinstance(exc_info.value.cause, AuthenticationError)
        mock_client.assert_not_called()

    def test_requires_provider_or_config(self) -> None:
        """Test that a generator needs something to talk to."""
        with pytest.raises(ValueError):
            DocumentationGenerator()

    @pytest.mark.asyncio
    async def test_cleared_provider_and_config(self, fake_provider, sample_reply: str) -> None:
        """Test that a generator left with nothing to talk to fails cleanly."""
        generator = DocumentationGenerator(llm_provider=fake_provider(sample_reply))
        generator.llm_provider = None

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate(CODE, "typescript", GenerationOptions(file_path="a.ts"))

        assert isinstance(exc_info.value.cause, ValueError)


class TestGenerateForFile:
    """Test generation from files on disk."""

    @pytest.mark.asyncio
    async def test_labels_unit(self, tmp_path: Path, fake_provider, sample_reply: str) -> None:
        """Test that the unit carries the file name and path."""
        source = tmp_path / "math.ts"
        source.write_text(CODE)
        provider = fake_provider(sample_reply)
        generator = DocumentationGenerator(llm_provider=provider)

        unit = await generator.generate_for_file(source)

        assert unit.file_name == "math.ts"
        assert unit.file_path == str(source)
        assert "```typescript" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_unknown_extension_uses_text(
        self, tmp_path: Path, fake_provider, sample_reply: str
    ) -> None:
        """Test the language fallback for unmapped extensions."""
        source = tmp_path / "script.lua"
        source.write_text("print('hi')")
        provider = fake_provider(sample_reply)

        await DocumentationGenerator(llm_provider=provider).generate_for_file(source)

        assert "```text" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_examples_option_forwarded(
        self, tmp_path: Path, fake_provider, sample_reply: str
    ) -> None:
        """Test that include_examples reaches the prompt."""
        source = tmp_path / "math.ts"
        source.write_text(CODE)
        provider = fake_provider(sample_reply)

        await DocumentationGenerator(llm_provider=provider).generate_for_file(
            source, include_examples=False
        )

        assert "- Skip code examples" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path, fake_provider, sample_reply: str) -> None:
        """Test that an unreadable file is a GenerationError."""
        provider = fake_provider(sample_reply)

        with pytest.raises(GenerationError) as exc_info:
            await DocumentationGenerator(llm_provider=provider).generate_for_file(
                tmp_path / "missing.ts"
            )

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert provider.prompts == []


class TestGenerateForPaths:
    """Test batch generation."""

    @pytest.fixture
    def sources(self, tmp_path: Path) -> list[Path]:
        """Create three source files; the second one triggers a bad reply."""
        paths = []
        for name, body in [("a.ts", "const a = 1;"), ("b.ts", "BROKEN"), ("c.ts", "const c = 3;")]:
            path = tmp_path / name
            path.write_text(body)
            paths.append(path)
        return paths

    @pytest.mark.asyncio
    async def test_failures_do_not_abort(
        self, sources: list[Path], fake_provider, sample_reply: str
    ) -> None:
        """Test that one failing file leaves the others documented in order."""
        provider = fake_provider(lambda prompt: "nope" if "BROKEN" in prompt else sample_reply)
        seen: list[tuple[str, bool]] = []

        report = await DocumentationGenerator(llm_provider=provider).generate_for_paths(
            sources,
            on_result=lambda path, error: seen.append((path.name, error is None)),
        )

        assert [u.file_name for u in report.units] == ["a.ts", "c.ts"]
        assert [path for path, _ in report.failures] == [str(sources[1])]
        assert isinstance(report.failures[0][1], GenerationError)
        assert report.has_failures
        assert report.total == 3
        assert sorted(seen) == [("a.ts", True), ("b.ts", False), ("c.ts", True)]

    @pytest.mark.asyncio
    async def test_concurrency_bound(self, tmp_path: Path, sample_reply: str) -> None:
        """Test that no more than max_concurrency requests run at once."""
        in_flight = 0
        peak = 0

        class SlowProvider:
            async def send(self, prompt: str) -> str:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return sample_reply

        paths = []
        for i in range(6):
            path = tmp_path / f"f{i}.py"
            path.write_text(f"x = {i}")
            paths.append(path)

        report = await DocumentationGenerator(llm_provider=SlowProvider()).generate_for_paths(
            paths, max_concurrency=2
        )

        assert len(report.units) == 6
        assert [u.file_name for u in report.units] == [p.name for p in paths]
        assert peak == 2

    @pytest.mark.asyncio
    async def test_invalid_concurrency(self, fake_provider, sample_reply: str) -> None:
        """Test that a concurrency below one is rejected."""
        generator = DocumentationGenerator(llm_provider=fake_provider(sample_reply))

        with pytest.raises(ValueError):
            await generator.generate_for_paths([], max_concurrency=0)
