"""Documentation generation orchestrator.

This module coordinates one generation call end to end: prompt building,
a single provider round trip, and normalization of the reply into a
:class:`~apidocgen.core.models.DocumentationUnit`. Every failure along the
way surfaces as :class:`GenerationError`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field

from apidocgen.core.models import DocumentationUnit, GenerationOptions
from apidocgen.core.normalizer import ResponseNormalizer
from apidocgen.core.prompt import PromptBuilder
from apidocgen.llm.base import LLMConfig, create_provider
from apidocgen.utils.file_ops import language_for_path

logger = structlog.get_logger(__name__)


class TextProvider(Protocol):
    """Protocol for LLM providers.

    Anything that can turn a prompt into raw reply text can drive the
    generator.
    """

    async def send(self, prompt: str) -> str:
        """Send a prompt and return the raw reply text.

        Args:
            prompt: Prompt text

        Returns:
            Reply text
        """
        ...


class GenerationError(Exception):
    """Exception raised when documentation for a source unit cannot be produced.

    Attributes:
        cause: The exception raised by the failing stage
        file_path: Locator of the source being documented
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        file_path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.file_path = file_path


class GenerationReport(BaseModel):
    """Outcome of generating documentation for several files.

    Attributes:
        units: Successfully generated units, in input order
        failures: Failed files paired with their errors, in input order
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    units: list[DocumentationUnit] = Field(default_factory=list)
    failures: list[tuple[str, GenerationError]] = Field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """Check if any file failed."""
        return bool(self.failures)

    @property
    def total(self) -> int:
        """Number of files attempted."""
        return len(self.units) + len(self.failures)


ResultCallback = Callable[[Path, Optional[GenerationError]], None]


class DocumentationGenerator:
    """Orchestrates documentation generation.

    The generator keeps no per-call state, so concurrent calls are safe.
    The provider is either injected or created from ``llm_config`` on the
    first call; an unsupported provider identifier is therefore reported as
    a :class:`GenerationError` wrapping
    :class:`~apidocgen.llm.base.UnsupportedProviderError`.

    Attributes:
        llm_provider: Provider used to obtain reply text
        llm_config: Configuration used to build the provider when not injected
        prompt_builder: Builds the instruction text
        normalizer: Turns reply text into documentation units
    """

    def __init__(
        self,
        llm_provider: Optional[TextProvider] = None,
        llm_config: Optional[LLMConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        normalizer: Optional[ResponseNormalizer] = None,
    ) -> None:
        """Initialize the documentation generator.

        Args:
            llm_provider: Provider instance
            llm_config: Provider configuration, used when no instance is given
            prompt_builder: Prompt builder (default instance if not provided)
            normalizer: Response normalizer (default instance if not provided)

        Raises:
            ValueError: If neither a provider nor a configuration is given
        """
        if llm_provider is None and llm_config is None:
            raise ValueError("Either an LLM provider or an LLM configuration is required")

        self.llm_provider = llm_provider
        self.llm_config = llm_config
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.normalizer = normalizer or ResponseNormalizer()
        self._log = logger.bind(component="generator")

    async def generate(
        self,
        code: str,
        language: str,
        options: GenerationOptions,
    ) -> DocumentationUnit:
        """Generate documentation for one piece of source code.

        Exactly one provider request is made. No partial result is ever
        returned.

        Args:
            code: Source text, passed to the model verbatim
            language: Language label of the source
            options: Generation options

        Returns:
            Normalized documentation unit (without source labels)

        Raises:
            GenerationError: If any stage fails; ``cause`` holds the original
        """
        log = self._log.bind(file=options.file_path, language=language)

        try:
            prompt = self.prompt_builder.build(code, language, options)
            log.debug("prompt_built", prompt_chars=len(prompt))

            provider = self._get_provider()
            reply = await provider.send(prompt)
            log.debug("reply_received", reply_chars=len(reply))

            unit = self.normalizer.normalize(reply)

        except Exception as e:
            log.error("generation_failed", error=str(e), error_type=type(e).__name__)
            raise GenerationError(
                f"Failed to generate documentation for {options.file_path}: {e}",
                cause=e,
                file_path=options.file_path,
            ) from e

        log.info(
            "generation_complete",
            functions=len(unit.functions),
            classes=len(unit.classes),
        )
        return unit

    async def generate_for_file(
        self,
        file_path: str | Path,
        include_examples: bool = True,
    ) -> DocumentationUnit:
        """Generate documentation for a source file.

        Args:
            file_path: Path to the source file
            include_examples: Ask the model for code examples

        Returns:
            Documentation unit labeled with the file's name and path

        Raises:
            GenerationError: If the file cannot be read or generation fails
        """
        file_path = Path(file_path)

        try:
            code = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._log.error("file_read_failed", file=str(file_path), error=str(e))
            raise GenerationError(
                f"Failed to read {file_path}: {e}",
                cause=e,
                file_path=str(file_path),
            ) from e

        options = GenerationOptions(
            include_examples=include_examples,
            file_path=str(file_path),
        )
        unit = await self.generate(code, language_for_path(file_path), options)
        return unit.with_source(file_path)

    async def generate_for_paths(
        self,
        file_paths: Sequence[str | Path],
        include_examples: bool = True,
        max_concurrency: int = 1,
        on_result: Optional[ResultCallback] = None,
    ) -> GenerationReport:
        """Generate documentation for several files.

        A failing file never aborts the batch. At most ``max_concurrency``
        requests are in flight at a time; results keep the input order.

        Args:
            file_paths: Source files to document
            include_examples: Ask the model for code examples
            max_concurrency: Maximum number of concurrent requests
            on_result: Called with each path and its error (None on success)

        Returns:
            Report with the generated units and the failures
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        semaphore = asyncio.Semaphore(max_concurrency)

        async def run(path: Path) -> DocumentationUnit | GenerationError:
            async with semaphore:
                try:
                    result: DocumentationUnit | GenerationError = (
                        await self.generate_for_file(path, include_examples)
                    )
                except GenerationError as e:
                    result = e
            if on_result:
                on_result(path, result if isinstance(result, GenerationError) else None)
            return result

        paths = [Path(p) for p in file_paths]
        self._log.info("generating_for_paths", files=len(paths), concurrency=max_concurrency)

        results = await asyncio.gather(*(run(path) for path in paths))

        report = GenerationReport()
        for path, result in zip(paths, results):
            if isinstance(result, GenerationError):
                report.failures.append((str(path), result))
            else:
                report.units.append(result)

        self._log.info(
            "paths_generation_complete",
            generated=len(report.units),
            failed=len(report.failures),
        )
        return report

    def _get_provider(self) -> TextProvider:
        """Return the provider, creating it from configuration if needed.

        Raises:
            ValueError: If both the provider and its configuration were cleared
        """
        if self.llm_provider is None:
            if self.llm_config is None:
                raise ValueError("No LLM provider or LLM configuration to create one from")
            self.llm_provider = create_provider(self.llm_config)
            self._log.info("llm_provider_created", provider=self.llm_config.provider)
        return self.llm_provider
