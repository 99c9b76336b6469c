"""Click CLI commands for apidocgen.

This module wires the generation pipeline to a Click command group,
providing commands for generating, re-rendering, and configuring API
documentation.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import click
import structlog
from pydantic import ValidationError
from rich.console import Console

from apidocgen import __version__
from apidocgen.cli.ui import ApiDocUI, get_ui
from apidocgen.core.generator import DocumentationGenerator, GenerationError
from apidocgen.llm.base import LLMError, LLMProviderName, create_provider
from apidocgen.renderers import load_units, render_documentation
from apidocgen.renderers.base import OutputFormat
from apidocgen.utils.config import ApiDocConfig, create_default_config, load_config
from apidocgen.utils.file_ops import FileOperations

logger = structlog.get_logger(__name__)

PROVIDER_CHOICES = [name.value for name in LLMProviderName]
FORMAT_CHOICES = [fmt.value for fmt in OutputFormat]


def configure_logging(log_level: str, log_format: str = "console") -> None:
    """Configure structlog for the CLI.

    Log records go to stderr so that documentation printed to stdout stays
    clean.

    Args:
        log_level: Level name (DEBUG, INFO, ...)
        log_format: ``console`` or ``json``
    """
    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _effective_log_level(config: ApiDocConfig, verbose: bool, quiet: bool) -> str:
    if quiet or config.quiet:
        return "ERROR"
    if verbose or config.verbose:
        return "DEBUG"
    return config.log_level


def _load_or_exit(ctx: click.Context, **overrides: Any) -> ApiDocConfig:
    """Load configuration and reconfigure logging, exiting on invalid input."""
    ui: ApiDocUI = ctx.obj["ui"]
    config_path: Optional[Path] = ctx.obj["config_path"]

    logger.debug(
        "loading_configuration",
        config_path=str(config_path) if config_path else "default",
        overrides=sorted(k for k, v in overrides.items() if v is not None),
    )

    try:
        config = load_config(config_path, **overrides)
    except (FileNotFoundError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        ui.print_error(f"Invalid configuration: {e}")
        logger.error("configuration_invalid", error=str(e))
        sys.exit(1)

    configure_logging(
        _effective_log_level(config, ctx.obj["verbose"], ctx.obj["quiet"]),
        config.log_format,
    )
    if config.quiet:
        ui.quiet = True
    if config.verbose:
        ui.verbose = True

    return config


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Quiet mode")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """apidocgen - AI-powered API documentation generator.

    Sends source files to an LLM, collects structured descriptions of their
    public API, and renders them as Markdown, HTML or JSON.
    """
    if quiet:
        log_level = "ERROR"
    elif verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    configure_logging(log_level)
    logger.debug("logging_configured", level=log_level)

    ctx.ensure_object(dict)
    ctx.obj["ui"] = ApiDocUI(verbose=verbose, quiet=quiet)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))  # type: ignore[type-var]
@click.option(
    "--provider",
    type=click.Choice(PROVIDER_CHOICES, case_sensitive=False),
    help="LLM provider",
)
@click.option("--model", help="LLM model name")
@click.option("--api-key", help="API key, or the name of a variable holding it")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Output format",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Directory for the generated documentation",
)
@click.option(
    "--examples/--no-examples",
    "include_examples",
    default=True,
    help="Ask for usage examples",
)
@click.option("--ollama-host", help="Ollama server URL")
@click.option(
    "--concurrency",
    type=click.IntRange(1, 32),
    help="Number of files documented at the same time",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the documentation instead of writing it")
@click.pass_context
def generate(
    ctx: click.Context,
    paths: tuple[Path, ...],
    provider: str | None,
    model: str | None,
    api_key: str | None,
    output_format: str | None,
    output_dir: Path | None,
    include_examples: bool,
    ollama_host: str | None,
    concurrency: int | None,
    to_stdout: bool,
) -> None:
    """Generate API documentation for source files.

    PATHS can be one or more files or directories. Directories are searched
    recursively for supported source files; dot directories and
    node_modules are skipped.

    Examples:
        apidocgen generate src/
        apidocgen generate app.ts utils.ts --format html
        apidocgen generate lib/ --provider ollama --model codellama --stdout
    """
    ui: ApiDocUI = ctx.obj["ui"]
    if to_stdout:
        # Keep stdout for the document itself
        ui.console = Console(stderr=True)

    ui.print_banner()

    # Flags with a Click default only override the config when given explicitly
    examples_override: bool | None = None
    if ctx.get_parameter_source("include_examples") == click.core.ParameterSource.COMMANDLINE:
        examples_override = include_examples

    config = _load_or_exit(
        ctx,
        provider=provider,
        model=model,
        api_key=api_key,
        output_format=output_format,
        output_dir=output_dir,
        include_examples=examples_override,
        ollama_host=ollama_host,
        concurrency=concurrency,
    )

    if ui.verbose:
        ui.display_config(config.model_dump())

    # Discovery order is kept; a file reached from two paths is documented once
    ui.print_info(f"Scanning {len(paths)} path(s)...")

    file_ops = FileOperations()
    files: list[Path] = []
    for path in paths:
        for found in file_ops.find_source_files(path, config.exclude_patterns):
            if found not in files:
                files.append(found)

    if not files:
        ui.print_warning("No supported source files found")
        sys.exit(0)

    ui.display_file_list(files)

    llm_config = config.to_llm_config()
    try:
        logger.info("initializing_generator", provider=llm_config.provider, model=llm_config.model)
        llm = create_provider(llm_config)
    except LLMError as e:
        logger.error("generator_initialization_failed", error=str(e))
        ui.print_error(f"Failed to initialize LLM provider: {e}")
        sys.exit(1)

    if llm_config.provider == LLMProviderName.OPENAI.value and not llm_config.api_key:
        logger.error("api_key_missing", api_key_env=config.api_key_env)
        ui.print_error(f"No API key configured. Set {config.api_key_env} or pass --api-key")
        sys.exit(1)

    generator = DocumentationGenerator(llm_provider=llm)
    ui.print_success(f"Using {llm_config.provider} provider with model {llm.model}")

    logger.info("starting_file_processing", total_files=len(files))
    start_time = time.time()

    with ui.create_progress() as progress:
        task = progress.add_task("Generating documentation...", total=len(files))

        def advance(path: Path, error: Optional[GenerationError]) -> None:
            progress.update(task, description=f"Documented {path.name}")
            progress.advance(task)

        report = asyncio.run(
            generator.generate_for_paths(
                files,
                include_examples=config.include_examples,
                max_concurrency=config.concurrency,
                on_result=advance,
            )
        )

    duration = time.time() - start_time

    for path, error in report.failures:
        cause = error.cause if error.cause is not None else error
        ui.print_error(f"{path}: {cause}")

    if ui.verbose:
        for unit in report.units:
            ui.display_unit_summary(unit)
        ui.display_failures(report)

    output_path: Optional[Path] = None
    if report.units:
        content = render_documentation(report.units, config.output_format)
        if to_stdout:
            click.echo(content, nl=False)
        else:
            output_path = file_ops.write_documentation(
                content, config.output_dir, config.output_format.value
            )
            ui.print_success(f"Documentation written to {output_path}")
    else:
        ui.print_warning("No documentation was generated")

    logger.info(
        "processing_complete",
        total_files=report.total,
        generated=len(report.units),
        errors=len(report.failures),
        duration_seconds=round(duration, 2),
    )

    ui.display_statistics(report, duration_seconds=duration, output_path=output_path)

    sys.exit(1 if report.has_failures else 0)


@cli.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, path_type=Path))  # type: ignore[type-var]
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default=OutputFormat.MARKDOWN.value,
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Write to this file instead of stdout",
)
@click.pass_context
def render(
    ctx: click.Context,
    input_path: Path,
    output_format: str,
    output: Path | None,
) -> None:
    """Re-render documentation from a previous JSON output.

    Examples:
        apidocgen render docs/api-documentation.json --format html -o api.html
    """
    ui: ApiDocUI = ctx.obj["ui"]

    try:
        units = load_units(input_path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.error("render_input_invalid", file=str(input_path), error=str(e))
        ui.print_error(f"Cannot read documentation from {input_path}: {e}")
        sys.exit(1)

    content = render_documentation(units, output_format)

    if output is None:
        click.echo(content, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    logger.info("documentation_rendered", file=str(output), units=len(units))
    ui.print_success(f"Rendered {len(units)} file(s) to {output}")


@cli.command()
@click.argument("output", type=click.Path(path_type=Path), default="apidocgen.toml")  # type: ignore[type-var]
@click.pass_context
def init(ctx: click.Context, output: Path) -> None:
    """Initialize a new apidocgen configuration file.

    Writes a commented apidocgen.toml listing every setting and its default.
    """
    ui: ApiDocUI = ctx.obj["ui"]

    try:
        create_default_config(output)
        ui.print_success(f"Created configuration file: {output}")
        ui.print_info("Edit the file to customize settings for your project")

    except FileExistsError:
        ui.print_error(f"Configuration file already exists: {output}")
        sys.exit(1)

    except OSError as e:
        ui.print_error(f"Failed to create configuration: {e}")
        sys.exit(1)


@cli.command()
@click.option(
    "--provider",
    type=click.Choice(PROVIDER_CHOICES, case_sensitive=False),
    help="LLM provider to test",
)
@click.option("--model", help="Model name")
@click.option("--api-key", help="API key")
@click.option("--ollama-host", help="Ollama server URL")
@click.pass_context
def test_connection(
    ctx: click.Context,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    ollama_host: str | None,
) -> None:
    """Send a short prompt to check that a provider answers.

    Verifies that credentials are valid and the provider is reachable.
    """
    ui: ApiDocUI = ctx.obj["ui"]

    config = _load_or_exit(
        ctx,
        provider=provider,
        model=model,
        api_key=api_key,
        ollama_host=ollama_host,
    )
    llm_config = config.to_llm_config()

    ui.print_info(f"Testing connection to {llm_config.provider}...")

    try:
        logger.info("testing_connection", provider=llm_config.provider, model=llm_config.model)
        llm = create_provider(llm_config)
        result = asyncio.run(llm.test_connection())

    except LLMError as e:
        ui.print_error(f"Connection test failed: {e}")
        logger.error("connection_test_failed", provider=llm_config.provider, error=str(e))
        sys.exit(1)

    if not result:
        logger.error("connection_test_failed_no_result", provider=llm_config.provider)
        ui.print_error("Connection test failed")
        sys.exit(1)

    logger.info("connection_test_passed", provider=llm_config.provider, model=llm.model)
    ui.print_success(f"Successfully connected to {llm_config.provider} with model {llm.model}")


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Print the apidocgen version and the supported backends."""
    ui: ApiDocUI = ctx.obj["ui"]

    ui.console.print(
        f"[bold cyan]apidocgen[/bold cyan] version [green]{__version__}[/green]"
    )
    ui.console.print("\nAI-powered API documentation generator")
    ui.console.print("\nOutput formats: Markdown, HTML, JSON")
    ui.console.print("Supported providers: OpenAI, Ollama")


def main() -> None:
    """Console-script entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        ui = get_ui()
        ui.print_warning("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        ui = get_ui()
        ui.print_error(f"Unexpected error: {e}")
        # Only show full traceback in verbose mode
        if "--verbose" in sys.argv or "-v" in sys.argv:
            logger.exception("cli_error")
        sys.exit(1)


if __name__ == "__main__":
    main()
