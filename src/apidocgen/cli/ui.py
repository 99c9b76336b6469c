"""Terminal output for the apidocgen CLI.

Status lines, the per-run progress bar, and summary tables are rendered
with Rich. Everything here writes to the console only; the rendered
documentation itself never passes through this module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from apidocgen.core.generator import GenerationReport
from apidocgen.core.models import DocumentationUnit
from apidocgen.utils.file_ops import language_for_path

SECRET_FIELDS = frozenset({"api_key"})


class ApiDocUI:
    """Rich terminal UI for apidocgen.

    Messages are escaped before printing, so text such as ``pkg[extra]``
    in an error is shown literally instead of being read as markup.

    Attributes:
        console: Rich console instance
        verbose: Show debug messages and per-file summaries
        quiet: Suppress everything but errors
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbose: bool = False,
        quiet: bool = False,
    ) -> None:
        self.console = console or Console()
        self.verbose = verbose
        self.quiet = quiet

    def _emit(self, marker: str, message: str, force: bool = False, **kwargs: Any) -> None:
        if self.quiet and not force:
            return
        self.console.print(f"{marker} {escape(message)}", **kwargs)

    def print_banner(self) -> None:
        """Print the apidocgen banner."""
        if self.quiet:
            return

        self.console.print(
            Panel(
                "[bold]apidocgen[/bold]\nAI-Powered API Documentation Generator",
                border_style="blue",
                expand=False,
            )
        )

    def print_info(self, message: str, **kwargs: Any) -> None:
        self._emit("[blue]i[/blue]", message, **kwargs)

    def print_success(self, message: str, **kwargs: Any) -> None:
        self._emit("[green]✓[/green]", message, **kwargs)

    def print_warning(self, message: str, **kwargs: Any) -> None:
        self._emit("[yellow]![/yellow]", message, **kwargs)

    def print_error(self, message: str, **kwargs: Any) -> None:
        """Print an error message. Shown even in quiet mode."""
        self._emit("[red]✗[/red]", message, force=True, **kwargs)

    def print_debug(self, message: str, **kwargs: Any) -> None:
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]", **kwargs)

    def create_progress(self) -> Progress:
        """Create the progress bar shown while files are documented.

        Returns:
            Rich Progress instance, disabled in quiet mode
        """
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            disable=self.quiet,
        )

    def display_unit_summary(self, unit: DocumentationUnit) -> None:
        """Display what was documented for one file.

        Args:
            unit: Generated documentation unit
        """
        if self.quiet:
            return

        counts = "\n".join(
            f"[bold]{name.capitalize()}:[/bold] {len(getattr(unit, name))}"
            for name in DocumentationUnit.SECTION_FIELDS
        )
        self.console.print(
            Panel(
                counts,
                title=f"[bold cyan]{escape(unit.display_name)}[/bold cyan]",
                subtitle=escape(unit.file_path or ""),
                border_style="cyan",
            )
        )

    def display_failures(self, report: GenerationReport) -> None:
        """Display the files that could not be documented.

        Failures are listed even in quiet mode.

        Args:
            report: Generation report
        """
        if not report.failures:
            return

        table = Table(title="[bold red]Failed Files[/bold red]", box=box.SIMPLE_HEAVY)
        table.add_column("File", style="cyan")
        table.add_column("Stage", style="yellow")
        table.add_column("Reason", style="red")

        for path, error in report.failures:
            cause = error.cause if error.cause is not None else error
            table.add_row(escape(path), type(cause).__name__, escape(str(cause)))

        self.console.print(table)

    def display_statistics(
        self,
        report: GenerationReport,
        duration_seconds: float,
        output_path: Optional[Path] = None,
    ) -> None:
        """Display the outcome of a generation run.

        Args:
            report: Generation report
            duration_seconds: Wall-clock duration of the run
            output_path: Where the documentation was written, if anywhere
        """
        if self.quiet:
            return

        entries = sum(
            len(getattr(unit, name))
            for unit in report.units
            for name in DocumentationUnit.SECTION_FIELDS
        )
        failed = len(report.failures)

        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="cyan", no_wrap=True)
        grid.add_column(justify="right")
        grid.add_row("Files", str(report.total))
        grid.add_row("Documented", f"[green]{len(report.units)}[/green]")
        grid.add_row("Failed", f"[red]{failed}[/red]" if failed else "0")
        grid.add_row("Entries", str(entries))
        grid.add_row("Duration", f"{duration_seconds:.2f}s")
        if output_path is not None:
            grid.add_row("Output", escape(str(output_path)))

        self.console.print(
            Panel(grid, title="[bold cyan]Summary[/bold cyan]", expand=False)
        )

    def display_config(self, config: dict[str, Any]) -> None:
        """Display the effective configuration, masking secrets.

        Args:
            config: Configuration as a dictionary
        """
        if self.quiet:
            return

        table = Table(title="[bold cyan]Effective Configuration[/bold cyan]", box=box.MINIMAL)
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        for key in sorted(config):
            value = config[key]
            if key in SECRET_FIELDS and value:
                value = f"...{str(value)[-4:]}" if len(str(value)) > 8 else "***"
            table.add_row(key, escape(str(value)))

        self.console.print(table)

    def display_file_list(self, files: Sequence[Path]) -> None:
        """Display the source files about to be documented.

        Args:
            files: Source file paths
        """
        if self.quiet:
            return

        table = Table(
            title=f"[bold cyan]{len(files)} source file(s)[/bold cyan]",
            box=box.MINIMAL,
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Path", style="cyan")
        table.add_column("Language", style="magenta")

        for idx, path in enumerate(files, 1):
            table.add_row(str(idx), escape(str(path)), language_for_path(path))

        self.console.print(table)


# Global UI instance
_ui: Optional[ApiDocUI] = None


def get_ui(
    console: Optional[Console] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> ApiDocUI:
    """Get or create the global UI instance.

    Args:
        console: Rich console
        verbose: Show debug output
        quiet: Suppress non-error output

    Returns:
        ApiDocUI instance
    """
    global _ui
    if _ui is None:
        _ui = ApiDocUI(console=console, verbose=verbose, quiet=quiet)
    return _ui
