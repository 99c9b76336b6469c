"""Tests for UI message escaping to prevent Rich markup interpretation issues.

Error messages often contain square brackets (package extras, provider
replies, file names); they must be shown literally instead of being
swallowed as markup tags.
"""

from io import StringIO

from rich.console import Console

from apidocgen.cli.ui import ApiDocUI
from apidocgen.core.generator import GenerationError, GenerationReport
from apidocgen.core.normalizer import MalformedResponseError


def make_ui(quiet: bool = False) -> tuple[ApiDocUI, StringIO]:
    """Create a UI that writes into a buffer."""
    buffer = StringIO()
    console = Console(file=buffer, force_terminal=True, highlight=False, width=200)
    return ApiDocUI(console=console, quiet=quiet), buffer


class TestUIMarkupEscape:
    """Test suite for UI message escaping functionality."""

    def test_print_error_with_square_brackets(self) -> None:
        """Test that error messages with square brackets are not truncated."""
        ui, buffer = make_ui()

        ui.print_error("Install with: pip install apidocgen[test]")

        assert "apidocgen[test]" in buffer.getvalue()

    def test_print_warning_with_markup_like_text(self) -> None:
        """Test that text resembling a style tag is printed verbatim."""
        ui, buffer = make_ui()

        ui.print_warning("Reply started with [bold]Sure![/bold]")

        assert "[bold]Sure![/bold]" in buffer.getvalue()

    def test_print_info_with_brackets_in_path(self) -> None:
        """Test file paths with brackets."""
        ui, buffer = make_ui()

        ui.print_info("Scanning src/[id]/page.ts")

        assert "src/[id]/page.ts" in buffer.getvalue()

    def test_failures_table_escapes_messages(self) -> None:
        """Test that failure causes in the table are escaped."""
        ui, buffer = make_ui()
        cause = MalformedResponseError("No structured payload located in AI response [raw]")
        report = GenerationReport(
            failures=[("lib/[slug].ts", GenerationError("failed", cause=cause))]
        )

        ui.display_failures(report)

        output = buffer.getvalue()
        assert "lib/[slug].ts" in output
        assert "[raw]" in output


class TestQuietMode:
    """Test output suppression."""

    def test_quiet_suppresses_info(self) -> None:
        """Test that quiet mode hides informational output."""
        ui, buffer = make_ui(quiet=True)

        ui.print_info("hello")
        ui.print_success("done")
        ui.print_warning("careful")

        assert buffer.getvalue() == ""

    def test_quiet_keeps_errors(self) -> None:
        """Test that errors are shown even in quiet mode."""
        ui, buffer = make_ui(quiet=True)

        ui.print_error("broken")

        assert "broken" in buffer.getvalue()
