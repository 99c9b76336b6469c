"""File operations utilities for apidocgen.

This module provides source file discovery, extension to language mapping,
and writing of the rendered documentation.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pathspec
import structlog

logger = structlog.get_logger(__name__)

SUPPORTED_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".c": "c",
    ".go": "go",
    ".php": "php",
    ".rb": "ruby",
}

FALLBACK_LANGUAGE = "text"

# gitignore-style; a trailing slash matches directories at any depth
DEFAULT_EXCLUDE_PATTERNS: list[str] = [".*/", "node_modules/"]

OUTPUT_BASENAME = "api-documentation"

OUTPUT_EXTENSIONS: dict[str, str] = {
    "markdown": "md",
    "html": "html",
    "json": "json",
}


def language_for_path(path: str | Path) -> str:
    """Map a file's extension to its language label.

    Args:
        path: Source file path

    Returns:
        Language label, ``"text"`` for unmapped extensions
    """
    return SUPPORTED_LANGUAGES.get(Path(path).suffix.lower(), FALLBACK_LANGUAGE)


def is_supported(path: str | Path) -> bool:
    """Check if a file has a supported source extension."""
    return Path(path).suffix.lower() in SUPPORTED_LANGUAGES


def output_filename(output_format: str | Enum) -> str:
    """Return the documentation file name for an output format.

    Args:
        output_format: Output format identifier

    Returns:
        File name such as ``api-documentation.md``
    """
    if isinstance(output_format, Enum):
        output_format = output_format.value
    extension = OUTPUT_EXTENSIONS.get(str(output_format).lower(), "md")
    return f"{OUTPUT_BASENAME}.{extension}"


class FileOperations:
    """Utilities for file operations.

    Attributes:
        dry_run: If True, don't actually write files
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize file operations.

        Args:
            dry_run: If True, simulate writes without touching the disk
        """
        self.dry_run = dry_run
        self._log = logger.bind(component="file_ops")

    def find_source_files(
        self,
        root_path: Path,
        exclude_patterns: list[str] | None = None,
    ) -> list[Path]:
        """Find supported source files below a path.

        A file path yields itself when its extension is supported. A
        directory is searched recursively, skipping dot-prefixed directories,
        ``node_modules`` and any extra gitignore-style patterns.

        Args:
            root_path: File or directory to search
            exclude_patterns: Additional patterns to exclude

        Returns:
            Sorted list of absolute source file paths

        Raises:
            FileNotFoundError: If the path does not exist
        """
        root_path = Path(root_path).resolve()

        if not root_path.exists():
            raise FileNotFoundError(f"Path not found: {root_path}")

        if root_path.is_file():
            return [root_path] if is_supported(root_path) else []

        all_files = [
            path
            for path in root_path.rglob("*")
            if path.is_file() and is_supported(path)
        ]

        spec = pathspec.PathSpec.from_lines(
            "gitwildmatch",
            [*DEFAULT_EXCLUDE_PATTERNS, *(exclude_patterns or [])],
        )
        filtered_files = [
            f
            for f in all_files
            if not spec.match_file(f.relative_to(root_path).as_posix())
        ]

        self._log.info(
            "files_found",
            total=len(all_files),
            filtered=len(filtered_files),
            excluded=len(all_files) - len(filtered_files),
        )

        return sorted(filtered_files)

    def write_documentation(
        self,
        content: str,
        output_dir: Path,
        output_format: str,
    ) -> Path:
        """Write rendered documentation into an output directory.

        Args:
            content: Rendered documentation
            output_dir: Directory to write into (created if missing)
            output_format: Output format, used to pick the file extension

        Returns:
            Path of the written file
        """
        output_path = Path(output_dir) / output_filename(output_format)

        if self.dry_run:
            self._log.info("dry_run_write", file=str(output_path))
            return output_path

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        self._log.info("documentation_written", file=str(output_path), chars=len(content))

        return output_path


def find_source_files(
    root_path: Path | str,
    exclude_patterns: list[str] | None = None,
) -> list[Path]:
    """Convenience function to find supported source files.

    Args:
        root_path: File or directory to search
        exclude_patterns: Additional patterns to exclude

    Returns:
        List of source file paths
    """
    ops = FileOperations()
    return ops.find_source_files(Path(root_path), exclude_patterns)
