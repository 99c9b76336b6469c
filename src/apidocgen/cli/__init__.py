"""Command-line interface for apidocgen."""

from apidocgen.cli.commands import cli, main
from apidocgen.cli.ui import ApiDocUI, get_ui

__all__ = [
    "cli",
    "main",
    "ApiDocUI",
    "get_ui",
]
