"""Main entry point for the apidocgen CLI."""

import sys

from apidocgen.cli.commands import main as cli_main


def main() -> int:
    """Execute the apidocgen CLI application.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    cli_main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
