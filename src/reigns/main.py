"""Entry-point for launching the CLI application."""
from __future__ import annotations

import sys
from typing import Sequence

from .presentation.cli.app import main as cli_main


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI presentation layer."""
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
