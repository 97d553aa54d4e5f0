"""Command Line Interface Package"""

import sys

from committor.cli.main import main as _main


def run() -> None:
    """Console script entry point."""
    sys.exit(_main())


__all__ = ["run"]
