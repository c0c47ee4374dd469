"""Command-line interface for goupgrade."""

from __future__ import annotations

from typing import Iterable, Optional

from goupgrade.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    runner = CLIRunner()
    return runner.run(argv)


__all__ = ["main", "CLIRunner"]
