"""Argument parser construction for the goupgrade CLI.

Running ``goupgrade`` with no arguments performs a full upgrade with the
built-in defaults. Every option only adjusts that single run.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from goupgrade.config.models import VALID_SOURCES


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add logging and version options."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show goupgrade version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_upgrade_options(parser: argparse.ArgumentParser) -> None:
    """Add options that override configuration for this run."""
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Read settings from this YAML file.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report whether a newer version is available (exit 1 if so).",
    )
    parser.add_argument(
        "--source",
        choices=list(VALID_SOURCES),
        help="Where to look up the latest version (default: html).",
    )
    parser.add_argument(
        "--install-root",
        metavar="DIR",
        help="Directory the toolchain is unpacked into (default: /usr/local).",
    )
    parser.add_argument(
        "--staging-dir",
        metavar="DIR",
        help="Directory for downloaded archives (default: /tmp).",
    )
    parser.add_argument(
        "--version-file",
        metavar="PATH",
        help="VERSION file of the installed toolchain (default: <install-root>/go/VERSION).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the goupgrade argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="goupgrade",
        description=(
            "Check the installed Go toolchain against the latest release "
            "on go.dev and upgrade it in place when a newer one exists."
        ),
    )
    _add_global_options(parser)
    _add_upgrade_options(parser)
    return parser
