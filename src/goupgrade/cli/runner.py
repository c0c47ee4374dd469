"""CLI runner orchestration.

Parses arguments, loads configuration, runs the installer and turns its
outcome into an exit code.
"""

from __future__ import annotations

from argparse import Namespace
from typing import Any, Dict, Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from goupgrade.cli.arguments import build_parser
from goupgrade.cli.exit_codes import EXIT_SUCCESS, EXIT_UPDATE_AVAILABLE
from goupgrade.config import UpgraderConfig, load_config
from goupgrade.core.errors import UpgradeError
from goupgrade.core.logging import configure_logging, get_logger
from goupgrade.installer import Installer, InstallStatus

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get goupgrade version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("goupgrade")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from goupgrade import __version__
        return __version__


def args_to_overrides(args: Namespace) -> Dict[str, Any]:
    """Map CLI flags onto configuration keys."""
    return {
        "source": getattr(args, "source", None),
        "install_root": getattr(args, "install_root", None),
        "staging_dir": getattr(args, "staging_dir", None),
        "version_file": getattr(args, "version_file", None),
    }


class CLIRunner:
    """Runs one goupgrade invocation."""

    def __init__(self) -> None:
        self.parser = build_parser()
        self._version = get_version()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        return self._handle_upgrade(args)

    def _handle_upgrade(self, args: Namespace) -> int:
        """Load configuration and run the upgrade pipeline.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        try:
            config = load_config(
                config_path=args.config,
                cli_overrides=args_to_overrides(args),
            )
            result = self.create_installer(config).run(check_only=args.check)
        except UpgradeError as e:
            if args.debug:
                LOGGER.exception("Upgrade failed")
            else:
                LOGGER.error(f"Upgrade failed: {e}")
            print(f"error: {e}")
            return e.exit_code

        if result.status == InstallStatus.UPDATE_AVAILABLE:
            return EXIT_UPDATE_AVAILABLE
        return EXIT_SUCCESS

    def create_installer(self, config: UpgraderConfig) -> Installer:
        """Build the installer for a run; tests replace this to inject fakes."""
        return Installer.from_config(config)
