"""Upgrade orchestration.

Runs the whole pipeline in order, one blocking step at a time:

    latest version -> installed version -> compare -> download
    -> decompress -> remove old toolchain -> unpack -> report

Any failure other than a missing installation aborts the run. Nothing is
rolled back: if unpacking fails after the old toolchain was removed, the
host is left without one.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from goupgrade.bootstrap.archive import gunzip, untar
from goupgrade.bootstrap.download import HttpClient
from goupgrade.bootstrap.fetch import ArtifactFetcher
from goupgrade.bootstrap.installed import read_installed_version
from goupgrade.bootstrap.sources import VersionSource, create_version_source
from goupgrade.config.models import UpgraderConfig
from goupgrade.config.validation import is_plain_dir_name
from goupgrade.core.errors import ConfigError, FileSystemError, NotInstalledError
from goupgrade.core.logging import get_logger
from goupgrade.core.version import Version, is_newer, parse_version

LOGGER = get_logger(__name__)


class InstallStatus(str, Enum):
    """Outcome of an upgrade run."""

    UPGRADED = "upgraded"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"


@dataclass
class InstallResult:
    """What an upgrade run did.

    Attributes:
        status: Outcome of the run.
        installed: Version found on the host before the run.
        latest: Latest published version.
        downloaded: Whether the archive was fetched in this run.
        entries: Number of archive entries unpacked.
    """

    status: InstallStatus
    installed: str
    latest: str
    downloaded: bool = False
    entries: int = 0


class Installer:
    """Checks for a newer Go toolchain and installs it in place.

    Args:
        config: Paths and URLs to operate on.
        source: Where the latest version is looked up.
        fetcher: Downloads release archives.
        echo: Receives one status line per pipeline stage.
    """

    def __init__(
        self,
        config: UpgraderConfig,
        source: VersionSource,
        fetcher: ArtifactFetcher,
        echo: Callable[[str], None] = print,
    ):
        self.config = config
        self.source = source
        self.fetcher = fetcher
        self.echo = echo

    @classmethod
    def from_config(
        cls,
        config: UpgraderConfig,
        client: Optional[HttpClient] = None,
        echo: Callable[[str], None] = print,
    ) -> "Installer":
        """Wire an Installer with the version source and fetcher ``config`` names."""
        client = client or HttpClient(timeout=config.timeout)
        source = create_version_source(
            config.source,
            client,
            listing_url=config.listing_url,
            json_feed_url=config.json_feed_url,
            platform_info=config.platform_info,
        )
        fetcher = ArtifactFetcher(
            client,
            platform_info=config.platform_info,
            url_template=config.download_url_template,
        )
        return cls(config, source, fetcher, echo=echo)

    def resolve_installed(self) -> str:
        """Installed version string, or the zero version when none is installed."""
        try:
            installed = read_installed_version(self.config.resolved_version_file)
        except NotInstalledError as e:
            LOGGER.info(str(e))
            self.echo("Go installation not found on this system. Installing it now...")
            return str(Version.zero())

        self.echo(f"Installed version on this system: {installed}")
        return installed

    def run(self, check_only: bool = False) -> InstallResult:
        """Run the upgrade pipeline.

        Args:
            check_only: Stop after the comparison and report whether an
                upgrade is available, without touching the filesystem.

        Returns:
            InstallResult describing the outcome.

        Raises:
            UpgradeError: Any pipeline failure; see goupgrade.core.errors.
        """
        if not is_plain_dir_name(self.config.toolchain_dir_name):
            raise ConfigError(
                f"refusing to use toolchain directory {self.config.toolchain_dir}: "
                "toolchain_dir_name must be a single directory name"
            )

        if not self.config.platform_info.matches_host():
            LOGGER.warning(
                f"This host is not {self.config.platform_info.suffix}; "
                "the installed toolchain will not run here."
            )

        latest = self.source.latest_version()
        self.echo(f"Latest version found at {self.source.location}: {latest}")

        installed = self.resolve_installed()

        current = parse_version(installed)
        target = parse_version(latest)

        if not is_newer(current, target):
            self.echo("Upgrade not needed")
            return InstallResult(InstallStatus.UP_TO_DATE, installed, latest)

        if check_only:
            self.echo(f"Upgrade available: {installed} -> {latest}")
            return InstallResult(InstallStatus.UPDATE_AVAILABLE, installed, latest)

        # Normalized form keeps the staging cache keyed consistently
        version = str(target)
        archive, downloaded = self.stage(version)

        self.echo(f"Decompressing {archive}")
        tar_path = gunzip(archive, self.config.staging_dir)

        self.remove_previous(self.config.toolchain_dir)

        self.echo(f"Installing {version} into {self.config.install_root}")
        entries = self.unpack(tar_path)

        self.echo(f"Success, golang version {version} installed correctly")
        return InstallResult(
            InstallStatus.UPGRADED,
            installed,
            version,
            downloaded=downloaded,
            entries=entries,
        )

    def stage(self, version: str) -> Tuple[Path, bool]:
        """Make sure the archive for ``version`` is in the staging directory.

        Returns:
            The staged archive path and whether it was downloaded just now.
        """
        archive = self.config.staged_archive(version)
        try:
            self.config.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"couldn't create staging directory {self.config.staging_dir}: {e}") from e

        if not archive.exists():
            self.echo(f"Downloading {version} from {self.fetcher.url_for(version)}")
        downloaded = self.fetcher.ensure_artifact(version, archive)
        return archive, downloaded

    def remove_previous(self, toolchain_dir: Path) -> None:
        """Recursively delete the previous toolchain, if there is one."""
        if not toolchain_dir.exists() and not toolchain_dir.is_symlink():
            LOGGER.debug(f"No previous installation at {toolchain_dir}")
            return

        self.echo(f"Removing previous installation at {toolchain_dir}")
        try:
            if toolchain_dir.is_symlink() or not toolchain_dir.is_dir():
                toolchain_dir.unlink()
            else:
                shutil.rmtree(toolchain_dir)
        except OSError as e:
            raise FileSystemError(f"couldn't remove {toolchain_dir}: {e}") from e

    def unpack(self, tar_path: Path) -> int:
        try:
            self.config.install_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"couldn't create {self.config.install_root}: {e}") from e
        return untar(tar_path, self.config.install_root)
