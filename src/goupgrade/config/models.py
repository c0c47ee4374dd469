"""Typed configuration for goupgrade.

Every hard-wired location the upgrade touches is a field here, with the
historical value as its default.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from goupgrade.bootstrap.fetch import DEFAULT_DOWNLOAD_URL_TEMPLATE
from goupgrade.bootstrap.platform import TARGET_PLATFORM, PlatformInfo
from goupgrade.bootstrap.sources import DEFAULT_JSON_FEED_URL, DEFAULT_LISTING_URL

VALID_SOURCES = ("html", "json")

DEFAULT_INSTALL_ROOT = Path("/usr/local")
DEFAULT_TOOLCHAIN_DIR_NAME = "go"
DEFAULT_STAGING_DIR = Path("/tmp")


@dataclass
class UpgraderConfig:
    """Complete goupgrade configuration.

    Attributes:
        source: Which version source to ask for the latest release.
        listing_url: HTML download listing scraped by the ``html`` source.
        json_feed_url: Release feed read by the ``json`` source.
        download_url_template: Archive URL with ``{version}`` and ``{platform}``.
        install_root: Directory the archive is unpacked into.
        toolchain_dir_name: Directory under ``install_root`` that holds the
            toolchain and is replaced on upgrade.
        version_file: VERSION file of the installed toolchain. Derived from
            ``install_root`` and ``toolchain_dir_name`` when unset.
        staging_dir: Where archives are downloaded and decompressed.
        timeout: HTTP timeout in seconds; None waits indefinitely.
    """

    source: str = "html"
    listing_url: str = DEFAULT_LISTING_URL
    json_feed_url: str = DEFAULT_JSON_FEED_URL
    download_url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE
    install_root: Path = DEFAULT_INSTALL_ROOT
    toolchain_dir_name: str = DEFAULT_TOOLCHAIN_DIR_NAME
    version_file: Optional[Path] = None
    staging_dir: Path = DEFAULT_STAGING_DIR
    timeout: Optional[float] = None

    # Where each value came from, for diagnostics
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def toolchain_dir(self) -> Path:
        """The directory removed and recreated on upgrade."""
        return self.install_root / self.toolchain_dir_name

    @property
    def resolved_version_file(self) -> Path:
        if self.version_file is not None:
            return self.version_file
        return self.toolchain_dir / "VERSION"

    @property
    def platform_info(self) -> PlatformInfo:
        return TARGET_PLATFORM

    def staged_archive(self, version: str) -> Path:
        """Path of the downloaded archive for ``version``."""
        return self.staging_dir / self.platform_info.archive_name(version)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (paths as strings)."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            if f.name.startswith("_"):
                continue
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Path) else value
        return result
