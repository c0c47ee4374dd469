"""
Toolchain acquisition for goupgrade.

This package handles:
- The fixed platform target (linux-amd64)
- HTTP access with certifi-backed TLS
- Looking up the latest published and the installed version
- Downloading release archives into the staging directory
- Decompressing and unpacking them
"""

from goupgrade.bootstrap.archive import gunzip, untar
from goupgrade.bootstrap.download import HttpClient
from goupgrade.bootstrap.fetch import ArtifactFetcher, construct_download_url
from goupgrade.bootstrap.installed import read_installed_version
from goupgrade.bootstrap.platform import TARGET_PLATFORM, PlatformInfo
from goupgrade.bootstrap.sources import (
    JsonFeedSource,
    ListingPageSource,
    VersionSource,
    create_version_source,
)

__all__ = [
    "gunzip",
    "untar",
    "HttpClient",
    "ArtifactFetcher",
    "construct_download_url",
    "read_installed_version",
    "TARGET_PLATFORM",
    "PlatformInfo",
    "JsonFeedSource",
    "ListingPageSource",
    "VersionSource",
    "create_version_source",
]
