"""Sources for the latest published Go version.

A :class:`VersionSource` answers one question: what is the newest release
published for the target platform. Implementations either return a version
string such as ``go1.23.1`` or raise :class:`NotFoundError`; they never
return an empty string.
"""

from __future__ import annotations

import io
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from goupgrade.bootstrap.download import HttpClient
from goupgrade.bootstrap.platform import ARCHIVE_EXTENSION, TARGET_PLATFORM, PlatformInfo
from goupgrade.core.errors import NotFoundError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_LISTING_URL = "https://go.dev/dl/"
DEFAULT_JSON_FEED_URL = "https://go.dev/dl/?mode=json"

# Marker present on the lines of the listing page that name an archive
LISTING_TAG_MARKER = "span class"


class VersionSource(ABC):
    """Base class for latest-version lookups."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier (e.g., 'html', 'json')."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location the version is read from."""

    @abstractmethod
    def latest_version(self) -> str:
        """Return the newest published version string.

        Raises:
            NotFoundError: If no release for the target platform is listed.
            NetworkError: If the source cannot be reached.
        """


class ListingPageSource(VersionSource):
    """Scrape the HTML download listing for the first archive line.

    The first line holding both the tag marker and the platform suffix names
    the featured download, e.g.
    ``<span class="filename">go1.23.1.linux-amd64.tar.gz</span>``.
    """

    def __init__(
        self,
        client: HttpClient,
        url: str = DEFAULT_LISTING_URL,
        platform_info: PlatformInfo = TARGET_PLATFORM,
    ):
        self.client = client
        self.url = url
        self.platform_info = platform_info

    @property
    def name(self) -> str:
        return "html"

    @property
    def location(self) -> str:
        return self.url

    def latest_version(self) -> str:
        with self.client.get(self.url) as response:
            lines = io.TextIOWrapper(response, encoding="utf-8", errors="replace")
            for line in lines:
                version = self.extract_version(line)
                if version:
                    LOGGER.debug(f"Matched listing line: {line.strip()}")
                    return version

        raise NotFoundError(
            f"no {self.platform_info.suffix} release found at {self.url}"
        )

    def extract_version(self, line: str) -> Optional[str]:
        """Pull the version out of a listing line, or None if it doesn't match."""
        suffix = self.platform_info.suffix
        if LISTING_TAG_MARKER not in line or suffix not in line:
            return None

        _, sep, rest = line.partition(">")
        if not sep:
            return None
        archive_tail = f".{suffix}{ARCHIVE_EXTENSION}"
        version, sep, _ = rest.partition(archive_tail)
        if not sep or not version:
            return None
        return version.strip()


class JsonFeedSource(VersionSource):
    """Read the machine-readable release feed.

    The feed lists releases newest first; each carries a ``stable`` flag and
    a ``files`` list with ``os``, ``arch`` and ``kind`` for every artifact.
    """

    def __init__(
        self,
        client: HttpClient,
        url: str = DEFAULT_JSON_FEED_URL,
        platform_info: PlatformInfo = TARGET_PLATFORM,
    ):
        self.client = client
        self.url = url
        self.platform_info = platform_info

    @property
    def name(self) -> str:
        return "json"

    @property
    def location(self) -> str:
        return self.url

    def latest_version(self) -> str:
        with self.client.get(self.url) as response:
            body = response.read()

        try:
            releases = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise NotFoundError(f"invalid release feed at {self.url}: {e}") from e

        if not isinstance(releases, list):
            raise NotFoundError(f"invalid release feed at {self.url}: expected a list")

        for release in releases:
            if isinstance(release, dict) and self._has_platform_archive(release):
                return str(release["version"])

        raise NotFoundError(
            f"no stable {self.platform_info.suffix} release found at {self.url}"
        )

    def _has_platform_archive(self, release: Dict[str, Any]) -> bool:
        if not release.get("stable") or not release.get("version"):
            return False
        files: List[Dict[str, Any]] = release.get("files") or []
        return any(
            f.get("os") == self.platform_info.os
            and f.get("arch") == self.platform_info.arch
            and f.get("kind") == "archive"
            for f in files
            if isinstance(f, dict)
        )


def create_version_source(
    kind: str,
    client: HttpClient,
    *,
    listing_url: str = DEFAULT_LISTING_URL,
    json_feed_url: str = DEFAULT_JSON_FEED_URL,
    platform_info: PlatformInfo = TARGET_PLATFORM,
) -> VersionSource:
    """Build the version source named by ``kind``.

    Raises:
        ValueError: If ``kind`` is not a known source.
    """
    if kind == "html":
        return ListingPageSource(client, listing_url, platform_info)
    if kind == "json":
        return JsonFeedSource(client, json_feed_url, platform_info)
    raise ValueError(f"Unknown version source: {kind}. Available: html, json")
