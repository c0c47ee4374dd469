"""Download release archives into the staging directory."""

from __future__ import annotations

import os
from pathlib import Path

from goupgrade.bootstrap.download import HttpClient
from goupgrade.bootstrap.platform import TARGET_PLATFORM, PlatformInfo
from goupgrade.core.errors import FileSystemError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_DOWNLOAD_URL_TEMPLATE = "https://go.dev/dl/{version}.{platform}.tar.gz"

# Permissions of a downloaded archive
ARCHIVE_FILE_MODE = 0o664

CHUNK_SIZE = 1024 * 1024


def construct_download_url(
    version: str,
    platform_info: PlatformInfo = TARGET_PLATFORM,
    template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE,
) -> str:
    """Construct the download URL for a release archive.

    Args:
        version: Release version string, e.g. ``go1.23.1``.
        platform_info: Target platform.
        template: URL template with ``{version}`` and ``{platform}`` fields.

    Returns:
        Full URL to the archive.
    """
    return template.format(version=version, platform=platform_info.suffix)


class ArtifactFetcher:
    """Fetches release archives over HTTP."""

    def __init__(
        self,
        client: HttpClient,
        platform_info: PlatformInfo = TARGET_PLATFORM,
        url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE,
    ):
        self.client = client
        self.platform_info = platform_info
        self.url_template = url_template

    def url_for(self, version: str) -> str:
        return construct_download_url(version, self.platform_info, self.url_template)

    def download(self, version: str, dest_path: Path) -> None:
        """Download the archive for ``version`` to ``dest_path``.

        The body is streamed to a ``.part`` sibling and renamed into place
        once complete, so ``dest_path`` only ever holds a whole archive.

        Raises:
            NetworkError: If the request cannot be made or completed.
            HTTPStatusError: If the server answers with a non-success status.
            FileSystemError: If the archive cannot be written.
        """
        url = self.url_for(version)
        part_path = dest_path.with_name(dest_path.name + ".part")

        with self.client.get(url) as response:
            try:
                fd = os.open(part_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, ARCHIVE_FILE_MODE)
            except OSError as e:
                raise FileSystemError(f"couldn't write file {dest_path}: {e}") from e

            with os.fdopen(fd, "wb") as f:
                total = 0
                while True:
                    chunk = response.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    try:
                        f.write(chunk)
                    except OSError as e:
                        raise FileSystemError(f"couldn't write file {dest_path}: {e}") from e
                    total += len(chunk)

        try:
            os.chmod(part_path, ARCHIVE_FILE_MODE)
            os.replace(part_path, dest_path)
        except OSError as e:
            raise FileSystemError(f"couldn't write file {dest_path}: {e}") from e

        LOGGER.info(f"Downloaded {total} bytes from {url} to {dest_path}")

    def ensure_artifact(self, version: str, dest_path: Path) -> bool:
        """Download the archive unless ``dest_path`` already exists.

        An existing file is trusted as-is; it is neither re-downloaded nor
        re-verified.

        Returns:
            True if a download happened, False if the staged file was reused.
        """
        if dest_path.exists():
            LOGGER.info(f"Using staged archive {dest_path}")
            return False
        self.download(version, dest_path)
        return True
