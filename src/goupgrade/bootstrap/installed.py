"""Read the version of the toolchain installed on this host."""

from __future__ import annotations

from pathlib import Path

from goupgrade.core.errors import FileSystemError, NotInstalledError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_VERSION_FILE = Path("/usr/local/go/VERSION")


def read_installed_version(version_file: Path = DEFAULT_VERSION_FILE) -> str:
    """Return the version string recorded in the toolchain's VERSION file.

    Recent Go releases append build metadata (``time ...``) after the first
    line, so only the first non-empty line is returned.

    Args:
        version_file: Path to the VERSION file.

    Returns:
        Version string, e.g. ``go1.22.0``.

    Raises:
        NotInstalledError: If the file does not exist.
        FileSystemError: If the file exists but cannot be read.
    """
    if not version_file.exists():
        raise NotInstalledError(f"go installation not found ({version_file} is missing)")

    try:
        content = version_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"couldn't read file {version_file}: {e}") from e

    for line in content.splitlines():
        line = line.strip()
        if line:
            LOGGER.debug(f"Installed version from {version_file}: {line}")
            return line

    return ""
