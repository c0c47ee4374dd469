"""Error taxonomy for the upgrade pipeline.

Every stage raises a subclass of :class:`UpgradeError`. The CLI maps each
class to its own process exit code; nothing else catches them, with the
single exception of :class:`NotInstalledError`, which the installer turns
into a zero version.
"""

from __future__ import annotations

from typing import Optional

# 2 is left to argparse usage errors
EXIT_NETWORK_ERROR = 3
EXIT_HTTP_STATUS_ERROR = 4
EXIT_NOT_FOUND = 5
EXIT_PARSE_ERROR = 6
EXIT_FILESYSTEM_ERROR = 7
EXIT_FORMAT_ERROR = 8
EXIT_CONFIG_ERROR = 9
EXIT_PIPELINE_ERROR = 10


class UpgradeError(Exception):
    """Base class for all pipeline failures."""

    exit_code: int = EXIT_PIPELINE_ERROR


class NetworkError(UpgradeError):
    """The HTTP request could not be made or completed."""

    exit_code = EXIT_NETWORK_ERROR


class HTTPStatusError(NetworkError):
    """The server answered with a non-success status."""

    exit_code = EXIT_HTTP_STATUS_ERROR

    def __init__(self, url: str, status: int, reason: Optional[str] = None):
        self.url = url
        self.status = status
        self.reason = reason or ""
        detail = f"{status} {self.reason}".strip()
        super().__init__(f"invalid response from {url}, status: {detail}")


class NotFoundError(UpgradeError):
    """The version source did not publish a matching release."""

    exit_code = EXIT_NOT_FOUND


class NotInstalledError(UpgradeError):
    """No toolchain version file exists on this host.

    The installer always recovers from this by installing from scratch, so it
    never reaches the CLI and keeps the base exit code.
    """


class VersionParseError(UpgradeError):
    """A version string is not of the form go<major>.<minor>.<patch>."""

    exit_code = EXIT_PARSE_ERROR


class FileSystemError(UpgradeError):
    """A file could not be opened, read, written or removed."""

    exit_code = EXIT_FILESYSTEM_ERROR


class ArchiveFormatError(UpgradeError):
    """The gzip or tar stream is malformed or unsafe."""

    exit_code = EXIT_FORMAT_ERROR


class ConfigError(UpgradeError):
    """Configuration loading or parsing error."""

    exit_code = EXIT_CONFIG_ERROR
