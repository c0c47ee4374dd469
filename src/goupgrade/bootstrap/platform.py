"""Target platform for Go toolchain archives.

Only a single platform target is supported. The host is inspected purely so
a mismatch can be reported; it never changes which archive is fetched.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

ARCHIVE_EXTENSION = ".tar.gz"


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to Go's naming.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


@dataclass(frozen=True)
class PlatformInfo:
    """An OS/architecture pair as it appears in Go archive names.

    Attributes:
        os: Operating system (linux).
        arch: CPU architecture (amd64).
    """

    os: str
    arch: str

    @property
    def suffix(self) -> str:
        """Return the archive name suffix for this platform.

        Example: "linux-amd64"
        """
        return f"{self.os}-{self.arch}"

    def archive_name(self, version: str) -> str:
        """File name of the release archive for ``version``.

        Example: "go1.23.1.linux-amd64.tar.gz"
        """
        return f"{version}.{self.suffix}{ARCHIVE_EXTENSION}"

    def matches_host(self) -> bool:
        """Check whether the running host is this platform."""
        host_os = platform.system().lower()
        host_arch = normalize_arch(platform.machine())
        return host_os == self.os and host_arch == self.arch


TARGET_PLATFORM = PlatformInfo(os="linux", arch="amd64")
