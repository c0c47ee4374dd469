"""Go release version parsing and comparison.

Go release tags look like ``go1.22.0``. A version is exactly three
non-negative integer components after the ``go`` prefix; anything else is
rejected rather than guessed at.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from goupgrade.core.errors import VersionParseError

VERSION_PREFIX = "go"


@dataclass(frozen=True, order=True)
class Version:
    """An ordered (major, minor, patch) triple.

    Field order makes the generated comparison methods lexicographic.
    """

    major: int
    minor: int
    patch: int

    @classmethod
    def zero(cls) -> "Version":
        """Version used when no toolchain is installed."""
        return cls(0, 0, 0)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{VERSION_PREFIX}{self.major}.{self.minor}.{self.patch}"


def strip_prefix(value: str, prefix: str = VERSION_PREFIX) -> str:
    """Remove the release prefix, if present, from a version string."""
    value = value.strip()
    if prefix and value.startswith(prefix):
        return value[len(prefix):]
    return value


def parse_version(value: str, prefix: str = VERSION_PREFIX) -> Version:
    """Parse ``go<major>.<minor>.<patch>`` into a :class:`Version`.

    Args:
        value: Version string, with or without the prefix.
        prefix: Release prefix to strip before splitting.

    Returns:
        The parsed Version.

    Raises:
        VersionParseError: On a wrong component count or a component that is
            not a plain non-negative decimal integer.
    """
    parts = strip_prefix(value, prefix).split(".")
    if len(parts) != 3:
        raise VersionParseError(
            f"couldn't parse version {value!r}: expected 3 components, got {len(parts)}"
        )

    numbers = []
    for part in parts:
        # isdigit() alone accepts unicode digits like "²"
        if not (part.isascii() and part.isdigit()):
            raise VersionParseError(f"couldn't convert {part!r} to int in version {value!r}")
        numbers.append(int(part))

    return Version(*numbers)


def is_newer(current: Version, target: Version) -> bool:
    """Return True if ``target`` is strictly newer than ``current``.

    The first differing component decides: a larger major wins regardless
    of minor and patch, and so on down.
    """
    for cur, tgt in zip(current.as_tuple(), target.as_tuple()):
        if tgt != cur:
            return tgt > cur
    return False
