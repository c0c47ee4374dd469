"""Tests for Go version parsing and comparison."""

from __future__ import annotations

import itertools

import pytest

from goupgrade.core.errors import VersionParseError
from goupgrade.core.version import Version, is_newer, parse_version, strip_prefix


class TestParseVersion:
    """Tests for parse_version."""

    def test_parses_prefixed_version(self) -> None:
        assert parse_version("go1.22.0") == Version(1, 22, 0)

    def test_parses_without_prefix(self) -> None:
        assert parse_version("1.22.0") == Version(1, 22, 0)

    def test_ignores_surrounding_whitespace(self) -> None:
        assert parse_version("  go1.23.1\n") == Version(1, 23, 1)

    def test_parses_zero_version(self) -> None:
        assert parse_version("go0.0.0") == Version.zero()

    def test_large_components(self) -> None:
        assert parse_version("go10.200.3000") == Version(10, 200, 3000)

    def test_two_components_fails(self) -> None:
        with pytest.raises(VersionParseError, match="expected 3 components"):
            parse_version("go1.22")

    def test_four_components_fails(self) -> None:
        with pytest.raises(VersionParseError):
            parse_version("go1.22.0.1")

    @pytest.mark.parametrize(
        "value",
        ["go1.22rc1.0", "go1.x.0", "go1..0", "go1.-2.0", "go1.+2.0", "go1.2.²", "", "go"],
    )
    def test_non_numeric_component_fails(self, value: str) -> None:
        with pytest.raises(VersionParseError):
            parse_version(value)

    def test_release_candidate_fails(self) -> None:
        with pytest.raises(VersionParseError):
            parse_version("go1.23rc2")


class TestStripPrefix:
    """Tests for strip_prefix."""

    def test_strips_go(self) -> None:
        assert strip_prefix("go1.2.3") == "1.2.3"

    def test_leaves_unprefixed(self) -> None:
        assert strip_prefix("1.2.3") == "1.2.3"


class TestVersion:
    """Tests for the Version value type."""

    def test_str_renders_release_tag(self) -> None:
        assert str(Version(1, 23, 1)) == "go1.23.1"

    def test_zero(self) -> None:
        assert Version.zero().as_tuple() == (0, 0, 0)

    def test_is_hashable(self) -> None:
        assert len({Version(1, 2, 3), Version(1, 2, 3)}) == 1


class TestIsNewer:
    """Tests for is_newer."""

    def test_lower_minor_with_higher_patch_is_not_newer(self) -> None:
        assert is_newer(Version(1, 21, 5), Version(1, 20, 9)) is False

    def test_major_bump_is_newer(self) -> None:
        assert is_newer(Version(1, 9, 9), Version(2, 0, 0)) is True

    def test_equal_is_not_newer(self) -> None:
        assert is_newer(Version(1, 2, 3), Version(1, 2, 3)) is False

    def test_patch_bump_is_newer(self) -> None:
        assert is_newer(Version(1, 22, 0), Version(1, 22, 1)) is True

    def test_minor_bump_is_newer(self) -> None:
        assert is_newer(Version(1, 22, 9), Version(1, 23, 0)) is True

    def test_lower_major_with_higher_minor_is_not_newer(self) -> None:
        assert is_newer(Version(2, 0, 0), Version(1, 99, 99)) is False

    def test_higher_patch_with_lower_minor_is_not_newer(self) -> None:
        assert is_newer(Version(1, 22, 0), Version(1, 21, 7)) is False

    def test_anything_is_newer_than_zero(self) -> None:
        assert is_newer(Version.zero(), Version(0, 0, 1)) is True

    def test_consistent_with_tuple_ordering(self) -> None:
        values = [Version(*t) for t in itertools.product(range(3), repeat=3)]
        for current, target in itertools.product(values, repeat=2):
            assert is_newer(current, target) == (target.as_tuple() > current.as_tuple())

    def test_is_a_strict_order(self) -> None:
        values = [Version(*t) for t in itertools.product(range(3), repeat=3)]
        for a, b in itertools.product(values, repeat=2):
            # Never both directions, and exactly one direction unless equal
            assert not (is_newer(a, b) and is_newer(b, a))
            if a != b:
                assert is_newer(a, b) or is_newer(b, a)
