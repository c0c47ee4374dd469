"""Configuration validation for goupgrade.

Unknown keys are reported as warnings with a close-match suggestion; values
of the wrong type or outside their allowed set are errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from goupgrade.config.models import VALID_SOURCES
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.source}: {self.message}"
        if self.suggestion:
            text += f" (did you mean '{self.suggestion}'?)"
        return text


STRING_KEYS: Set[str] = {
    "source",
    "listing_url",
    "json_feed_url",
    "download_url_template",
    "toolchain_dir_name",
}

PATH_KEYS: Set[str] = {
    "install_root",
    "version_file",
    "staging_dir",
}

VALID_TOP_LEVEL_KEYS: Set[str] = STRING_KEYS | PATH_KEYS | {"timeout"}


def _suggest_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest the closest valid key for a typo, if any."""
    matches = get_close_matches(key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationIssue]:
    """Validate a raw configuration dictionary.

    Args:
        data: Parsed configuration mapping.
        source: Where the data came from, used in messages.

    Returns:
        List of issues found; empty when the config is valid.
    """
    issues: List[ConfigValidationIssue] = []

    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            issues.append(
                ConfigValidationIssue(
                    message=f"Unknown key '{key}'",
                    source=source,
                    severity=ValidationSeverity.WARNING,
                    key=key,
                    suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
                )
            )
            continue

        if value is None and key in ("version_file", "timeout"):
            continue

        if key in STRING_KEYS | PATH_KEYS and not isinstance(value, str):
            issues.append(_error(f"'{key}' must be a string", source, key))
        elif key == "timeout" and (
            isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0
        ):
            issues.append(_error("'timeout' must be a positive number or null", source, key))

    if isinstance(data.get("source"), str) and data["source"] not in VALID_SOURCES:
        issues.append(
            _error(
                f"Invalid source '{data['source']}', expected one of: {', '.join(VALID_SOURCES)}",
                source,
                "source",
            )
        )

    template = data.get("download_url_template")
    if isinstance(template, str) and "{version}" not in template:
        issues.append(_error("'download_url_template' must contain '{version}'", source, "download_url_template"))

    # The toolchain directory is removed on upgrade; it must be a direct child of install_root
    dir_name = data.get("toolchain_dir_name")
    if isinstance(dir_name, str) and not is_plain_dir_name(dir_name):
        issues.append(
            _error(
                f"Invalid toolchain_dir_name {dir_name!r}: must be a single directory name",
                source,
                "toolchain_dir_name",
            )
        )

    for issue in issues:
        LOGGER.debug(f"Config issue: {issue}")

    return issues


def is_plain_dir_name(name: str) -> bool:
    """True if ``name`` names exactly one directory below its parent."""
    stripped = name.strip()
    if stripped in ("", ".", ".."):
        return False
    return "/" not in name and "\\" not in name


def _error(message: str, source: str, key: str) -> ConfigValidationIssue:
    return ConfigValidationIssue(
        message=message,
        source=source,
        severity=ValidationSeverity.ERROR,
        key=key,
    )
