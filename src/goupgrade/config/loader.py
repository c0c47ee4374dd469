"""Configuration file loading and merging.

Defaults reproduce the historical hard-wired behaviour, so no file is read
unless one is named explicitly. Precedence (highest to lowest):

1. CLI flags
2. The file given with ``--config``
3. Built-in defaults

String values may reference environment variables as ``${VAR}`` or
``${VAR:-default}``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from goupgrade.config.models import UpgraderConfig
from goupgrade.config.validation import (
    PATH_KEYS,
    VALID_TOP_LEVEL_KEYS,
    ValidationSeverity,
    validate_config,
)
from goupgrade.core.errors import ConfigError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> UpgraderConfig:
    """Load configuration with proper precedence.

    Args:
        config_path: Optional YAML file (the ``--config`` flag).
        cli_overrides: Dict of CLI flag overrides; None values are ignored.

    Returns:
        Merged UpgraderConfig instance.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML or
            holds invalid values.
    """
    sources: List[str] = ["defaults"]
    merged: Dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            file_dict = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Couldn't read config file {config_path}: {e}") from e
        _check(file_dict, source=str(config_path))
        merged.update(file_dict)
        sources.append(f"file:{config_path}")
        LOGGER.debug(f"Loaded config from {config_path}")

    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    if overrides:
        _check(overrides, source="command line")
        merged.update(overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _check(data: Dict[str, Any], source: str) -> None:
    issues = validate_config(data, source=source)
    for issue in issues:
        if issue.severity == ValidationSeverity.WARNING:
            LOGGER.warning(str(issue))
    errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
    if errors:
        raise ConfigError("; ".join(str(e) for e in errors))


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def dict_to_config(data: Dict[str, Any]) -> UpgraderConfig:
    """Convert a validated dict to a typed UpgraderConfig.

    Unknown keys have already been reported and are dropped here.
    """
    config = UpgraderConfig()
    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            continue
        if key in PATH_KEYS and value is not None:
            value = Path(value).expanduser()
        elif key == "timeout" and value is not None:
            value = float(value)
        setattr(config, key, value)
    return config
