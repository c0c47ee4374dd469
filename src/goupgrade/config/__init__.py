"""Configuration loading for goupgrade."""

from goupgrade.config.loader import load_config
from goupgrade.config.models import UpgraderConfig

__all__ = [
    "load_config",
    "UpgraderConfig",
]
