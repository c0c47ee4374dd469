"""Process exit codes.

Pipeline failures use the code carried by their exception class; see
goupgrade.core.errors for the per-error mapping.
"""

from goupgrade.core.errors import (
    EXIT_CONFIG_ERROR,
    EXIT_FILESYSTEM_ERROR,
    EXIT_FORMAT_ERROR,
    EXIT_HTTP_STATUS_ERROR,
    EXIT_NETWORK_ERROR,
    EXIT_NOT_FOUND,
    EXIT_PARSE_ERROR,
)

EXIT_SUCCESS = 0
EXIT_UPDATE_AVAILABLE = 1

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_UPDATE_AVAILABLE",
    "EXIT_NETWORK_ERROR",
    "EXIT_HTTP_STATUS_ERROR",
    "EXIT_NOT_FOUND",
    "EXIT_PARSE_ERROR",
    "EXIT_FILESYSTEM_ERROR",
    "EXIT_FORMAT_ERROR",
    "EXIT_CONFIG_ERROR",
]
