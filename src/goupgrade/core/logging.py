from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "goupgrade"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI flags to a logging level.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING
    """
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure the goupgrade logger hierarchy based on CLI flags.

    Log records go to stderr so the status lines printed on stdout stay
    readable. Calling this more than once replaces the previous handler
    instead of stacking a new one.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    for handler in list(logger.handlers):
        if getattr(handler, "_goupgrade_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._goupgrade_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else ROOT_LOGGER_NAME)
