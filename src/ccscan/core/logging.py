"""Logging setup for ccscan.

All modules obtain their logger through :func:`get_logger` so that the
level configured on the command line applies to the whole package.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "ccscan"

_LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
_DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ccscan namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the package root logger.

    Precedence: debug > verbose > quiet > default (warning).

    Args:
        debug: Log everything, with timestamps.
        verbose: Log informational messages.
        quiet: Only log errors.
        stream: Destination stream (default: stderr).
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Reconfiguring replaces our own handler instead of stacking another one
    for handler in list(root.handlers):
        if getattr(handler, "_ccscan_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_DEBUG_LOG_FORMAT if debug else _LOG_FORMAT))
    handler._ccscan_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.propagate = False
