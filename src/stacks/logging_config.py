"""
stacks.logging_config — Logging setup for the CLI.

Called once by the ``stack`` entry point. Library modules only do
``logger = logging.getLogger(__name__)``.

Level precedence:
    -v / -vv / -q  >  STACKS_LOG_LEVEL env var  >  WARNING
"""

from __future__ import annotations

import logging
import os
import sys

_FMT = "[%(levelname)s] %(message)s"
_FMT_DEBUG = "[%(levelname)s] %(name)s: %(message)s"


def resolve_level(verbose: int = 0, quiet: bool = False) -> int:
    """Turn CLI flags into a logging level."""
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO

    name = os.environ.get("STACKS_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """Send log records to stderr at ``level``."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(_FMT_DEBUG if level <= logging.DEBUG else _FMT)
    )

    logger = logging.getLogger("stacks")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
