"""Logging setup for the CLI."""

from __future__ import annotations

import logging
import os

from rich.logging import RichHandler

from dbfilter.cli.common.output import err_console

LOG_LEVEL_ENV = "DBFILTER_LOG_LEVEL"
_DEFAULT_LEVEL = "WARNING"


def resolve_level(verbose: int) -> int:
    """
    Return the log level for a CLI invocation.

    Each --verbose flag lowers the level by one step from the default, which
    is read from DBFILTER_LOG_LEVEL. Unknown level names fall back to WARNING.
    """
    raw = os.getenv(LOG_LEVEL_ENV, _DEFAULT_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        level = logging.WARNING
    return max(level - 10 * verbose, logging.DEBUG)


def setup_logging(verbose: int = 0) -> None:
    """Route library logging to stderr through Rich."""
    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    root = logging.getLogger("dbfilter")
    root.handlers[:] = [handler]
    root.setLevel(resolve_level(verbose))
