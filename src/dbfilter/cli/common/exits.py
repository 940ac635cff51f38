"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from dbfilter.cli.common.output import out


def exit_from_exc(exc: Exception, *, message: str | None = None, code: int = 1) -> NoReturn:
    """
    Print an error message for exc and exit with a given code.

    The exception message is used when no explicit message is given.
    """
    out.error(message or str(exc))
    raise typer.Exit(code) from exc
