"""CLI application for database copy filtering setups."""

import typer

from dbfilter.cli.commands import filters
from dbfilter.cli.common.logs import setup_logging
from dbfilter.cli.common.options import VerboseOpt

app = typer.Typer(
    help="dbfilter - check and convert database copy filtering setups",
    no_args_is_help=True,
)


@app.callback()
def _init(verbose: int = VerboseOpt):
    """Configure logging once per invocation."""
    setup_logging(verbose)


app.command("check")(filters.check)
app.command("dump")(filters.dump)
app.command("show")(filters.show)
app.command("kinds")(filters.kinds)


if __name__ == "__main__":
    app()
