"""Common CLI options for the CLI."""

import typer

FILTERS_ENV = "DBFILTER_FILTERS"

FiltersFileArg = typer.Argument(
    ...,
    envvar=FILTERS_ENV,
    help="Filters file in INI format, with sections such as exclude-table",
    show_default=False,
)

JsonFileArg = typer.Argument(
    ...,
    help="JSON document holding an encoded filtering setup ('-' for stdin)",
    show_default=False,
)

VerboseOpt = typer.Option(
    0,
    "--verbose",
    "-v",
    count=True,
    help="Increase log verbosity (repeatable)",
)

OutputOpt = typer.Option(
    None,
    "--output",
    "-o",
    help="Write the JSON document to this file instead of stdout",
)

IndentOpt = typer.Option(
    2,
    "--indent",
    help="Indentation of the JSON document (0 for a single line)",
    min=0,
)

ValidateOpt = typer.Option(
    False,
    "--validate",
    help="Run the section checks again on the decoded filtering setup",
)
