"""Commands for checking and converting filtering setups."""

from pathlib import Path

import typer

from dbfilter.cli.common.exits import exit_from_exc
from dbfilter.cli.common.options import (
    FiltersFileArg,
    IndentOpt,
    JsonFileArg,
    OutputOpt,
    ValidateOpt,
)
from dbfilter.cli.common.output import out
from dbfilter.core.codec import dumps, loads
from dbfilter.core.errors import FilterError
from dbfilter.core.filters import load_filters
from dbfilter.core.models import FilterKind, FilterResult
from dbfilter.core.validation import classify


def _load_or_exit(filters_file: Path) -> FilterResult:
    """Load a filters file and turn filtering errors into CLI exits."""
    try:
        return load_filters(filters_file)
    except FilterError as exc:
        exit_from_exc(exc, code=1)


def _read_json_or_exit(json_file: str) -> str:
    """Read a JSON document from a file, or from stdin when given '-'."""
    if json_file == "-":
        return typer.get_text_stream("stdin").read()
    try:
        return Path(json_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        exit_from_exc(exc, message=f'Failed to read "{json_file}": {exc}', code=1)


def check(filters_file: Path = FiltersFileArg):
    """
    Validate a filters file and show its filtering setup.
    """
    result = _load_or_exit(filters_file)
    policy = result.policy

    out.header(f"Filtering setup: {filters_file}")
    out.kv(
        {
            "type": policy.kind.value,
            "complement": policy.kind.complement().value,
            "warnings": len(result.warnings),
        }
    )
    out.sections_table(policy)
    out.success("Filtering setup is valid")


def dump(
    filters_file: Path = FiltersFileArg,
    output: Path | None = OutputOpt,
    indent: int = IndentOpt,
):
    """
    Write the JSON encoding of a filters file.
    """
    result = _load_or_exit(filters_file)
    text = dumps(result.policy, indent=indent or None)

    if output is None:
        typer.echo(text)
        return

    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        exit_from_exc(exc, message=f'Failed to write "{output}": {exc}', code=1)
    out.success(f"Filtering setup written to {output}")


def show(
    json_file: str = JsonFileArg,
    validate: bool = ValidateOpt,
):
    """
    Decode a JSON filtering setup and show it.
    """
    text = _read_json_or_exit(json_file)

    try:
        result = loads(text)
        policy = result.policy
        classification = classify(policy, origin=json_file) if validate else None
    except FilterError as exc:
        exit_from_exc(exc, code=1)

    out.header(f"Filtering setup: {json_file}")
    out.kv(
        {
            "type": policy.kind.value,
            "complement": policy.kind.complement().value,
            "warnings": len(result.warnings),
        }
    )
    out.sections_table(policy)

    if classification is not None and classification.kind is not policy.kind:
        out.warn(
            f"Encoded type {policy.kind.value} does not match the "
            f"sections in use, which classify as {classification.kind.value}"
        )
        raise typer.Exit(1)


def kinds():
    """
    List filter kinds and their complement.
    """
    out.kinds_table(FilterKind)
