"""Qualified relation name parsing.

Table-like filter sections list relations as `schema.relation`, where either
part may be wrapped in double quotes to carry characters (including dots)
that would otherwise be ambiguous.
"""

from __future__ import annotations

from dbfilter.core.errors import IdentifierTooLongError, ParseError
from dbfilter.core.models import Identifier, TableEntry

QUOTE = '"'
SEPARATOR = "."


def _split_qualified_name(qname: str) -> tuple[str, str]:
    """Split qname at its first unquoted dot into (schema, remainder)."""
    if qname.startswith(QUOTE):
        closing = qname.find(QUOTE, 1)
        if closing == -1 or qname[closing + 1 : closing + 2] != SEPARATOR:
            raise ParseError(f'Failed to parse quoted schema name in "{qname}"')
        return qname[: closing + 1], qname[closing + 2 :]

    dot = qname.find(SEPARATOR)
    if dot == -1:
        raise ParseError(
            f'Failed to find a dot separator in qualified name "{qname}"'
        )
    if dot == 0:
        raise ParseError(f'Failed to parse qualified name "{qname}": it starts with a dot')
    return qname[:dot], qname[dot + 1 :]


def _unquote(part: str, *, what: str, qname: str) -> str:
    """Strip one pair of surrounding double quotes from part."""
    if part.startswith(QUOTE):
        if len(part) < 2 or not part.endswith(QUOTE):
            raise ParseError(f'Failed to parse quoted {what} name in "{qname}"')
        part = part[1:-1]
    if not part:
        raise ParseError(f'Failed to parse empty {what} name in "{qname}"')
    return part


def parse_qualified_name(qname: str) -> TableEntry:
    """
    Parse a maybe-quoted qualified relation name into a TableEntry.

    Accepted forms are `schema.rel`, `"schema".rel`, `schema."rel"` and
    `"schema"."rel"`. Quotes are stripped, not unescaped.

    Args:
        qname: Property name read from a table-like filter section.

    Returns:
        The parsed TableEntry.

    Raises:
        ParseError: If the name is empty, has no separator, has an empty or
            badly quoted part, or a part longer than the identifier limit.
    """
    if not qname:
        raise ParseError("Failed to parse empty qualified name")

    schema, relation = _split_qualified_name(qname)

    # only a trailing dot counts as an empty relation name
    if not relation:
        raise ParseError(
            f'Failed to parse empty relation name after the dot in "{qname}"'
        )

    schema = _unquote(schema, what="schema", qname=qname)
    relation = _unquote(relation, what="relation", qname=qname)

    try:
        return TableEntry(schema=Identifier(schema), relation=Identifier(relation))
    except IdentifierTooLongError as exc:
        raise ParseError(f'Failed to parse qualified name "{qname}": {exc}') from exc
