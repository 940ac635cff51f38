"""JSON encoding of filtering policies.

The filtering setup is handed between processes as a JSON document. The
encoding keeps section names as keys, writes schema and extension lists as
arrays of strings and table-like lists as arrays of {"schema", "name"}
objects. Empty lists are left out.

Decoding trusts the document: the encoded "type" is kept as-is and the
classifier is not run again. Callers that want fresh validation call
`dbfilter.core.validation.classify` on the decoded policy.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from dbfilter.core.errors import DecodeError, FilterWarning, ParseError
from dbfilter.core.models import (
    ExtensionEntry,
    FilterKind,
    FilterResult,
    Policy,
    SchemaEntry,
    Section,
    TableEntry,
)
from dbfilter.core.sections import SECTION_SPECS, EntryShape

log = logging.getLogger(__name__)

TYPE_KEY = "type"
SCHEMA_KEY = "schema"
NAME_KEY = "name"


def _encode_entry(shape: EntryShape, entry: Any) -> Any:
    if shape is EntryShape.TABLE:
        return {SCHEMA_KEY: str(entry.schema), NAME_KEY: str(entry.relation)}
    return str(entry.name)


def encode(policy: Policy) -> dict[str, Any]:
    """
    Encode a policy as a JSON-compatible dict.

    The "type" field is always present; each section key is present only
    when its list has entries.
    """
    document: dict[str, Any] = {TYPE_KEY: policy.kind.value}

    for spec in SECTION_SPECS:
        entries = policy.entries(spec.section)
        if entries:
            document[spec.section.value] = [
                _encode_entry(spec.shape, entry) for entry in entries
            ]

    return document


def dumps(policy: Policy, *, indent: int | None = None) -> str:
    """Encode a policy as JSON text."""
    return json.dumps(encode(policy), indent=indent)


class _Decoder:
    """Collects warnings while decoding a single document."""

    def __init__(self) -> None:
        self.warnings: list[FilterWarning] = []

    def warn(self, code: str, message: str, section: Section | None = None) -> None:
        log.warning("%s", message)
        sections = (section.value,) if section else ()
        self.warnings.append(FilterWarning(code=code, message=message, sections=sections))

    def kind(self, value: Any) -> FilterKind:
        if value is None:
            return FilterKind.NONE

        kind = FilterKind.from_name(value) if isinstance(value, str) else None
        if kind is None:
            self.warn("unknown-type", f"Unknown filter type in JSON: {value!r}")
            return FilterKind.NONE
        return kind

    def name(self, item: Any, section: Section, position: int) -> str:
        if isinstance(item, str):
            return item
        self.warn(
            "invalid-entry",
            f'Entry {position} in "{section.value}" is not a string, using an empty name',
            section,
        )
        return ""

    def table(self, item: Any, section: Section, position: int) -> TableEntry:
        if not isinstance(item, dict):
            self.warn(
                "invalid-entry",
                f'Entry {position} in "{section.value}" is not an object, '
                "using an empty table name",
                section,
            )
            return TableEntry(schema="", relation="")

        fields = {}
        for key in (SCHEMA_KEY, NAME_KEY):
            value = item.get(key)
            if not isinstance(value, str):
                self.warn(
                    "missing-field",
                    f'Entry {position} in "{section.value}" has no string '
                    f'"{key}" field, using an empty string',
                    section,
                )
                value = ""
            fields[key] = value

        return TableEntry(schema=fields[SCHEMA_KEY], relation=fields[NAME_KEY])

    def entries(self, document: dict[str, Any], section: Section, shape: EntryShape) -> tuple:
        items = document.get(section.value)
        if items is None:
            return ()
        if not isinstance(items, list):
            self.warn(
                "invalid-section",
                f'Section "{section.value}" is not an array, ignoring it',
                section,
            )
            return ()

        if shape is EntryShape.TABLE:
            return tuple(self.table(item, section, i) for i, item in enumerate(items))
        if shape is EntryShape.SCHEMA:
            return tuple(
                SchemaEntry(name=self.name(item, section, i)) for i, item in enumerate(items)
            )
        return tuple(
            ExtensionEntry(name=self.name(item, section, i)) for i, item in enumerate(items)
        )


def decode(document: Any) -> FilterResult:
    """
    Rebuild a policy from its JSON-compatible encoding.

    Unknown type names and malformed entries are reported as warnings and
    replaced with defaults. Names longer than the identifier limit are
    rejected rather than truncated.

    Args:
        document: Value produced by `json.loads`.

    Returns:
        The decoded policy and the warnings raised while decoding it.

    Raises:
        DecodeError: If the document is not an object or holds an oversize name.
    """
    if not isinstance(document, dict):
        raise DecodeError(
            f"Filters JSON is not an object: {type(document).__name__}"
        )

    decoder = _Decoder()
    kind = decoder.kind(document.get(TYPE_KEY))

    lists: dict[str, tuple] = {}
    try:
        for spec in SECTION_SPECS:
            lists[spec.section.attr] = decoder.entries(document, spec.section, spec.shape)
    except ParseError as exc:
        raise DecodeError(f'Failed to decode section "{spec.section.value}": {exc}') from exc

    return FilterResult(
        policy=Policy(kind=kind, **lists),
        warnings=tuple(decoder.warnings),
    )


def loads(text: str | bytes) -> FilterResult:
    """Decode a policy from JSON text."""
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Failed to parse filters JSON: {exc}") from exc
    return decode(document)
