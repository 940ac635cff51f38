"""Loading filter sections into a Policy.

The mapping from configuration section to Policy list is declared once in
SECTION_SPECS. Each spec names the section and the shape of its entries;
the loader walks the table and never branches on section names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from dbfilter.core.errors import ParseError
from dbfilter.core.models import (
    ExtensionEntry,
    Policy,
    SchemaEntry,
    Section,
    TableEntry,
)
from dbfilter.core.names import parse_qualified_name

log = logging.getLogger(__name__)


class SectionSource(Protocol):
    """Interface for the key/value section parser used by the loader."""

    def find_section(self, name: str) -> str | None:
        """
        Look up a section by name.

        Returns the name of the section found, which may differ from the
        requested one when the parser matches on prefixes, or None.
        """
        ...

    def property_names(self, section: str) -> list[str]:
        """Return the property names of a section, in file order."""
        ...


class EntryShape(str, Enum):
    """How property names of a section are turned into entries."""

    SCHEMA = "schema"
    EXTENSION = "extension"
    TABLE = "table"


@dataclass(frozen=True)
class SectionSpec:
    """Describes one configuration section and where its entries go."""

    section: Section
    shape: EntryShape
    verb: str


SECTION_SPECS: tuple[SectionSpec, ...] = (
    SectionSpec(Section.INCLUDE_ONLY_SCHEMA, EntryShape.SCHEMA, "including only schema"),
    SectionSpec(Section.EXCLUDE_SCHEMA, EntryShape.SCHEMA, "excluding schema"),
    SectionSpec(Section.EXCLUDE_TABLE, EntryShape.TABLE, "excluding table"),
    SectionSpec(Section.EXCLUDE_TABLE_DATA, EntryShape.TABLE, "excluding data of table"),
    SectionSpec(Section.EXCLUDE_INDEX, EntryShape.TABLE, "excluding index"),
    SectionSpec(Section.INCLUDE_ONLY_TABLE, EntryShape.TABLE, "including only table"),
    SectionSpec(Section.EXCLUDE_EXTENSION, EntryShape.EXTENSION, "excluding extension"),
    SectionSpec(
        Section.INCLUDE_ONLY_EXTENSION, EntryShape.EXTENSION, "including only extension"
    ),
)


def build_entry(shape: EntryShape, value: str) -> SchemaEntry | ExtensionEntry | TableEntry:
    """Convert one property name into the entry type of its section."""
    if shape is EntryShape.TABLE:
        return parse_qualified_name(value)
    if shape is EntryShape.SCHEMA:
        return SchemaEntry(name=value)
    return ExtensionEntry(name=value)


def _load_section(source: SectionSource, spec: SectionSpec) -> tuple:
    """Return the entries of one section, or an empty tuple if unused."""
    name = spec.section.value
    found = source.find_section(name)

    if found is None:
        log.debug('Section "%s" not found', name)
        return ()

    if found != name:
        # only accept a full length match
        log.debug('Skipping section "%s" found for "%s"', found, name)
        return ()

    properties = source.property_names(found)
    log.debug('Section "%s" has %d entries', name, len(properties))

    if not properties:
        return ()

    entries = tuple(build_entry(spec.shape, prop) for prop in properties)
    for entry in entries:
        shown = entry.qualified_name if spec.shape is EntryShape.TABLE else f'"{entry.name}"'
        log.debug("%s %s", spec.verb, shown)
    return entries


def load_sections(source: SectionSource) -> Policy:
    """
    Build an unclassified Policy from the recognized filter sections.

    Sections that are missing or empty leave their list empty. The first
    property name that fails to parse aborts the whole load.

    Args:
        source: Section parser holding the filter configuration.

    Returns:
        A Policy whose kind is still FilterKind.NONE.

    Raises:
        ParseError: If a table-like entry or any name is invalid.
    """
    lists: dict[str, tuple] = {}
    for spec in SECTION_SPECS:
        try:
            lists[spec.section.attr] = _load_section(source, spec)
        except ParseError as exc:
            raise ParseError(
                f'Invalid entry in section "{spec.section.value}": {exc}'
            ) from exc
    return Policy(**lists)
