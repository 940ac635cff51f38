"""Core domain models for source filtering.

These models describe a filtering policy in a simple, immutable form: the
entries listed in each configuration section, the overall filter kind, and
the lifecycle flags used by consumers once the policy is finalized. They are
intentionally free of file-format and CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from dbfilter.core.errors import FilterWarning, IdentifierTooLongError, ParseError

# Postgres NAMEDATALEN is 64, including the terminating zero byte.
IDENTIFIER_MAX_BYTES = 63


class Identifier(str):
    """
    A schema, relation or extension name bounded to IDENTIFIER_MAX_BYTES.

    Longer values are rejected at construction, never truncated: a silently
    shortened name would select a different object.
    """

    __slots__ = ()

    def __new__(cls, value: str = "") -> Identifier:
        try:
            size = len(value.encode("utf-8"))
        except UnicodeEncodeError as exc:
            raise ParseError(f"Failed to parse name {value!r}: not valid UTF-8 text") from exc
        if size > IDENTIFIER_MAX_BYTES:
            raise IdentifierTooLongError(value, size, IDENTIFIER_MAX_BYTES)
        return super().__new__(cls, value)


def quote_identifier(name: str) -> str:
    """Return name wrapped in double quotes, as used in diagnostics."""
    return f'"{name}"'


@dataclass(frozen=True)
class SchemaEntry:
    """A schema listed in a schema section."""

    name: Identifier

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", Identifier(self.name))


@dataclass(frozen=True)
class ExtensionEntry:
    """An extension listed in an extension section."""

    name: Identifier

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", Identifier(self.name))


@dataclass(frozen=True)
class TableEntry:
    """
    A relation listed in a table-like section.

    Attributes:
        schema: Name of the schema (namespace) holding the relation.
        relation: Name of the table or index.
    """

    schema: Identifier
    relation: Identifier

    def __post_init__(self) -> None:
        object.__setattr__(self, "schema", Identifier(self.schema))
        object.__setattr__(self, "relation", Identifier(self.relation))

    @property
    def qualified_name(self) -> str:
        return f"{quote_identifier(self.schema)}.{quote_identifier(self.relation)}"


class Section(str, Enum):
    """
    Configuration sections understood by the filtering setup.

    Declaration order is the order in which sections are loaded and reported.
    """

    INCLUDE_ONLY_SCHEMA = "include-only-schema"
    EXCLUDE_SCHEMA = "exclude-schema"
    EXCLUDE_TABLE = "exclude-table"
    EXCLUDE_TABLE_DATA = "exclude-table-data"
    EXCLUDE_INDEX = "exclude-index"
    INCLUDE_ONLY_TABLE = "include-only-table"
    EXCLUDE_EXTENSION = "exclude-extension"
    INCLUDE_ONLY_EXTENSION = "include-only-extension"

    @property
    def attr(self) -> str:
        """Name of the Policy attribute holding this section's entries."""
        return self.name.lower()


class FilterKind(str, Enum):
    """
    Overall classification of a filtering policy.

    Values:
        NONE: No filtering configured.
        INCLUDE: Only the include-only-table list is copied.
        EXCLUDE: Exclusion lists apply (include-only-schema counts as one).
        EXCLUDE_INDEX_ONLY: Only indexes are filtered, all data is copied.
        EXCLUDE_EXTENSION_ONLY: Only extensions are filtered.
        LIST_*: Reverse-sense kinds, used when reporting the complement.
    """

    NONE = "NONE"
    INCLUDE = "INCLUDE"
    EXCLUDE = "EXCLUDE"
    LIST_NOT_INCLUDED = "LIST_NOT_INCLUDED"
    LIST_EXCLUDED = "LIST_EXCLUDED"
    EXCLUDE_INDEX_ONLY = "EXCLUDE_INDEX_ONLY"
    LIST_EXCLUDED_INDEX_ONLY = "LIST_EXCLUDED_INDEX_ONLY"
    EXCLUDE_EXTENSION_ONLY = "EXCLUDE_EXTENSION_ONLY"
    LIST_EXCLUDED_EXTENSION_ONLY = "LIST_EXCLUDED_EXTENSION_ONLY"

    def complement(self) -> FilterKind:
        return complement(self)

    @classmethod
    def from_name(cls, value: str) -> FilterKind | None:
        """
        Resolve a kind from its canonical name or a legacy alias.

        Returns None when the name is not recognized.
        """
        try:
            return cls(value)
        except ValueError:
            return _LEGACY_NAMES.get(value)


_COMPLEMENTS: dict[FilterKind, FilterKind] = {
    FilterKind.INCLUDE: FilterKind.LIST_NOT_INCLUDED,
    FilterKind.LIST_NOT_INCLUDED: FilterKind.INCLUDE,
    FilterKind.EXCLUDE: FilterKind.LIST_EXCLUDED,
    FilterKind.LIST_EXCLUDED: FilterKind.EXCLUDE,
    FilterKind.EXCLUDE_INDEX_ONLY: FilterKind.LIST_EXCLUDED_INDEX_ONLY,
    FilterKind.LIST_EXCLUDED_INDEX_ONLY: FilterKind.EXCLUDE_INDEX_ONLY,
    FilterKind.EXCLUDE_EXTENSION_ONLY: FilterKind.LIST_EXCLUDED_EXTENSION_ONLY,
    FilterKind.LIST_EXCLUDED_EXTENSION_ONLY: FilterKind.EXCLUDE_EXTENSION_ONLY,
}

# Kind names used by documents written with the long SOURCE_FILTER_* spelling.
_LEGACY_NAMES: dict[str, FilterKind] = {
    "SOURCE_FILTER_TYPE_NONE": FilterKind.NONE,
    "SOURCE_FILTER_TYPE_INCL": FilterKind.INCLUDE,
    "SOURCE_FILTER_TYPE_EXCL": FilterKind.EXCLUDE,
    "SOURCE_FILTER_TYPE_LIST_NOT_INCL": FilterKind.LIST_NOT_INCLUDED,
    "SOURCE_FILTER_LIST_EXCL": FilterKind.LIST_EXCLUDED,
    "SOURCE_FILTER_TYPE_LIST_EXCL": FilterKind.LIST_EXCLUDED,
    "SOURCE_FILTER_TYPE_EXCL_INDEX": FilterKind.EXCLUDE_INDEX_ONLY,
    "SOURCE_FILTER_TYPE_LIST_EXCL_INDEX": FilterKind.LIST_EXCLUDED_INDEX_ONLY,
    "SOURCE_FILTER_TYPE_EXCL_EXTENSION": FilterKind.EXCLUDE_EXTENSION_ONLY,
    "SOURCE_FILTER_TYPE_LIST_EXCL_EXTENSION": FilterKind.LIST_EXCLUDED_EXTENSION_ONLY,
}


def complement(kind: FilterKind) -> FilterKind:
    """
    Return the reverse-sense kind of the given filter kind.

    Instead of listing the include-only tables, list the tables that are not
    included; instead of listing the tables that are not excluded, list the
    tables that are excluded. Kinds without a dual map to NONE.
    """
    return _COMPLEMENTS.get(kind, FilterKind.NONE)


@dataclass(frozen=True)
class Policy:
    """
    Complete filtering setup for one copy operation.

    A Policy is populated once, either from configuration sections or from
    its JSON encoding, and is then treated as read-only. The `kind` is
    derived by the classifier; the decode path trusts the encoded value.
    """

    include_only_schema: tuple[SchemaEntry, ...] = ()
    exclude_schema: tuple[SchemaEntry, ...] = ()
    exclude_table: tuple[TableEntry, ...] = ()
    exclude_table_data: tuple[TableEntry, ...] = ()
    exclude_index: tuple[TableEntry, ...] = ()
    include_only_table: tuple[TableEntry, ...] = ()
    exclude_extension: tuple[ExtensionEntry, ...] = ()
    include_only_extension: tuple[ExtensionEntry, ...] = ()
    kind: FilterKind = FilterKind.NONE
    prepared: bool = field(default=False, compare=False)
    read_only: bool = field(default=False, compare=False)

    def entries(self, section: Section) -> tuple:
        """Return the entries configured for a section."""
        return getattr(self, section.attr)

    def counts(self) -> dict[Section, int]:
        """Return the number of entries per section, in section order."""
        return {section: len(self.entries(section)) for section in Section}

    def is_empty(self) -> bool:
        return not any(self.entries(section) for section in Section)

    def finalize(self, *, read_only: bool = False) -> Policy:
        """Return a copy of this policy marked as prepared."""
        return replace(self, prepared=True, read_only=read_only)


@dataclass(frozen=True)
class FilterResult:
    """A policy together with the warnings raised while building it."""

    policy: Policy
    warnings: tuple[FilterWarning, ...] = ()
