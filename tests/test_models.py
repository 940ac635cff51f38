import pytest

from dbfilter.core.errors import IdentifierTooLongError, ParseError
from dbfilter.core.models import (
    IDENTIFIER_MAX_BYTES,
    ExtensionEntry,
    FilterKind,
    Identifier,
    Policy,
    SchemaEntry,
    Section,
    TableEntry,
    complement,
)


def test_identifier_rejects_oversize_values_instead_of_truncating():
    with pytest.raises(IdentifierTooLongError) as excinfo:
        Identifier("n" * (IDENTIFIER_MAX_BYTES + 1))

    assert excinfo.value.size == IDENTIFIER_MAX_BYTES + 1
    assert isinstance(excinfo.value, ParseError)


def test_entries_coerce_names_to_identifiers():
    assert isinstance(SchemaEntry(name="public").name, Identifier)
    assert isinstance(ExtensionEntry(name="postgis").name, Identifier)
    entry = TableEntry(schema="public", relation="orders")
    assert isinstance(entry.schema, Identifier)
    assert isinstance(entry.relation, Identifier)


def test_entries_reject_oversize_names():
    with pytest.raises(IdentifierTooLongError):
        SchemaEntry(name="s" * 64)


@pytest.mark.parametrize(
    ("kind", "dual"),
    [
        (FilterKind.INCLUDE, FilterKind.LIST_NOT_INCLUDED),
        (FilterKind.EXCLUDE, FilterKind.LIST_EXCLUDED),
        (FilterKind.EXCLUDE_INDEX_ONLY, FilterKind.LIST_EXCLUDED_INDEX_ONLY),
        (FilterKind.EXCLUDE_EXTENSION_ONLY, FilterKind.LIST_EXCLUDED_EXTENSION_ONLY),
    ],
)
def test_complement_pairs_are_involutions(kind: FilterKind, dual: FilterKind):
    assert complement(kind) is dual
    assert complement(dual) is kind
    assert complement(complement(kind)) is kind
    assert kind.complement() is dual


def test_complement_of_none_is_none():
    assert complement(FilterKind.NONE) is FilterKind.NONE


def test_every_kind_has_a_complement():
    for kind in FilterKind:
        assert isinstance(complement(kind), FilterKind)


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("INCLUDE", FilterKind.INCLUDE),
        ("LIST_EXCLUDED_INDEX_ONLY", FilterKind.LIST_EXCLUDED_INDEX_ONLY),
        ("SOURCE_FILTER_TYPE_INCL", FilterKind.INCLUDE),
        ("SOURCE_FILTER_LIST_EXCL", FilterKind.LIST_EXCLUDED),
        ("SOURCE_FILTER_TYPE_EXCL_INDEX", FilterKind.EXCLUDE_INDEX_ONLY),
    ],
)
def test_filter_kind_from_name(name: str, kind: FilterKind):
    assert FilterKind.from_name(name) is kind


def test_filter_kind_from_name_unknown():
    assert FilterKind.from_name("SOMETHING_ELSE") is None


def test_section_attr_matches_policy_fields():
    policy = Policy()
    for section in Section:
        assert policy.entries(section) == ()


def test_policy_counts_and_is_empty():
    policy = Policy(
        exclude_schema=(SchemaEntry(name="tmp"), SchemaEntry(name="tmp")),
        exclude_index=(TableEntry(schema="public", relation="orders_idx"),),
    )

    counts = policy.counts()
    assert list(counts) == list(Section)
    assert counts[Section.EXCLUDE_SCHEMA] == 2
    assert counts[Section.EXCLUDE_INDEX] == 1
    assert policy.is_empty() is False
    assert Policy().is_empty() is True


def test_policy_finalize_sets_lifecycle_flags():
    policy = Policy(exclude_schema=(SchemaEntry(name="tmp"),))

    final = policy.finalize(read_only=True)

    assert final.prepared is True
    assert final.read_only is True
    assert policy.prepared is False
    assert final == policy
