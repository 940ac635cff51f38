import json

import pytest

from dbfilter.core.codec import decode, dumps, encode, loads
from dbfilter.core.errors import DecodeError
from dbfilter.core.models import (
    ExtensionEntry,
    FilterKind,
    Policy,
    SchemaEntry,
    TableEntry,
)
from dbfilter.core.validation import classify


def _full_policy() -> Policy:
    return Policy(
        include_only_schema=(SchemaEntry(name="sales"),),
        exclude_table=(
            TableEntry(schema="public", relation="b"),
            TableEntry(schema="My Schema", relation="a.b"),
        ),
        exclude_table_data=(TableEntry(schema="public", relation="audit"),),
        exclude_index=(TableEntry(schema="public", relation="orders_idx"),),
        exclude_extension=(ExtensionEntry(name="postgis"), ExtensionEntry(name="hstore")),
        kind=FilterKind.EXCLUDE,
    )


def test_empty_policy_encodes_to_type_only():
    assert encode(Policy()) == {"type": "NONE"}


def test_encode_writes_sections_with_fixed_keys():
    document = encode(_full_policy())

    assert document == {
        "type": "EXCLUDE",
        "include-only-schema": ["sales"],
        "exclude-table": [
            {"schema": "public", "name": "b"},
            {"schema": "My Schema", "name": "a.b"},
        ],
        "exclude-table-data": [{"schema": "public", "name": "audit"}],
        "exclude-index": [{"schema": "public", "name": "orders_idx"}],
        "exclude-extension": ["postgis", "hstore"],
    }


def test_encode_omits_empty_lists():
    document = encode(Policy(include_only_table=(TableEntry(schema="s", relation="t"),)))

    assert set(document) == {"type", "include-only-table"}


def test_round_trip_preserves_lists_order_and_type():
    policy = _full_policy()

    result = loads(dumps(policy))

    assert result.policy == policy
    assert result.warnings == ()


def test_round_trip_after_classification():
    policy = Policy(exclude_index=(TableEntry(schema="public", relation="i"),))
    policy = Policy(exclude_index=policy.exclude_index, kind=classify(policy).kind)

    decoded = decode(json.loads(json.dumps(encode(policy)))).policy

    assert decoded.kind is FilterKind.EXCLUDE_INDEX_ONLY
    assert decoded == policy


def test_decode_trusts_encoded_type_without_validation():
    document = {
        "type": "INCLUDE",
        "include-only-table": [{"schema": "s", "name": "t"}],
        "exclude-table": [{"schema": "s", "name": "u"}],
    }

    policy = decode(document).policy

    assert policy.kind is FilterKind.INCLUDE
    assert len(policy.exclude_table) == 1


def test_decode_unknown_type_defaults_to_none_with_warning():
    result = decode({"type": "SOMETHING", "exclude-schema": ["tmp"]})

    assert result.policy.kind is FilterKind.NONE
    assert result.policy.exclude_schema == (SchemaEntry(name="tmp"),)
    assert [w.code for w in result.warnings] == ["unknown-type"]


def test_decode_accepts_long_kind_names():
    result = decode({"type": "SOURCE_FILTER_TYPE_EXCL_INDEX"})

    assert result.policy.kind is FilterKind.EXCLUDE_INDEX_ONLY
    assert result.warnings == ()


def test_decode_missing_type_and_arrays():
    result = decode({})

    assert result.policy == Policy()
    assert result.warnings == ()


def test_decode_missing_table_fields_become_empty_strings():
    result = decode({"exclude-table": [{"schema": "public"}, {"name": "t"}]})

    assert result.policy.exclude_table == (
        TableEntry(schema="public", relation=""),
        TableEntry(schema="", relation="t"),
    )
    assert [w.code for w in result.warnings] == ["missing-field", "missing-field"]


def test_decode_malformed_entries_become_empty_entries():
    result = decode({"exclude-schema": [42], "exclude-index": ["public.i"]})

    assert result.policy.exclude_schema == (SchemaEntry(name=""),)
    assert result.policy.exclude_index == (TableEntry(schema="", relation=""),)
    assert len(result.warnings) == 2


def test_decode_ignores_non_array_sections():
    result = decode({"exclude-schema": "tmp"})

    assert result.policy.exclude_schema == ()
    assert [w.code for w in result.warnings] == ["invalid-section"]


@pytest.mark.parametrize("document", [[], "text", 42, None])
def test_decode_rejects_non_objects(document):
    with pytest.raises(DecodeError, match="not an object"):
        decode(document)


@pytest.mark.parametrize("text", ["", "{", "not json", b"\xff{"])
def test_loads_rejects_unparsable_text(text):
    with pytest.raises(DecodeError):
        loads(text)


def test_decode_rejects_oversize_names():
    with pytest.raises(DecodeError, match="exclude-extension"):
        decode({"exclude-extension": ["e" * 64]})


def test_loads_rejects_names_that_are_not_utf8_text():
    with pytest.raises(DecodeError, match="exclude-schema"):
        loads('{"exclude-schema": ["\\ud800"]}')


def test_decode_rejects_lone_surrogates_in_table_names():
    with pytest.raises(DecodeError, match="include-only-table"):
        decode({"include-only-table": [{"schema": "public", "name": "t\udc80"}]})
