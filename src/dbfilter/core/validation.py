"""Validation and classification of a filtering policy.

Some sections cannot be combined: with both include-only-table and
exclude-table it is unclear what to do with tables that are neither
included nor excluded. The same holds for the schema and extension pairs.
Once a policy passes these checks it is given a single FilterKind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dbfilter.core.errors import FilterWarning, ValidationError
from dbfilter.core.models import FilterKind, Policy, Section

log = logging.getLogger(__name__)

# Pairs of sections that must not both be used.
EXCLUSIVE_PAIRS: tuple[tuple[Section, Section], ...] = (
    (Section.INCLUDE_ONLY_SCHEMA, Section.EXCLUDE_SCHEMA),
    (Section.INCLUDE_ONLY_TABLE, Section.EXCLUDE_TABLE),
    (Section.INCLUDE_ONLY_EXTENSION, Section.EXCLUDE_EXTENSION),
)

# include-only-schema is spelled as an inclusion but filters by excluding
# every other schema, so it classifies as an exclusion.
EXCLUSION_SECTIONS: tuple[Section, ...] = (
    Section.INCLUDE_ONLY_SCHEMA,
    Section.EXCLUDE_SCHEMA,
    Section.EXCLUDE_TABLE,
    Section.EXCLUDE_TABLE_DATA,
    Section.EXCLUDE_EXTENSION,
    Section.INCLUDE_ONLY_EXTENSION,
)


@dataclass(frozen=True)
class Classification:
    """Result of classifying a policy."""

    kind: FilterKind
    warnings: tuple[FilterWarning, ...] = field(default_factory=tuple)


def _where(origin: str | None) -> str:
    return f' in "{origin}"' if origin else ""


def check_exclusive_sections(policy: Policy, *, origin: str | None = None) -> None:
    """
    Reject policies that use both sections of a mutually exclusive pair.

    Raises:
        ValidationError: Naming both sections and their entry counts.
    """
    for first, second in EXCLUSIVE_PAIRS:
        first_count = len(policy.entries(first))
        second_count = len(policy.entries(second))
        if first_count > 0 and second_count > 0:
            raise ValidationError(
                f"Filtering setup{_where(origin)} contains {first_count} entries "
                f'in section "{first.value}" and {second_count} entries in '
                f'section "{second.value}", please use only one of these sections.',
                sections=(first.value, second.value),
                counts=(first_count, second_count),
            )


def collect_warnings(policy: Policy, *, origin: str | None = None) -> list[FilterWarning]:
    """Return advisories for section combinations that are allowed but risky."""
    warnings: list[FilterWarning] = []

    included = len(policy.include_only_table)
    excluded = len(policy.exclude_schema)
    if included > 0 and excluded > 0:
        warnings.append(
            FilterWarning(
                code="exclude-schema-with-include-only-table",
                message=(
                    f"Filtering setup{_where(origin)} contains {included} entries "
                    f'in "{Section.INCLUDE_ONLY_TABLE.value}" section and '
                    f'{excluded} entries in "{Section.EXCLUDE_SCHEMA.value}" '
                    "section, please make sure not to filter-out schema of "
                    "tables you want to include"
                ),
                sections=(Section.INCLUDE_ONLY_TABLE.value, Section.EXCLUDE_SCHEMA.value),
            )
        )
    return warnings


def filter_kind(policy: Policy) -> FilterKind:
    """Derive the filter kind from which lists of the policy are populated."""
    if policy.include_only_table:
        return FilterKind.INCLUDE
    if any(policy.entries(section) for section in EXCLUSION_SECTIONS):
        return FilterKind.EXCLUDE
    if policy.exclude_index:
        # no table is included or excluded, only indexes are skipped
        return FilterKind.EXCLUDE_INDEX_ONLY
    return FilterKind.NONE


def classify(policy: Policy, *, origin: str | None = None) -> Classification:
    """
    Validate a policy and derive its FilterKind.

    Args:
        policy: Policy populated from sections or from JSON.
        origin: Optional file name used in diagnostic messages.

    Returns:
        The kind together with any non-fatal warnings.

    Raises:
        ValidationError: If mutually exclusive sections are both used.
    """
    check_exclusive_sections(policy, origin=origin)

    warnings = collect_warnings(policy, origin=origin)
    for warning in warnings:
        log.warning("%s", warning.message)

    return Classification(kind=filter_kind(policy), warnings=tuple(warnings))
