"""Filtering setup loading.

This module ties the pieces of the filtering core together: it reads the
configuration sections, validates the combination of sections that are
used, and classifies the result. It is free of CLI concerns and can be
reused by other frontends and tests.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from dbfilter.core.adapters.inifile import IniSectionSource
from dbfilter.core.models import FilterResult
from dbfilter.core.sections import SectionSource, load_sections
from dbfilter.core.validation import classify

log = logging.getLogger(__name__)


def parse_filters(source: SectionSource, *, origin: str | None = None) -> FilterResult:
    """
    Load and classify the filtering setup held by a section source.

    Args:
        source: Section parser holding the filter configuration.
        origin: Optional name of the configuration, used in messages.

    Returns:
        The classified policy and any non-fatal warnings.

    Raises:
        ParseError: If an entry cannot be parsed.
        ValidationError: If mutually exclusive sections are both used.
    """
    loaded = load_sections(source)
    result = classify(loaded, origin=origin)
    policy = replace(loaded, kind=result.kind)
    log.debug("Filtering setup%s is %s", f' in "{origin}"' if origin else "", policy.kind.value)
    return FilterResult(policy=policy, warnings=result.warnings)


def load_filters(path: str | Path) -> FilterResult:
    """
    Read a filters INI file and return its classified policy.

    Raises:
        FilterFileError: If the file cannot be read or parsed.
        ParseError: If an entry cannot be parsed.
        ValidationError: If mutually exclusive sections are both used.
    """
    source = IniSectionSource.from_path(path)
    return parse_filters(source, origin=str(path))
