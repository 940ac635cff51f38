"""Exceptions raised by the filtering core.

Every fatal condition maps to one exception class so that frontends can
decide how to report it. Input problems also derive from ValueError, the
same way the rest of the core signals bad user input.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class FilterError(Exception):
    """Base class for all filtering errors."""


class ParseError(FilterError, ValueError):
    """Raised when a filter entry cannot be parsed."""


class IdentifierTooLongError(ParseError):
    """Raised when a name exceeds the database identifier length limit."""

    def __init__(self, name: str, size: int, limit: int):
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(
            f'Failed to parse name "{name}" ({size} bytes long), '
            f"names are limited to {limit} bytes"
        )


class ValidationError(FilterError, ValueError):
    """Raised when two mutually exclusive sections are both used."""

    def __init__(
        self,
        message: str,
        *,
        sections: tuple[str, str],
        counts: tuple[int, int],
    ):
        self.sections = sections
        self.counts = counts
        super().__init__(message)


class DecodeError(FilterError, ValueError):
    """Raised when a JSON filter document is malformed."""


class FilterFileError(FilterError, OSError):
    """Raised when a filter file cannot be read or parsed."""


@dataclass(frozen=True)
class FilterWarning:
    """Non-fatal finding reported alongside a successful result."""

    code: str
    message: str
    sections: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return self.message
