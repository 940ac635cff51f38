"""Output formatting utilities for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from dbfilter.core.models import FilterKind, Policy, Section, TableEntry

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def _entry_label(entry: Any) -> str:
    if isinstance(entry, TableEntry):
        return entry.qualified_name
    return f'"{entry.name}"'


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def success(self, msg: str) -> None:
        """Print a success message."""
        err_console.print(f"[ok]✓[/] {escape(msg)}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        err_console.print(f"[warn]⚠[/] {escape(msg)}", highlight=False)

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {escape(msg)}", highlight=False)

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{escape(title)}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {escape(str(v))}")

    def sections_table(self, policy: Policy, title: str = "Sections") -> None:
        """
        Render one row per section with its entry count and entries.

        Sections without entries are shown with a count of zero so that the
        full filtering setup is visible at a glance.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Section", style="ok", no_wrap=True)
        t.add_column("Count", justify="right")
        t.add_column("Entries", style="meta")

        for section in Section:
            entries = policy.entries(section)
            labels = ", ".join(_entry_label(e) for e in entries)
            t.add_row(section.value, str(len(entries)), escape(labels))

        console.print(t)

    def kinds_table(self, kinds: Iterable[FilterKind], title: str = "Filter kinds") -> None:
        """Render filter kinds together with their complement."""
        t = Table(title=title, show_lines=False)
        t.add_column("Kind", style="ok", no_wrap=True)
        t.add_column("Complement", style="meta")

        for kind in kinds:
            t.add_row(kind.value, kind.complement().value)

        console.print(t)


out = Out()
