from __future__ import annotations

from pathlib import Path

from dbfilter.core.errors import FilterFileError

COMMENT_PREFIXES = ("#", ";")


class IniSectionSource:
    """
    SectionSource over an INI document.

    Every property line is kept in file order, repeats included, and only the
    text before the first "=" names the property. Leading indentation is not
    significant: there are no continuation lines. A section header seen twice
    keeps collecting into the same section, and "[DEFAULT]" is an ordinary
    section.
    """

    def __init__(self, sections: dict[str, list[str]]) -> None:
        self.sections = sections

    @classmethod
    def from_string(cls, text: str, *, source: str = "<string>") -> IniSectionSource:
        """Parse INI text into a section source."""
        sections: dict[str, list[str]] = {}
        current: list[str] | None = None

        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue

            if line.startswith("["):
                if not line.endswith("]"):
                    raise FilterFileError(
                        f'Failed to parse filters file "{source}", line {lineno}: '
                        f"malformed section header {raw!r}"
                    )
                current = sections.setdefault(line[1:-1].strip(), [])
                continue

            if current is None:
                raise FilterFileError(
                    f'Failed to parse filters file "{source}", line {lineno}: '
                    f"entry {raw!r} appears before any section header"
                )

            name = line.split("=", 1)[0].rstrip()
            if not name:
                raise FilterFileError(
                    f'Failed to parse filters file "{source}", line {lineno}: '
                    f"missing property name in {raw!r}"
                )
            current.append(name)

        return cls(sections)

    @classmethod
    def from_path(cls, path: str | Path) -> IniSectionSource:
        """Read and parse an INI file into a section source."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FilterFileError(f'Failed to read filters file "{path}": {exc}') from exc
        return cls.from_string(text, source=str(path))

    def find_section(self, name: str) -> str | None:
        """Return name if the document has that exact section."""
        return name if name in self.sections else None

    def property_names(self, section: str) -> list[str]:
        """Return the property names of a section, in file order."""
        return list(self.sections[section])
