"""Source locations for diagnostics.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a segment in the scanned text.

    Line and column are 1-indexed; ``offset`` is the absolute 0-indexed
    position in the source string.

    Examples:
            >>> SourceLocation.from_offset("a\\nb $x$", 4)
        SourceLocation(lineno=2, col_offset=3, offset=4, source_file=None)

            >>> str(SourceLocation(3, 7, 40, "docs/guide.md"))
            'docs/guide.md:3:7'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        source_file: str | None = None,
    ) -> SourceLocation:
        """Compute line and column for an absolute offset into source."""
        lineno = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            lineno=lineno,
            col_offset=offset - line_start + 1,
            offset=offset,
            source_file=source_file,
        )
