"""Segment types produced by the scanner.

A scan yields an ordered sequence of three segment kinds:

- Text: literal passthrough content
- Math: a delimited formula, rendered by the composer
- Unclosed: a left marker with no matching right marker

Concatenating ``raw_text()`` of every segment reconstructs the scanned
input, minus the backslashes that escaped a delimiter.

Thread Safety:
All segments are frozen dataclasses and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from mathmark.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text copied to the output unchanged."""

    data: str


@dataclass(frozen=True, slots=True)
class Math:
    """A delimited math fragment.

    Attributes:
        content: Source handed to the engine. Normally the text between the
            markers; the whole ``raw`` span when the fragment opens an
            environment (``\\begin{...}``) right after the left marker.
        raw: Full span including both markers
        display: Display (block) mode flag taken from the delimiter
        location: Where the left marker starts (not part of equality)

    """

    content: str
    raw: str
    display: bool
    location: SourceLocation | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Unclosed:
    """A left marker that is never closed.

    Scanning stops at an unclosed marker, so ``raw`` holds the rest of the
    input verbatim, starting with the marker itself.
    """

    marker: str
    raw: str = ""
    location: SourceLocation | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.raw:
            object.__setattr__(self, "raw", self.marker)


Segment: TypeAlias = Text | Math | Unclosed


def raw_text(segment: Segment) -> str:
    """Return the span of source text a segment covers."""
    if isinstance(segment, Text):
        return segment.data
    return segment.raw


__all__ = ["Math", "Segment", "Text", "Unclosed", "raw_text"]
