"""Delimiter segmentation scanner.

Splits raw text into an ordered sequence of Text, Math and Unclosed
segments according to a DelimiterTable.

Algorithm:
1. A single compiled alternation of every (escaped) left marker finds the
   leftmost opening marker. Python's ``re`` tries alternatives in order, so
   at equal positions the delimiter listed first in the table wins.
2. A left marker preceded by an unescaped backslash is literal text; the
   backslash is dropped and scanning resumes after the marker.
3. The matching right marker is found with a brace-depth scan (see
   find_closing()), so ``$\\frac{1}{2}$`` is not cut short.
4. A marker that is never closed produces an Unclosed segment holding the
   rest of the input, and scanning stops there.

Usage:
    >>> from mathmark.delimiters import default_delimiters
    >>> segment("Area $\\\\pi r^2$.", default_delimiters())
    [Text(data='Area '), Math(content='\\\\pi r^2', raw='$\\\\pi r^2$', display=False, ...), Text(data='.')]

Thread Safety:
Scanner instances hold per-call state only. The module-level pattern
cache stores immutable compiled patterns.

"""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import lru_cache

from mathmark.delimiters import Delimiter, DelimiterTable
from mathmark.location import SourceLocation
from mathmark.segments import Math, Segment, Text, Unclosed
from mathmark.utils.logger import get_logger

logger = get_logger(__name__)

# Environment blocks keep their delimiters: the engine needs the wrapper.
_AMS_ENVIRONMENT = "\\begin{"


@lru_cache(maxsize=64)
def _left_marker_pattern(lefts: tuple[str, ...]) -> re.Pattern[str]:
    """Compile the alternation of left markers, one capture group each."""
    return re.compile("|".join(f"({re.escape(left)})" for left in lefts))


def find_closing(text: str, right: str, start: int) -> int:
    """Return the index of the right marker that closes a fragment, or -1.

    Scans forward from ``start`` tracking brace depth. The right marker is
    accepted only while depth is ``<= 0``. A backslash consumes the
    following character unconditionally, whatever it is.
    """
    depth = 0
    index = start
    length = len(text)
    while index < length:
        if depth <= 0 and text.startswith(right, index):
            return index
        char = text[index]
        if char == "\\":
            index += 1
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        index += 1
    return -1


def _is_escaped(text: str, position: int, floor: int) -> bool:
    """True if an odd run of backslashes ends right before position.

    Backslashes before ``floor`` belong to already-emitted segments.
    """
    count = 0
    index = position - 1
    while index >= floor and text[index] == "\\":
        count += 1
        index -= 1
    return count % 2 == 1


class Scanner:
    """Single-use scanner over one text.

    Usage:
        >>> scanner = Scanner("$x$ and \\\\$5", default_delimiters())
        >>> [type(s).__name__ for s in scanner.scan()]
        ['Math', 'Text', 'Text']

    """

    __slots__ = ("_text", "_delimiters", "_source_file", "_pattern")

    def __init__(
        self,
        text: str,
        delimiters: DelimiterTable,
        *,
        source_file: str | None = None,
    ) -> None:
        self._text = text
        self._delimiters = delimiters
        self._source_file = source_file
        self._pattern = (
            _left_marker_pattern(tuple(d.left for d in delimiters)) if len(delimiters) else None
        )

    def scan(self) -> Iterator[Segment]:
        """Yield segments in source order."""
        text = self._text
        if self._pattern is None:
            if text:
                yield Text(text)
            return

        cursor = 0
        while True:
            match = self._pattern.search(text, cursor)
            if match is None:
                break

            delimiter: Delimiter = self._delimiters[match.lastindex - 1]
            start, after_left = match.span()

            if _is_escaped(text, start, cursor):
                yield Text(text[cursor : start - 1] + delimiter.left)
                cursor = after_left
                continue

            if start > cursor:
                yield Text(text[cursor:start])

            close = find_closing(text, delimiter.right, after_left)
            if close == -1:
                location = self._location(start)
                logger.debug("Unclosed delimiter %r at %s", delimiter.left, location)
                yield Unclosed(delimiter.left, text[start:], location=location)
                return

            end = close + len(delimiter.right)
            raw = text[start:end]
            if text.startswith(_AMS_ENVIRONMENT, after_left):
                content = raw
            else:
                content = text[after_left:close]
            yield Math(content, raw, delimiter.display, location=self._location(start))
            cursor = end

        if cursor < len(text):
            yield Text(text[cursor:])

    def _location(self, offset: int) -> SourceLocation:
        return SourceLocation.from_offset(self._text, offset, self._source_file)


def segment(
    text: str,
    delimiters: DelimiterTable,
    *,
    source_file: str | None = None,
) -> list[Segment]:
    """Split text into Text, Math and Unclosed segments.

    Never raises for any input string.

    Args:
        text: Document text
        delimiters: Ordered delimiter table
        source_file: Optional path recorded in segment locations

    Returns:
        Segments in source order

    """
    return list(Scanner(text, delimiters, source_file=source_file).scan())


__all__ = ["Scanner", "find_closing", "segment"]
