"""Delimiter definitions for math fragments.

A DelimiterTable is an ordered, immutable collection of Delimiter pairs.
Order matters: when several left markers match at the same offset, the
delimiter listed first wins, regardless of marker length. Tables that share
a prefix (``$$`` and ``$``) must list the longer marker first.

Usage:
    >>> table = DelimiterTable([
    ...     Delimiter("$$", "$$", display=True),
    ...     Delimiter("\\\\(", "\\\\)", display=False),
    ... ])
    >>> [d.left for d in table]
    ['$$', '\\\\(']

Thread Safety:
Delimiter and DelimiterTable are immutable and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from mathmark.errors import ConfigError


@dataclass(frozen=True, slots=True)
class Delimiter:
    """A left/right marker pair and the typesetting mode it selects.

    Attributes:
        left: Opening marker, e.g. ``$$``
        right: Closing marker, e.g. ``$$``
        display: True for block (display) math, False for inline

    """

    left: str
    right: str
    display: bool = False

    def __post_init__(self) -> None:
        if not self.left or not self.right:
            raise ConfigError(
                f"Delimiter markers must be non-empty (left={self.left!r}, right={self.right!r})"
            )


class DelimiterTable:
    """Ordered, read-only sequence of delimiters."""

    __slots__ = ("_delimiters",)

    def __init__(self, delimiters: Iterable[Delimiter] = ()) -> None:
        self._delimiters: tuple[Delimiter, ...] = tuple(delimiters)

    @classmethod
    def from_config(cls, entries: Iterable[Mapping[str, object]]) -> DelimiterTable:
        """Build a table from configuration mappings.

        Each entry needs ``left`` and ``right``; ``display`` defaults to False.

        Raises:
            ConfigError: If an entry is not a mapping, misses a marker, or has
                a non-bool ``display``

        """
        delimiters = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise ConfigError(f"delimiter #{index} must be a mapping, got {entry!r}")
            try:
                left = entry["left"]
                right = entry["right"]
            except KeyError as e:
                raise ConfigError(f"delimiter #{index} is missing key {e.args[0]!r}") from e
            display = entry.get("display", False)
            if not isinstance(display, bool):
                raise ConfigError(f"delimiter #{index} display must be true or false, got {display!r}")
            delimiters.append(Delimiter(str(left), str(right), display=display))
        return cls(delimiters)

    def __iter__(self) -> Iterator[Delimiter]:
        return iter(self._delimiters)

    def __len__(self) -> int:
        return len(self._delimiters)

    def __getitem__(self, index: int) -> Delimiter:
        return self._delimiters[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DelimiterTable):
            return NotImplemented
        return self._delimiters == other._delimiters

    def __hash__(self) -> int:
        return hash(self._delimiters)

    def __repr__(self) -> str:
        return f"DelimiterTable({list(self._delimiters)!r})"


def default_delimiters() -> DelimiterTable:
    """Return the default table: ``$$...$$`` (display) then ``$...$`` (inline).

    Display is listed first so a bare ``$$`` is never read as two adjacent
    inline markers.
    """
    return DelimiterTable(
        [
            Delimiter("$$", "$$", display=True),
            Delimiter("$", "$", display=False),
        ]
    )


__all__ = ["Delimiter", "DelimiterTable", "default_delimiters"]
