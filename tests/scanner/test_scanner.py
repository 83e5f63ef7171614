"""Tests for delimiter segmentation."""

import pytest

from mathmark.delimiters import Delimiter, DelimiterTable, default_delimiters
from mathmark.scanner import Scanner, find_closing, segment
from mathmark.segments import Math, Text, Unclosed

INLINE_ONLY = DelimiterTable([Delimiter("$", "$", display=False)])


class TestBasicSegmentation:
    """Plain text and simple formulas."""

    def test_empty_input_yields_nothing(self) -> None:
        assert segment("", default_delimiters()) == []

    def test_plain_text_is_single_segment(self) -> None:
        assert segment("no math here", default_delimiters()) == [Text("no math here")]

    def test_inline_formula(self) -> None:
        assert segment("a $x$ b", default_delimiters()) == [
            Text("a "),
            Math("x", "$x$", False),
            Text(" b"),
        ]

    def test_display_formula(self) -> None:
        assert segment("$$x$$", default_delimiters()) == [Math("x", "$$x$$", True)]

    def test_multiple_formulas_keep_interleaved_text(self) -> None:
        result = segment("x $a$ y $$b$$ z", default_delimiters())
        assert result == [
            Text("x "),
            Math("a", "$a$", False),
            Text(" y "),
            Math("b", "$$b$$", True),
            Text(" z"),
        ]

    def test_empty_table_passes_text_through(self) -> None:
        assert segment("$x$", DelimiterTable()) == [Text("$x$")]

    def test_adjacent_markers_are_empty_formula(self) -> None:
        """With only `$` configured, `$$` is a zero-length formula."""
        assert segment("$$", INLINE_ONLY) == [Math("", "$$", False)]

    def test_whitespace_is_preserved(self) -> None:
        result = segment("$$\n  x = 1\n$$", default_delimiters())
        assert result == [Math("\n  x = 1\n", "$$\n  x = 1\n$$", True)]

    def test_scan_is_lazy_iterator(self) -> None:
        scanner = Scanner("$x$ y", default_delimiters())
        it = scanner.scan()
        assert next(it) == Math("x", "$x$", False)
        assert next(it) == Text(" y")
        with pytest.raises(StopIteration):
            next(it)


class TestBraceDepth:
    """The closing marker only counts outside brace groups."""

    def test_nested_braces_do_not_truncate(self) -> None:
        result = segment("$F = \\frac{1}{2}ma$", INLINE_ONLY)
        assert result == [Math("F = \\frac{1}{2}ma", "$F = \\frac{1}{2}ma$", False)]

    def test_marker_inside_braces_is_ignored(self) -> None:
        result = segment("${a$b}$", INLINE_ONLY)
        assert result == [Math("{a$b}", "${a$b}$", False)]

    def test_negative_depth_still_closes(self) -> None:
        result = segment("$a}$b", INLINE_ONLY)
        assert result[0] == Math("a}", "$a}$", False)
        assert result[1] == Text("b")

    def test_backslash_skips_escaped_marker(self) -> None:
        result = segment("$a\\$b$", INLINE_ONLY)
        assert result == [Math("a\\$b", "$a\\$b$", False)]

    def test_backslash_skips_escaped_brace(self) -> None:
        """`\\{` does not open a group, so the next `$` closes."""
        result = segment("$\\{$x", INLINE_ONLY)
        assert result == [Math("\\{", "$\\{$", False), Text("x")]


class TestFindClosing:
    """Unit tests for the depth-tracking forward scan."""

    def test_finds_marker(self) -> None:
        assert find_closing("ab$", "$", 0) == 2

    def test_depth_below_zero_matches(self) -> None:
        assert find_closing("a}b$", "$", 0) == 3

    def test_unbalanced_open_brace_never_closes(self) -> None:
        assert find_closing("{a$", "$", 0) == -1

    def test_backslash_consumes_one_character(self) -> None:
        assert find_closing("\\$$", "$", 0) == 2

    def test_multi_character_right_marker(self) -> None:
        assert find_closing("x $ y$$", "$$", 0) == 5

    def test_right_marker_starting_with_backslash(self) -> None:
        assert find_closing("a+b\\) c", "\\)", 0) == 3


class TestDelimiterPriority:
    """Leftmost match wins; ties go to the delimiter listed first."""

    def test_display_listed_first_wins_tie(self) -> None:
        result = segment("$$x$$", default_delimiters())
        assert result == [Math("x", "$$x$$", True)]

    def test_table_order_beats_marker_length(self) -> None:
        table = DelimiterTable([Delimiter("$", "$"), Delimiter("$$", "$$", display=True)])
        assert segment("$$x$$", table) == [
            Math("", "$$", False),
            Text("x"),
            Math("", "$$", False),
        ]

    def test_leftmost_position_beats_table_order(self) -> None:
        table = DelimiterTable(
            [Delimiter("\\[", "\\]", display=True), Delimiter("$", "$", display=False)]
        )
        assert segment("a $x$ \\[y\\]", table) == [
            Text("a "),
            Math("x", "$x$", False),
            Text(" "),
            Math("y", "\\[y\\]", True),
        ]

    def test_parenthesis_delimiters(self) -> None:
        table = DelimiterTable([Delimiter("\\(", "\\)", display=False)])
        assert segment("see \\(a+b\\) ok", table) == [
            Text("see "),
            Math("a+b", "\\(a+b\\)", False),
            Text(" ok"),
        ]

    def test_regex_metacharacters_are_literal(self) -> None:
        table = DelimiterTable([Delimiter(".*", "*.", display=False)])
        assert segment("a .*x*. b", table) == [
            Text("a "),
            Math("x", ".*x*.", False),
            Text(" b"),
        ]
        assert segment("abc", table) == [Text("abc")]


class TestEscapedDelimiters:
    """A backslash before a left marker makes it literal."""

    def test_escaped_marker_at_start(self) -> None:
        assert segment("\\$5 and $x$", default_delimiters()) == [
            Text("$"),
            Text("5 and "),
            Math("x", "$x$", False),
        ]

    def test_escaped_marker_keeps_preceding_text(self) -> None:
        assert segment("cost \\$5", default_delimiters()) == [Text("cost $"), Text("5")]

    def test_escaped_display_marker(self) -> None:
        assert segment("\\$$", default_delimiters()) == [Text("$$")]

    def test_escaped_backslash_does_not_escape(self) -> None:
        assert segment("\\\\$x$", default_delimiters()) == [
            Text("\\\\"),
            Math("x", "$x$", False),
        ]

    def test_escaped_backslash_closes_before_next_formula(self) -> None:
        result = segment("$a\\\\$$b$", INLINE_ONLY)
        assert result == [Math("a\\\\", "$a\\\\$", False), Math("b", "$b$", False)]

    def test_backslash_before_cursor_is_not_an_escape(self) -> None:
        """A right marker ending in a backslash cannot escape the next left marker."""
        table = DelimiterTable([Delimiter("$", "\\", display=False)])
        assert segment("$a\\$b\\", table) == [
            Math("a", "$a\\", False),
            Math("b", "$b\\", False),
        ]


class TestEnvironments:
    """Formulas opening with \\begin{ keep their delimiters in content."""

    def test_environment_content_is_raw(self) -> None:
        raw = "$$\\begin{aligned}a &= b\\end{aligned}$$"
        assert segment(raw, default_delimiters()) == [Math(raw, raw, True)]

    def test_environment_after_whitespace_is_not_special(self) -> None:
        raw = "$$ \\begin{aligned}a\\end{aligned}$$"
        result = segment(raw, default_delimiters())
        assert result == [Math(" \\begin{aligned}a\\end{aligned}", raw, True)]


class TestLocations:
    """Math and Unclosed segments record where they start."""

    def test_math_location(self) -> None:
        result = segment("line1\nab $x$", default_delimiters(), source_file="doc.md")
        loc = result[1].location
        assert loc is not None
        assert (loc.lineno, loc.col_offset, loc.offset) == (2, 4, 9)
        assert str(loc) == "doc.md:2:4"

    def test_location_is_not_part_of_equality(self) -> None:
        located = segment("$x$", default_delimiters())[0]
        assert located.location is not None
        assert located == Math("x", "$x$", False)
