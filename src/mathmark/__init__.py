"""
mathmark — math fragment rendering for text documents

Finds math fragments delimited by configurable markers (``$...$``,
``$$...$$``, ``\\(...\\)``, ...) in free-form text and replaces each with
rendered markup, or with a visible warning when it cannot be rendered.

Quick Start:
    >>> from mathmark import RenderContext, compose
    >>> ctx = RenderContext(enabled=True)
    >>> html = compose("Energy: $E = mc^2$", ctx)

    >>> # Strict mode turns every problem into one error
    >>> compose("$\\\\frac{1", RenderContext(enabled=True, strict=True))
    Traceback (most recent call last):
    ...
    mathmark.errors.AggregatedError: 1:1: unclosed delimiter '$'

Lower-level pieces:
    >>> from mathmark import default_delimiters, segment
    >>> segment("a $x$ b", default_delimiters())
    [Text(data='a '), Math(content='x', raw='$x$', display=False, ...), Text(data=' b')]

Installation:
    pip install mathmark    # includes latex2mathml as the default engine
"""

from mathmark.composer import PARSE_WARNING, UNCLOSED_WARNING, compose, compose_segments
from mathmark.config import (
    RenderContext,
    get_render_context,
    render_context_scope,
    reset_render_context,
    set_render_context,
)
from mathmark.delimiters import Delimiter, DelimiterTable, default_delimiters
from mathmark.engine import (
    Latex2MathmlEngine,
    MathEngine,
    expand_macros,
    get_engine,
    set_engine,
    typeset,
)
from mathmark.errors import (
    AggregatedError,
    ConfigError,
    EngineError,
    MacroExpansionError,
    MathmarkError,
    MathSyntaxError,
    RenderFailure,
)
from mathmark.location import SourceLocation
from mathmark.renderer import SegmentRenderer
from mathmark.scanner import Scanner, find_closing, segment
from mathmark.segments import Math, Segment, Text, Unclosed, raw_text

__version__ = "0.1.0"

__all__ = [
    "PARSE_WARNING",
    "UNCLOSED_WARNING",
    "AggregatedError",
    "ConfigError",
    "Delimiter",
    "DelimiterTable",
    "EngineError",
    "Latex2MathmlEngine",
    "MacroExpansionError",
    "Math",
    "MathEngine",
    "MathSyntaxError",
    "MathmarkError",
    "RenderContext",
    "RenderFailure",
    "Scanner",
    "Segment",
    "SegmentRenderer",
    "SourceLocation",
    "Text",
    "Unclosed",
    "compose",
    "compose_segments",
    "default_delimiters",
    "expand_macros",
    "find_closing",
    "get_engine",
    "get_render_context",
    "raw_text",
    "render_context_scope",
    "reset_render_context",
    "segment",
    "set_engine",
    "set_render_context",
    "typeset",
]
