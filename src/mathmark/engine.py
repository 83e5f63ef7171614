"""Typesetting engine protocol and injection for mathmark.

The composer never typesets math itself. It calls the configured engine
with ``(source, display, macros)`` and expects markup back, or a
MathSyntaxError for malformed source.

The default engine converts LaTeX to MathML with latex2mathml.

Usage:
    # Default engine
    from mathmark import compose, RenderContext
    compose("$x^2$", RenderContext(enabled=True))

    # Manual injection
    from mathmark.engine import set_engine

    def my_engine(source: str, display: bool, macros) -> str:
        return f'<span class="math">{source}</span>'

    set_engine(my_engine)
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Protocol

from latex2mathml import converter

from mathmark.errors import MacroExpansionError, MathSyntaxError
from mathmark.utils.logger import get_logger

logger = get_logger(__name__)

MAX_MACRO_PASSES = 64
# Total substitutions allowed per formula
MAX_MACRO_EXPANSIONS = 1000

# An environment wrapped in dollar markers, e.g. $$\begin{aligned}...$$
_DOLLAR_WRAPPED_ENVIRONMENT = re.compile(r"(\$+)(\\begin\{.*)\1", re.DOTALL)


class MathEngine(Protocol):
    """Protocol for math typesetting engines.

    Thread Safety:
        Implementations must be thread-safe. typeset() may be called
        concurrently from multiple render threads.
    """

    def typeset(self, source: str, display: bool, macros: Mapping[str, str]) -> str:
        """Render math source to markup.

        Args:
            source: Math source, without delimiters (except environments)
            display: Block mode when True, inline otherwise
            macros: Control sequence substitutions, e.g. ``{"\\\\RR": "\\\\mathbb{R}"}``

        Returns:
            Rendered markup

        Contract:
            - MUST raise MathSyntaxError for malformed math source
            - MAY raise anything else for other failures; the caller treats
              those as fatal
        """
        ...


# Support for simple callable-based engines
SimpleEngine = Callable[[str, bool, Mapping[str, str]], str]


def _macro_pattern(name: str) -> re.Pattern[str]:
    # \R must not match the start of \RR
    if name[-1:].isalpha():
        return re.compile(re.escape(name) + r"(?![A-Za-z])")
    return re.compile(re.escape(name))


def expand_macros(
    source: str,
    macros: Mapping[str, str],
    max_passes: int = MAX_MACRO_PASSES,
    max_expansions: int = MAX_MACRO_EXPANSIONS,
) -> str:
    """Substitute macro definitions until the source stops changing.

    Both the number of passes and the total number of substitutions are
    bounded, so a self-referencing macro fails fast instead of growing the
    source without limit.

    Raises:
        MacroExpansionError: If no fixed point is reached within max_passes,
            or more than max_expansions substitutions were made

    Example:
        >>> expand_macros("x \\\\in \\\\RR", {"\\\\RR": "\\\\mathbb{R}"})
        'x \\\\in \\\\mathbb{R}'

    """
    if not macros:
        return source
    # Longest names first where one name is a prefix of another
    patterns = [
        (_macro_pattern(name), definition)
        for name, definition in sorted(macros.items(), key=lambda item: -len(item[0]))
        if name
    ]
    expansions = 0
    for passes in range(1, max_passes + 1):
        expanded = source
        for pattern, definition in patterns:
            expanded, count = pattern.subn(lambda _m, d=definition: d, expanded)
            expansions += count
            if expansions > max_expansions:
                raise MacroExpansionError(expanded, passes, expansions)
        if expanded == source:
            return expanded
        source = expanded
    raise MacroExpansionError(source, max_passes, expansions)


class Latex2MathmlEngine:
    """latex2mathml-based engine implementing the MathEngine protocol.

    Macros are expanded textually before conversion because latex2mathml
    has no macro table of its own. Macro expansion failures stay fatal;
    anything latex2mathml raises while converting is a syntax error, since
    it also reports some malformed input with built-in exceptions (a bare
    ``\\left`` ends in StopIteration).

    Environments arrive with their delimiters (``$$\\begin{aligned}...$$``).
    latex2mathml would print the ``$`` markers, so a dollar pair wrapping
    an environment is removed first. Other wrappers (``\\[...\\]``) are
    passed through unchanged.

    Thread Safety:
        Stateless. Safe for concurrent use.
    """

    __slots__ = ()

    def typeset(self, source: str, display: bool, macros: Mapping[str, str]) -> str:
        """Convert LaTeX source to a MathML ``<math>`` element."""
        expanded = expand_macros(_unwrap_environment(source), macros)
        try:
            result: str = converter.convert(expanded, display="block" if display else "inline")
        except Exception as e:
            raise MathSyntaxError(str(e) or type(e).__name__) from e
        return result


def _unwrap_environment(source: str) -> str:
    match = _DOLLAR_WRAPPED_ENVIRONMENT.fullmatch(source)
    return match.group(2) if match else source


# Global engine
_engine: MathEngine | SimpleEngine | None = None


def set_engine(engine: MathEngine | SimpleEngine | None) -> None:
    """Set the global typesetting engine.

    Args:
        engine: A MathEngine implementation, or a function taking
            (source, display, macros) and returning markup.
            Pass None to restore the default engine.
    """
    global _engine
    _engine = engine


def get_engine() -> MathEngine | SimpleEngine:
    """Get the configured engine, creating the default one on first use."""
    global _engine
    if _engine is None:
        logger.debug("No engine configured, using latex2mathml")
        _engine = Latex2MathmlEngine()
    return _engine


def typeset(
    source: str,
    display: bool,
    macros: Mapping[str, str] | None = None,
    *,
    engine: MathEngine | SimpleEngine | None = None,
) -> str:
    """Typeset source with the given engine, or the configured one.

    Raises:
        MathSyntaxError: Malformed math source
        Exception: Any other engine failure, propagated unchanged

    """
    engine = engine if engine is not None else get_engine()
    macros = macros if macros is not None else {}
    if hasattr(engine, "typeset") and callable(engine.typeset):
        return engine.typeset(source, display, macros)
    return engine(source, display, macros)


__all__ = [
    "Latex2MathmlEngine",
    "MathEngine",
    "SimpleEngine",
    "expand_macros",
    "get_engine",
    "set_engine",
    "typeset",
]
