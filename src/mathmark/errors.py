"""Exception classes for mathmark.

Only MathSyntaxError is ever tolerated by the composer (it degrades to an
inline warning in lenient mode). Every other engine failure is fatal.
"""

from __future__ import annotations


class MathmarkError(Exception):
    """Base exception for all mathmark errors."""

    pass


class ConfigError(MathmarkError, ValueError):
    """Invalid delimiter definition or render configuration."""

    pass


class MathSyntaxError(MathmarkError):
    """Raised by a typesetting engine when a formula has bad syntax.

    Engines must raise this (and only this) for malformed math source so the
    composer can apply its strict/lenient policy.
    """

    pass


class EngineError(MathmarkError):
    """Engine failure unrelated to formula syntax. Always fatal."""

    pass


class MacroExpansionError(EngineError):
    """Macro substitution did not reach a fixed point within its limits."""

    def __init__(self, source: str, passes: int, expansions: int = 0) -> None:
        self.source = source
        self.passes = passes
        self.expansions = expansions
        super().__init__(
            f"macro expansion did not terminate after {passes} passes "
            f"and {expansions} substitutions: {source[:60]!r}"
        )


class RenderFailure(MathmarkError):
    """A math segment could not be typeset because of a syntax error.

    Attributes:
        raw: Offending source, including both delimiters
        message: Engine error message
    """

    def __init__(self, raw: str, message: str) -> None:
        self.raw = raw
        self.message = message
        super().__init__(f"failed to parse formula {raw!r}: {message}")


class AggregatedError(MathmarkError):
    """Strict-mode failure carrying every diagnostic of a document.

    The message is the diagnostics joined by newlines, in the order they
    were encountered.
    """

    def __init__(self, diagnostics: list[str]) -> None:
        self.diagnostics = list(diagnostics)
        super().__init__("\n".join(self.diagnostics))
