"""Document composition with the strict/lenient error policy.

compose() scans a document, renders each math segment and concatenates
the result. Problems are collected as diagnostics:

- Formula syntax errors become an inline warning followed by the raw
  source.
- Unclosed delimiters become an inline warning followed by the rest of the
  document, which is left unscanned.

In lenient mode the document is always produced, warnings included. In
strict mode any diagnostic turns into one AggregatedError listing all of
them, and the partial output is discarded. Non-syntax engine failures
propagate immediately in both modes.

Thread Safety:
Per-call state only. Concurrent compose() calls are safe when each uses
its own (or a shared, immutable) RenderContext and a thread-safe engine.

"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from mathmark.config import RenderContext, get_render_context
from mathmark.errors import AggregatedError, RenderFailure
from mathmark.renderer import SegmentRenderer
from mathmark.scanner import Scanner
from mathmark.segments import Math, Segment, Text, Unclosed
from mathmark.utils.logger import get_logger

if TYPE_CHECKING:
    from mathmark.engine import MathEngine, SimpleEngine

logger = get_logger(__name__)

PARSE_WARNING = " ***[KaTeX Warning] Fail to parse formula:*** "
UNCLOSED_WARNING = " ***[KaTeX Warning] Unclosed delimiter ->*** "


def _at(segment: Math | Unclosed) -> str:
    return f"{segment.location}: " if segment.location is not None else ""


def compose_segments(
    segments: Iterable[Segment],
    context: RenderContext,
    *,
    engine: MathEngine | SimpleEngine | None = None,
) -> str:
    """Fold segments into the output document.

    Args:
        segments: Segments in source order
        context: Render configuration (strict flag and macros are used)
        engine: Engine override; the configured engine when None

    Returns:
        Output text with math rendered or replaced by warnings

    Raises:
        AggregatedError: In strict mode, when any diagnostic was recorded
        Exception: Non-syntax engine failures, unchanged

    """
    renderer = SegmentRenderer(engine, context.macros, context.strict)
    parts: list[str] = []
    diagnostics: list[str] = []
    formulas = 0

    for seg in segments:
        match seg:
            case Text(data=data):
                parts.append(data)
            case Math():
                formulas += 1
                try:
                    parts.append(renderer.render(seg))
                except RenderFailure as e:
                    parts.append(PARSE_WARNING + seg.raw)
                    diagnostics.append(f"{_at(seg)}{e}")
            case Unclosed(marker=marker, raw=raw):
                parts.append(UNCLOSED_WARNING + raw)
                diagnostics.append(f"{_at(seg)}unclosed delimiter {marker!r}")

    logger.debug("Composed %d formulas with %d diagnostics", formulas, len(diagnostics))
    if context.strict and diagnostics:
        raise AggregatedError(diagnostics)
    return "".join(parts)


def compose(
    text: str,
    context: RenderContext | None = None,
    *,
    engine: MathEngine | SimpleEngine | None = None,
    source_file: str | None = None,
) -> str:
    """Render every math fragment of a document.

    Args:
        text: Document text
        context: Render configuration; the current context when None
        engine: Engine override; the configured engine when None
        source_file: Optional path used in diagnostic locations

    Returns:
        The document with math replaced by markup (or inline warnings)

    Raises:
        AggregatedError: Strict mode with at least one diagnostic
        Exception: Non-syntax engine failures, unchanged

    Example:
        >>> compose("\\\\$F = ma$", RenderContext(enabled=True))
        '$F = ma ***[KaTeX Warning] Unclosed delimiter ->*** $'

    """
    if context is None:
        context = get_render_context()
    if not context.enabled:
        return text
    scanner = Scanner(text, context.delimiters, source_file=source_file)
    return compose_segments(scanner.scan(), context, engine=engine)


__all__ = ["PARSE_WARNING", "UNCLOSED_WARNING", "compose", "compose_segments"]
