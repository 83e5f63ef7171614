"""Rendering of single math segments.

SegmentRenderer turns one Math segment into markup through the configured
engine. A syntax failure is reported as RenderFailure; whether it breaks
the document is the composer's decision. Other engine failures propagate
unchanged.

Thread Safety:
SegmentRenderer holds read-only references and is safe to share as long
as the engine is.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from mathmark.engine import typeset
from mathmark.errors import MathSyntaxError, RenderFailure
from mathmark.utils.logger import get_logger

if TYPE_CHECKING:
    from mathmark.engine import MathEngine, SimpleEngine
    from mathmark.segments import Math

logger = get_logger(__name__)


class SegmentRenderer:
    """Render Math segments with one engine and macro table.

    Usage:
        >>> renderer = SegmentRenderer(macros={"\\\\RR": "\\\\mathbb{R}"})
        >>> renderer.render(Math("x \\\\in \\\\RR", "$x \\\\in \\\\RR$", False))
        '<math ...>...</math>'

    """

    __slots__ = ("_engine", "_macros", "_strict")

    def __init__(
        self,
        engine: MathEngine | SimpleEngine | None = None,
        macros: Mapping[str, str] | None = None,
        strict: bool = False,
    ) -> None:
        self._engine = engine
        self._macros: Mapping[str, str] = macros if macros is not None else {}
        self._strict = strict

    def render(self, segment: Math) -> str:
        """Typeset a math segment.

        Raises:
            RenderFailure: The engine rejected the formula syntax
            Exception: Any other engine failure, unchanged

        """
        try:
            return typeset(segment.content, segment.display, self._macros, engine=self._engine)
        except MathSyntaxError as e:
            level = logging.ERROR if self._strict else logging.WARNING
            where = f" at {segment.location}" if segment.location else ""
            logger.log(level, "Failed to parse formula %r%s: %s", segment.raw, where, e)
            raise RenderFailure(segment.raw, str(e)) from e


__all__ = ["SegmentRenderer"]
