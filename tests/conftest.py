"""Shared fixtures: a deterministic stand-in for the typesetting engine."""

from collections.abc import Mapping

import pytest

from mathmark.engine import set_engine
from mathmark.errors import MathSyntaxError


class RecordingEngine:
    """Wraps math in <m> tags; rejects any source containing ``\\bad``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, bool, Mapping[str, str]]] = []

    def typeset(self, source: str, display: bool, macros: Mapping[str, str]) -> str:
        self.calls.append((source, display, macros))
        if "\\bad" in source:
            raise MathSyntaxError(f"undefined control sequence in {source!r}")
        return f"<m d={int(display)}>{source}</m>"


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def reset_engine():
    """Restore the default global engine after the test."""
    yield
    set_engine(None)
