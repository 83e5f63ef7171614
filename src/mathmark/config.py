"""ContextVar-based render configuration for mathmark.

A RenderContext is built once per document render and passed by
reference; it is never mutated. The "current" context lives in a
ContextVar so a site generator can set it once and let every compose()
call in that context pick it up.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent
    storage, so no locks are needed.

Usage:
    # Explicit context
    ctx = RenderContext(enabled=True, strict=True)
    html = compose(text, ctx)

    # Or use the context manager
    with render_context_scope(RenderContext(enabled=True)):
        html = compose(text)

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields

from mathmark.delimiters import DelimiterTable, default_delimiters
from mathmark.errors import ConfigError


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Immutable render configuration.

    Attributes:
        enabled: Render math at all; when False text passes through untouched
        strict: Escalate any diagnostic to a document-level AggregatedError
        delimiters: Ordered delimiter table
        macros: Optional control sequence substitution table

    """

    enabled: bool = False
    strict: bool = False
    delimiters: DelimiterTable = field(default_factory=default_delimiters)
    macros: Mapping[str, str] | None = None

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, object]) -> RenderContext:
        """Create a RenderContext from an already-loaded configuration mapping.

        Unknown keys (stylesheet URLs, integrity hashes, ...) are ignored.
        ``delimiters`` may be a DelimiterTable or a list of mappings with
        ``left``, ``right`` and ``display`` keys.

        Raises:
            ConfigError: If a flag is not a bool, or delimiters or macros are malformed

        Example:
            >>> ctx = RenderContext.from_dict({
            ...     "enabled": True,
            ...     "delimiters": [{"left": "\\\\(", "right": "\\\\)"}],
            ...     "css": "https://cdn.example/katex.css",
            ... })
            >>> ctx.delimiters[0].display
            False

        """
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}

        delimiters = filtered.get("delimiters")
        if delimiters is not None and not isinstance(delimiters, DelimiterTable):
            if isinstance(delimiters, (str, Mapping)):
                raise ConfigError("delimiters must be a list of delimiter mappings")
            filtered["delimiters"] = DelimiterTable.from_config(delimiters)  # type: ignore[arg-type]

        macros = filtered.get("macros")
        if macros is not None:
            if not isinstance(macros, Mapping):
                raise ConfigError(f"macros must be a mapping, got {type(macros).__name__}")
            filtered["macros"] = {str(k): str(v) for k, v in macros.items()}

        for flag in ("enabled", "strict"):
            if flag in filtered and not isinstance(filtered[flag], bool):
                raise ConfigError(f"{flag} must be true or false, got {filtered[flag]!r}")
        return cls(**filtered)  # type: ignore[arg-type]


# Module-level default context (reused, never recreated)
_DEFAULT_CONTEXT: RenderContext = RenderContext()

_render_context: ContextVar[RenderContext] = ContextVar(
    "render_context",
    default=_DEFAULT_CONTEXT,
)


def get_render_context() -> RenderContext:
    """Get the render context active in this thread/context."""
    return _render_context.get()


def set_render_context(context: RenderContext) -> None:
    """Set the render context for the current thread/context."""
    _render_context.set(context)


def reset_render_context() -> None:
    """Restore the default (disabled) render context."""
    _render_context.set(_DEFAULT_CONTEXT)


@contextmanager
def render_context_scope(context: RenderContext) -> Iterator[None]:
    """Context manager for a temporary render context.

    Restores the previous context even if an exception is raised.

    Example:
        >>> with render_context_scope(RenderContext(enabled=True)):
        ...     get_render_context().enabled
        True

    """
    token = _render_context.set(context)
    try:
        yield
    finally:
        _render_context.reset(token)


__all__ = [
    "RenderContext",
    "get_render_context",
    "render_context_scope",
    "reset_render_context",
    "set_render_context",
]
