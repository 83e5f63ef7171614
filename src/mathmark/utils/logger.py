"""Logging helper for mathmark.

Example:
    >>> from mathmark.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("scanning document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Return a standard library logger namespaced under ``mathmark``.

    The library never installs handlers; applications configure logging.

    Example:
        >>> get_logger("scanner").name
        'mathmark.scanner'
    """
    if not (name == "mathmark" or name.startswith("mathmark.")):
        name = f"mathmark.{name}"
    return logging.getLogger(name)
