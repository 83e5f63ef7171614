"""Utility modules for mathmark."""

from mathmark.utils.logger import get_logger

__all__ = ["get_logger"]
