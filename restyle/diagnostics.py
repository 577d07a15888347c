from __future__ import annotations
from logging import getLogger

from restyle.css.errors import SourceLocation

__all__ = ["log_error", "format_location"]

logger = getLogger("restyle")


def format_location(location: SourceLocation, file_name: str | None = None) -> str:
    return f"{file_name or '<no-filename>'}:{location.line}:{location.column}"


def log_error(message: str, location: SourceLocation, file_name: str | None = None):
    """Report a skipped declaration, rule or failed var() resolution."""
    logger.error("%s %s", message, format_location(location, file_name))
