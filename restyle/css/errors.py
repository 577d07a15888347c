from __future__ import annotations
from enum import Enum
from typing import NamedTuple

__all__ = [
    "SourceLocation",
    "ParseError",
    "InvalidValue",
    "UnsupportedValue",
    "VarFunction",
    "ResolveErrorKind",
    "ResolveError",
]

class SourceLocation(NamedTuple):
    """One based line and column of a position in stylesheet source."""
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class ParseError(Exception):
    """Base class for every error raised while reading CSS text."""

    def __init__(self, message: str = "", location: SourceLocation | None = None) -> None:
        self.message = message
        self.location = location or SourceLocation()
        super().__init__(message)


class InvalidValue(ParseError):
    """Malformed input."""


class UnsupportedValue(ParseError):
    """Input that is recognized but intentionally not implemented, e.g. `border-style: dashed`."""


class VarFunction(ParseError):
    """Raised by value readers when they meet a `var()` call.

    The declaration parser catches this to defer the value until custom properties
    are known. It never escapes a declaration.
    """


class ResolveErrorKind(Enum):
    UnresolvedNoFallback = "Unresolved var() reference (no fallback)"
    DepthExceeded = "var() expansion limit exceeded (possible cycle)"
    ParseFailed = "Invalid value after var() expansion"


class ResolveError(Exception):
    def __init__(self, kind: ResolveErrorKind, raw: str, location: SourceLocation) -> None:
        self.kind = kind
        self.raw = raw
        self.location = location
        super().__init__(f"{kind.value}: `{raw}`")
