"""`var()` substitution.

A pass scans the text for `var()` calls, including ones nested in other
functions and blocks, and splices in either the variable's value or the call's
fallback. Passes repeat until one makes no substitution. Every pass builds its
output in locals, so concurrent resolutions never share a buffer.
"""
from __future__ import annotations
from logging import getLogger
from typing import Protocol

from restyle.css.errors import ResolveError, ResolveErrorKind, SourceLocation
from restyle.css.parser import Block, Component, FunctionBlock, Parse
from restyle.css.stream import is_var
from restyle.css.tokens import Closing, Comma, Ident, Whitespace

__all__ = ["Variables", "VAR_LIMIT", "substitute", "resolve"]

logger = getLogger(__name__)

VAR_LIMIT = 8


class Variables(Protocol):
    def lookup(self, name: str) -> str | None: ...


class _Failed(Exception):
    def __init__(self, kind: ResolveErrorKind) -> None:
        self.kind = kind
        super().__init__(kind.value)


class _Pass:
    """State of one substitution pass over `text`."""

    def __init__(self, text: str, variables: Variables) -> None:
        self.text = text
        self.variables = variables
        self.pieces: list[str] = []
        self.flushed = 0
        self.count = 0

    def consume_to_end(self, components: list[Component]):
        """Check the rest of a block is balanced without substituting anything."""
        for component in components:
            if isinstance(component, Closing):
                raise _Failed(ResolveErrorKind.ParseFailed)
            if isinstance(component, (FunctionBlock, Block)):
                self.consume_to_end(component.value)

    def walk(self, components: list[Component]):
        for component in components:
            if is_var(component):
                self.splice(component, self.replacement(component))
            elif isinstance(component, (FunctionBlock, Block)):
                self.walk(component.value)
            elif isinstance(component, Closing):
                raise _Failed(ResolveErrorKind.ParseFailed)

    def replacement(self, function: FunctionBlock) -> str:
        body = function.value
        index = 0

        def skip_whitespace():
            nonlocal index
            while index < len(body) and isinstance(body[index], Whitespace):
                index += 1

        skip_whitespace()
        if index >= len(body) or not isinstance(body[index], Ident):
            raise _Failed(ResolveErrorKind.ParseFailed)
        value = self.variables.lookup(body[index].raw)
        index += 1

        skip_whitespace()
        has_comma = index < len(body) and isinstance(body[index], Comma)
        if has_comma:
            index += 1
        elif index < len(body):
            raise _Failed(ResolveErrorKind.ParseFailed)

        skip_whitespace()
        fallback = body[index:]
        self.consume_to_end(fallback)

        if value is not None:
            return value
        if has_comma:
            if not fallback:
                return ""
            # Up to, not including, the closing parenthesis
            return self.text[fallback[0].start:function.end - 1]
        raise _Failed(ResolveErrorKind.UnresolvedNoFallback)

    def splice(self, function: FunctionBlock, replacement: str):
        self.pieces.append(self.text[self.flushed:function.start])
        self.pieces.append(replacement)
        self.flushed = function.end
        self.count += 1

    def output(self) -> str:
        if self.count == 0:
            return self.text
        return "".join(self.pieces) + self.text[self.flushed:]


def substitute(text: str, variables: Variables) -> tuple[str, int]:
    """Run one pass, returning the new text and how many calls were replaced.

    Raises:
        _Failed: On unbalanced blocks, stray closing brackets or an unresolved
            variable without a fallback.
    """
    components, parser = Parse.parse_component_values(text)
    if parser.errors:
        raise _Failed(ResolveErrorKind.ParseFailed)

    state = _Pass(parser.source, variables)
    state.walk(components)
    return state.output(), state.count


def resolve(raw: str, location: SourceLocation, variables: Variables, limit: int = VAR_LIMIT) -> str:
    """Substitute `var()` calls in `raw` until none are left.

    Text without any `var()` call comes back unchanged after a single pass.

    Raises:
        ResolveError: `UnresolvedNoFallback`, `ParseFailed`, or `DepthExceeded`
            when passes are still substituting after `limit` of them.
    """
    text = raw
    try:
        for _ in range(limit):
            expanded, count = substitute(text, variables)
            if count == 0:
                return text
            logger.debug("Expanded %d var() call(s): `%s`", count, expanded)
            text = expanded
    except _Failed as error:
        raise ResolveError(error.kind, raw, location) from error
    raise ResolveError(ResolveErrorKind.DepthExceeded, raw, location)
