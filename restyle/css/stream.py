"""A rewindable cursor over the component values of one declaration value.

Grammars read through a `ValueStream` instead of raw token lists. The stream
skips whitespace, can save and restore its position, and raises `VarFunction`
the moment a reader would consume a `var()` call, so any grammar can be
abandoned and deferred until custom properties are known.
"""

from __future__ import annotations
from collections.abc import Callable
from typing import TypeVar

from restyle.css.errors import InvalidValue, ParseError, SourceLocation, UnsupportedValue, VarFunction
from restyle.css.lexer import Lexer
from restyle.css.parser import Block, Component, FunctionBlock, Parse
from restyle.css.tokens import *

__all__ = ["ValueStream", "is_var", "contains_var"]

T = TypeVar("T")

def is_var(component: Component) -> bool:
    return isinstance(component, FunctionBlock) and component.matches("var")

def contains_var(component: Component) -> bool:
    """True if the component is, or has nested anywhere inside it, a `var()` call."""
    if is_var(component):
        return True
    if isinstance(component, (FunctionBlock, Block)):
        return any(is_var(nested) for nested in component.walk())
    return False


class ValueStream:
    def __init__(self, components: list[Component], lexer: Lexer, end: int | None = None) -> None:
        self.components = components
        self.lexer = lexer
        self.index = 0
        self.end = end if end is not None else (components[-1].end if components else 0)

    @staticmethod
    def from_source(source: str) -> ValueStream:
        """Build a stream from free standing text, e.g. a value after var() substitution.

        Raises:
            InvalidValue: When the text has unbalanced blocks or other syntax errors.
        """
        components, parser = Parse.parse_component_values(source)
        if parser.errors:
            raise InvalidValue(parser.errors[0].message, parser.errors[0].location)
        return ValueStream(components, parser.lexer, len(parser.source))

    def nested(self, block: FunctionBlock | Block) -> ValueStream:
        """A stream over the inside of a function or block."""
        return ValueStream(block.value, self.lexer, block.end - 1)

    # ---- position ----

    def state(self) -> int:
        return self.index

    def reset(self, state: int):
        self.index = state

    def location(self) -> SourceLocation:
        """Location of the next non whitespace component."""
        state = self.state()
        self.skip_whitespace()
        offset = self.components[self.index].start if self.index < len(self.components) else self.end
        self.reset(state)
        return self.lexer.location(offset)

    def slice(self, component: Component) -> str:
        return self.lexer.source[component.start:component.end]

    def slice_from(self, state: int) -> str:
        """Source text from the component at `state` up to the last consumed component."""
        if state >= self.index:
            return ""
        return self.lexer.source[self.components[state].start:self.components[self.index - 1].end]

    def remaining(self) -> str:
        """Source text of everything not yet consumed, trimmed."""
        if self.index >= len(self.components):
            return ""
        return self.lexer.source[self.components[self.index].start:self.end].strip()

    # ---- errors ----

    def error(self, message: str = "", component: Component | None = None) -> InvalidValue:
        if component is not None:
            return InvalidValue(message or f"Unexpected `{self.slice(component)}`", self.lexer.location(component.start))
        return InvalidValue(message or "Unexpected value", self.location())

    def unsupported(self, component: Component, message: str = "") -> UnsupportedValue:
        return UnsupportedValue(message or f"Unsupported `{self.slice(component)}`", self.lexer.location(component.start))

    def var_found(self, component: Component) -> VarFunction:
        return VarFunction("var() found", self.lexer.location(component.start))

    def check_var(self, component: Component):
        """Raise `VarFunction` if a `var()` call is nested anywhere inside `component`."""
        if contains_var(component):
            raise self.var_found(component)

    # ---- reading ----

    def skip_whitespace(self):
        while self.index < len(self.components) and isinstance(self.components[self.index], Whitespace):
            self.index += 1

    def is_exhausted(self) -> bool:
        state = self.state()
        self.skip_whitespace()
        exhausted = self.index >= len(self.components)
        self.reset(state)
        return exhausted

    def peek(self) -> Component | None:
        """The next non whitespace component without consuming it."""
        state = self.state()
        self.skip_whitespace()
        component = self.components[self.index] if self.index < len(self.components) else None
        self.reset(state)
        return component

    def next(self) -> Component:
        """Consume the next non whitespace component.

        Raises:
            VarFunction: When the component is a `var()` call.
            InvalidValue: At the end of input.
        """
        self.skip_whitespace()
        if self.index >= len(self.components):
            raise InvalidValue("Unexpected end of input", self.lexer.location(self.end))
        component = self.components[self.index]
        self.index += 1
        if is_var(component):
            raise self.var_found(component)
        return component

    def next_including_whitespace(self) -> Component | None:
        if self.index >= len(self.components):
            return None
        self.index += 1
        return self.components[self.index - 1]

    def expect_exhausted(self):
        component = self.peek()
        if component is None:
            return
        if contains_var(component):
            raise self.var_found(component)
        raise self.error(component=component)

    def attempt(self, reader: Callable[[ValueStream], T]) -> T | None:
        """Run `reader`, rewinding and returning None if it fails.

        A `VarFunction` signal is never swallowed.
        """
        state = self.state()
        try:
            return reader(self)
        except VarFunction:
            raise
        except ParseError:
            self.reset(state)
            return None

    def ident(self) -> Ident:
        component = self.next()
        if not isinstance(component, Ident):
            raise self.error(component=component)
        return component

    def keyword(self, *keywords: str) -> str:
        """Consume an identifier that must be one of `keywords`, returning it lowercased."""
        ident = self.ident()
        lowered = ident.raw.lower()
        if lowered not in keywords:
            raise self.error(component=ident)
        return lowered

    def try_keyword(self, *keywords: str) -> str | None:
        return self.attempt(lambda stream: stream.keyword(*keywords))

    def is_keyword_exhausted(self, keyword: str) -> bool:
        """True when the whole remaining value is exactly `keyword`. Consumes it if so."""
        state = self.state()
        component = self.peek()
        if isinstance(component, Ident) and component.matches(keyword):
            self.next()
            if self.is_exhausted():
                return True
        self.reset(state)
        return False

    def expect_comma(self):
        component = self.next()
        if not isinstance(component, Comma):
            raise self.error(component=component)

    def optional_comma(self):
        if isinstance(self.peek(), Comma):
            self.next()

    def try_comma(self) -> bool:
        if isinstance(self.peek(), Comma):
            self.next()
            return True
        return False

    def function(self) -> FunctionBlock:
        component = self.next()
        if not isinstance(component, FunctionBlock):
            raise self.error(component=component)
        return component

    def percentage(self) -> float:
        """Consume a percentage, returning it as a fraction."""
        component = self.next()
        if not isinstance(component, Percentage):
            raise self.error(component=component)
        return component.unit_value

    def number(self) -> float:
        component = self.next()
        if not isinstance(component, Number):
            raise self.error(component=component)
        return float(component.value)

    def split_commas(self) -> list[ValueStream]:
        """Split the remaining top level components on commas into separate streams."""
        parts: list[ValueStream] = []
        current: list[Component] = []
        while (component := self.next_including_whitespace()) is not None:
            if isinstance(component, Comma):
                parts.append(ValueStream(current, self.lexer, component.start))
                current = []
            else:
                current.append(component)
        parts.append(ValueStream(current, self.lexer, self.end))
        return parts
