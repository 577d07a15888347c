""" CSS Parser
https://www.w3.org/TR/css-syntax-3/#parsing

Turns the flat token list from the lexer into component values: preserved
tokens, function blocks, and simple `{}`/`[]`/`()` blocks. Every component
keeps its source span so callers can slice the original text back out.
"""

from __future__ import annotations
from collections.abc import Iterator

from restyle.css.errors import ParseError, SourceLocation
from restyle.css.lexer import Lexer
from restyle.css.tokens import *

class FunctionBlock:
    name: str
    value: list[Component]
    def __init__(self, function: Function) -> None:
        self.name = function.raw
        self.value = []
        self.start = function.start
        self.end = function.end

    def matches(self, name: str) -> bool:
        return self.name.lower() == name

    def walk(self) -> Iterator[Component]:
        """Yield every component nested inside this function, depth first."""
        for component in self.value:
            yield component
            if isinstance(component, (FunctionBlock, Block)):
                yield from component.walk()

    def __repr__(self) -> str:
        return f"FunctionBlock({self.name!r}, {self.value})"

class Block:
    token: Opening
    value: list[Component]
    def __init__(self, token: Opening) -> None:
        self.token = token
        self.value = []
        self.start = token.start
        self.end = token.end

    def walk(self) -> Iterator[Component]:
        for component in self.value:
            yield component
            if isinstance(component, (FunctionBlock, Block)):
                yield from component.walk()

    def __repr__(self) -> str:
        return f"Block({self.token.raw!r}, {self.value})"

Component = Token | FunctionBlock | Block

class Decleration:
    important: bool
    name: str
    value: list[Component]
    def __init__(self, name: Ident):
        self.name = name.raw
        self.start = name.start
        self.value = []
        self.important = False

    def __repr__(self) -> str:
        return f"Decl({'!, ' if self.important else ''}{self.name!r}, {self.value})"

class QualifiedRule:
    prelude: list[Component]
    block: Block | None
    def __init__(self, start: int) -> None:
        self.start = start
        self.prelude = []
        self.block = None

    def __repr__(self) -> str:
        return f"QualifiedRule(prelude={self.prelude}, block={{...}})"

class AtRule:
    name: str
    prelude: list[Component]
    block: Block | None
    def __init__(self, keyword: AtKeyword) -> None:
        self.name = keyword.raw
        self.start = keyword.start
        self.prelude = []
        self.block = None

    def __repr__(self) -> str:
        block = "None" if self.block is None else "{...}"
        return f"AtRule({self.name!r}, prelude={self.prelude}, block={block})"


class Parse:
    @staticmethod
    def parse_component_values(source: str) -> tuple[list[Component], Parser]:
        """Parse a whole string into component values, e.g. a declaration value."""
        parser = Parser.from_source(source)
        result = []
        while not isinstance(parser.peek(), EOF):
            result.append(parser.consume_component_value())
        return result, parser

    @staticmethod
    def parse_rule_list(source: str) -> tuple[list[QualifiedRule | AtRule], Parser]:
        parser = Parser.from_source(source)
        return parser.consume_rule_list(True), parser

    @staticmethod
    def parse_decl_list(block: Block, lexer: Lexer) -> tuple[list[Decleration], list[ParseError]]:
        parser = Parser(list(block.value), lexer)
        return parser.consume_decl_list(), parser.errors


class Parser:
    def __init__(self, tokens: list[Component], lexer: Lexer) -> None:
        self.tokens = tokens
        self.lexer = lexer
        self.index = 0
        self.errors: list[ParseError] = []

    @staticmethod
    def from_source(source: str) -> Parser:
        lexer = Lexer(source)
        tokens: list[Component] = list(lexer.process())
        parser = Parser(tokens, lexer)
        parser.errors.extend(lexer.errors)
        return parser

    @property
    def source(self) -> str:
        return self.lexer.source

    def location(self, offset: int) -> SourceLocation:
        return self.lexer.location(offset)

    def peek(self, amount: int = 1) -> Component:
        if self.index + amount - 1 < len(self.tokens):
            return self.tokens[self.index + amount - 1]
        return self._eof_()

    def reconsume(self):
        self.index -= 1

    def next(self) -> Component:
        if self.index < len(self.tokens):
            self.index += 1
            return self.tokens[self.index - 1]
        return self._eof_()

    def _eof_(self) -> EOF:
        eof = EOF()
        eof.start = eof.end = len(self.source)
        return eof

    def error(self, message: str, offset: int):
        self.errors.append(ParseError(message, self.location(offset)))

    def skip_whitespace(self):
        while isinstance(self.peek(), Whitespace):
            self.next()

    def consume_block(self, opening: Opening) -> Block:
        block = Block(opening)
        while True:
            next = self.next()
            if isinstance(next, opening.alt):
                block.end = next.end
                return block
            elif isinstance(next, EOF):
                self.error("Block was not closed", opening.start)
                block.end = next.end
                return block
            else:
                self.reconsume()
                block.value.append(self.consume_component_value())

    def consume_function(self, function: Function) -> FunctionBlock:
        fblock = FunctionBlock(function)
        while True:
            next = self.next()
            if isinstance(next, RParantheses):
                fblock.end = next.end
                return fblock
            elif isinstance(next, EOF):
                self.error("Function was not closed", function.start)
                fblock.end = next.end
                return fblock
            else:
                self.reconsume()
                fblock.value.append(self.consume_component_value())

    def consume_component_value(self) -> Component:
        next = self.next()
        if isinstance(next, Opening):
            return self.consume_block(next)
        elif isinstance(next, Function):
            return self.consume_function(next)
        return next

    def consume_at_rule(self) -> AtRule:
        at_rule = AtRule(self.next())

        while True:
            next = self.next()
            if isinstance(next, Semicolon):
                return at_rule
            elif isinstance(next, EOF):
                self.error("At Rule missing semi-colon", at_rule.start)
                return at_rule
            elif isinstance(next, LCurlyBracket):
                at_rule.block = self.consume_block(next)
                return at_rule
            else:
                self.reconsume()
                at_rule.prelude.append(self.consume_component_value())

    def consume_qualified_rule(self) -> QualifiedRule | None:
        qrule = QualifiedRule(self.peek().start)
        while True:
            next = self.next()
            if isinstance(next, EOF):
                self.error("Qualified rule is not closed", qrule.start)
                return None
            elif isinstance(next, LCurlyBracket):
                qrule.block = self.consume_block(next)
                return qrule
            else:
                self.reconsume()
                qrule.prelude.append(self.consume_component_value())

    def consume_rule_list(self, top_level: bool = False) -> list[QualifiedRule | AtRule]:
        rules = []
        while True:
            next = self.next()
            if isinstance(next, Whitespace):
                continue
            elif isinstance(next, EOF):
                return rules
            elif isinstance(next, (CDO, CDC)) and top_level:
                continue
            elif isinstance(next, AtKeyword):
                self.reconsume()
                rules.append(self.consume_at_rule())
            else:
                self.reconsume()
                if (rule := self.consume_qualified_rule()) is not None:
                    rules.append(rule)

    def consume_decleration(self) -> Decleration | None:
        """Consume one declaration from the remaining components.

        The caller hands over exactly the components between two semicolons.
        """
        decl = Decleration(self.next())
        self.skip_whitespace()

        if not isinstance(self.peek(), Colon):
            self.error("Expected a colon", decl.start)
            return None

        self.next()
        self.skip_whitespace()

        while not isinstance(self.peek(), EOF):
            decl.value.append(self.consume_component_value())
        while decl.value and isinstance(decl.value[-1], Whitespace):
            decl.value.pop()

        if (
            len(decl.value) >= 2
            and isinstance(decl.value[-2], Delim) and decl.value[-2].raw == "!"
            and isinstance(decl.value[-1], Ident) and decl.value[-1].matches("important")
        ):
            decl.value.pop()
            decl.value.pop()
            decl.important = True

        while decl.value and isinstance(decl.value[-1], Whitespace):
            decl.value.pop()

        return decl

    def consume_decl_list(self) -> list[Decleration]:
        decls = []
        while True:
            next = self.next()
            if isinstance(next, (Whitespace, Semicolon)):
                continue
            elif isinstance(next, EOF):
                return decls
            elif isinstance(next, Ident):
                temp: list[Component] = [next]
                while not isinstance(self.peek(), (Semicolon, EOF)):
                    temp.append(self.next())
                parser = Parser(temp, self.lexer)
                if (decl := parser.consume_decleration()) is not None:
                    decls.append(decl)
                self.errors.extend(parser.errors)
            else:
                self.error("Invalid decleration list", next.start)
                while not isinstance(self.peek(), (Semicolon, EOF)):
                    self.next()
