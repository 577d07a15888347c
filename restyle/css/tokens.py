"""Token types produced by `restyle.css.lexer.Lexer`.

Every token remembers the slice of source text it was read from (`start`, `end`)
so values can be re-serialized from the author's original spelling.
"""
from typing import Literal

__all__ = [
    "Token",
    "Ident",
    "Function",
    "AtKeyword",
    "Hash",
    "String",
    "BadString",

    "Delim",
    "Colon",
    "Semicolon",
    "Comma",

    "Opening",
    "Closing",
    "LCurlyBracket",
    "LSquareBracket",
    "LParantheses",
    "RCurlyBracket",
    "RSquareBracket",
    "RParantheses",

    "Numeric",
    "Number",
    "Percentage",
    "Dimension",

    "Comment",
    "Whitespace",
    "CDC",
    "CDO",
    "EOF"
]

NumericType = Literal['integer', 'number']

class Token:
    raw: str
    start: int
    end: int
    def __init__(self, raw: str = ''):
        self.raw = raw
        self.start = 0
        self.end = 0

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

    def __str__(self) -> str:
        return self.raw

    def matches(self, keyword: str) -> bool:
        """ASCII case-insensitive comparison of the raw text against a lowercase keyword."""
        return self.raw.lower() == keyword

class Ident(Token): pass
class Function(Token):
    def __str__(self) -> str:
        return f"{self.raw}("
class AtKeyword(Token):
    def __str__(self) -> str:
        return f"@{self.raw}"
class Hash(Token):
    def __init__(self, raw: str = '', *, type: Literal['id', 'unrestricted'] = 'unrestricted'):
        self.type = type
        super().__init__(raw)
    def __str__(self) -> str:
        return f"#{self.raw}"

class String(Token):
    def __str__(self) -> str:
        return repr(self.raw)
class BadString(Token): pass

class Delim(Token):
    def __init__(self, raw: str):
        if len(raw) > 1:
            raise ValueError("Delimiters may only be one codepoint long")
        super().__init__(raw)

class Colon(Delim): pass
class Semicolon(Delim): pass
class Comma(Delim): pass

class Closing(Token): pass
class RCurlyBracket(Closing): pass
class RSquareBracket(Closing): pass
class RParantheses(Closing): pass

class Opening(Token):
    closing: type[Closing]

    @property
    def alt(self) -> type[Closing]:
        return self.closing
class LCurlyBracket(Opening):
    closing = RCurlyBracket
class LSquareBracket(Opening):
    closing = RSquareBracket
class LParantheses(Opening):
    closing = RParantheses

class Numeric(Token):
    value: int | float
    type: NumericType
    def __init__(self, value: int | float, type: NumericType, raw: str):
        self.value = value
        self.type = type
        super().__init__(raw)

class Number(Numeric): pass
class Percentage(Numeric):
    def __str__(self) -> str:
        return f"{self.raw}%"

    @property
    def unit_value(self) -> float:
        """`50%` as `0.5`."""
        return self.value / 100

class Dimension(Numeric):
    def __init__(self, value: int | float, type: NumericType, unit: str, raw: str):
        self.unit = unit
        super().__init__(value, type, raw)

class Comment(Token): pass
class Whitespace(Token): pass
class CDO(Token): pass
class CDC(Token): pass
class EOF(Token): pass
