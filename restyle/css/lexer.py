""" CSS LEXING
https://www.w3.org/TR/css-syntax-3/#tokenizing-and-parsing

The lexer works over the whole source string with a moving index so every token
can record the exact source span it came from. Comments are produced as tokens
but dropped by `Lexer.process`.
"""

from __future__ import annotations
from bisect import bisect_left
import re
from typing import Literal

from restyle.css.errors import ParseError, SourceLocation
from restyle.css.tokens import *

REPLACEMENT_CHAR = '�'
MAX_CODE_POINT = 0x10FFFF

class Check:
    @staticmethod
    def letter(current: str | None) -> bool:
        return current is not None and current.isalpha()

    @staticmethod
    def non_ascii(current: str | None) -> bool:
        return current is not None and ord(current) >= 0x80

    @staticmethod
    def ident_start(current: str | None) -> bool:
        return current is not None and (Check.letter(current) or Check.non_ascii(current) or current == "_")

    @staticmethod
    def digit(current: str | None) -> bool:
        return current is not None and current in '0123456789'

    @staticmethod
    def whitespace(current: str | None) -> bool:
        return current is not None and current in '\t\n '

    @staticmethod
    def hex(current: str | None) -> bool:
        return current is not None and current in '0123456789abcdefABCDEF'

    @staticmethod
    def ident(current: str | None) -> bool:
        return Check.ident_start(current) or Check.digit(current) or current == "-"

    @staticmethod
    def escape(current: str | None, next: str | None) -> bool:
        return current == "\\" and next is not None and next != "\n"

    @staticmethod
    def starts_with_ident(first: str | None, second: str | None, third: str | None) -> bool:
        if first == "-":
            return Check.ident_start(second) or second == "-" or Check.escape(second, third)
        elif first == "\\":
            return Check.escape(first, second)
        return Check.ident_start(first)

    @staticmethod
    def starts_with_number(first: str | None, second: str | None, third: str | None) -> bool:
        if first is not None and first in "+-":
            return Check.digit(second) or (second == "." and Check.digit(third))
        elif first == ".":
            return Check.digit(second)
        return Check.digit(first)


RETURNS = re.compile("\r\n|\f|\r")
class Lexer:
    def __init__(self, source: str) -> None:
        self.source: str = RETURNS.sub("\n", source).replace('\u0000', REPLACEMENT_CHAR)
        self.index = 0
        self.errors: list[ParseError] = []
        self._newlines = [i for i, char in enumerate(self.source) if char == "\n"]

    def __iter__(self):
        return self

    def __next__(self):
        next = self.consume()
        if isinstance(next, EOF):
            raise StopIteration
        return next

    def process(self) -> list[Token]:
        """Tokenize the entire source at once, dropping comments."""
        return [token for token in self if not isinstance(token, Comment)]

    def location(self, offset: int) -> SourceLocation:
        """Line and column of a source offset."""
        line = bisect_left(self._newlines, offset)
        if line == 0:
            return SourceLocation(1, offset + 1)
        return SourceLocation(line + 1, offset - self._newlines[line - 1])

    def peek(self, amount: int = 1) -> str | None:
        """The code point `amount` positions ahead without consuming it."""
        index = self.index + amount - 1
        if index < len(self.source):
            return self.source[index]
        return None

    def next(self) -> str | None:
        if self.index < len(self.source):
            self.index += 1
            return self.source[self.index - 1]
        return None

    def reconsume(self):
        self.index -= 1

    def error(self, message: str):
        self.errors.append(ParseError(message, self.location(self.index)))

    def _consume_comment_(self) -> Comment:
        start = self.index - 1
        self.next()
        while True:
            next = self.next()
            if next is None:
                self.error("Comment not closed")
                break
            if next == "*" and self.peek() == "/":
                self.next()
                break
        return Comment(self.source[start:self.index])

    def _consume_whitespace_(self, current: str) -> Whitespace:
        whitespace = Whitespace(current)
        while Check.whitespace(self.peek()):
            whitespace.raw += self.next()
        return whitespace

    def _consume_string_(self, ending: str) -> String | BadString:
        string = String()
        while True:
            next = self.next()
            if next is None:
                self.error("String was not closed")
                return string
            elif next == ending:
                return string
            elif next == "\n":
                self.error("String literal not closed")
                self.reconsume()
                return BadString(string.raw)
            elif next == "\\":
                if self.peek() is None:
                    continue
                if self.peek() == "\n":
                    self.next()
                else:
                    string.raw += self._consume_escape_()
            else:
                string.raw += next

    def _consume_escape_(self) -> str:
        """Consume the code points after a backslash and return the escaped character."""
        next = self.next()
        if next is None:
            return REPLACEMENT_CHAR

        if Check.hex(next):
            digits = next
            while Check.hex(self.peek()) and len(digits) < 6:
                digits += self.next()
            if Check.whitespace(self.peek()):
                self.next()
            code = int(digits, 16)
            if code == 0 or code > MAX_CODE_POINT or 0xD800 <= code <= 0xDFFF:
                return REPLACEMENT_CHAR
            return chr(code)
        return next

    def _consume_ident_(self) -> str:
        result = ''

        while (next := self.next()) is not None:
            if Check.ident(next):
                result += next
            elif Check.escape(next, self.peek()):
                result += self._consume_escape_()
            else:
                self.reconsume()
                break
        return result

    def _consume_hash_(self, current: str) -> Hash | Delim:
        if Check.ident(self.peek()) or Check.escape(self.peek(), self.peek(2)):
            hasht = Hash()
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                hasht.type = "id"
            hasht.raw = self._consume_ident_()
            return hasht
        return Delim(current)

    def _consume_number_(self) -> tuple[int | float, Literal['integer', 'number'], str]:
        """Consume a number from the code points. Returning a numeric value, a type
        of either integer or number, and the raw text.
        """
        _type: Literal['integer', 'number'] = 'integer'
        raw = ''
        if (peek := self.peek()) is not None and peek in "-+":
            raw += self.next()

        while Check.digit(self.peek()):
            raw += self.next()

        if self.peek() == "." and Check.digit(self.peek(2)):
            raw += self.next() + self.next()
            _type = "number"
            while Check.digit(self.peek()):
                raw += self.next()

        if (peek := self.peek()) is not None and peek in "Ee" and (
            Check.digit(self.peek(2))
            or ((self.peek(2) or '') in "-+" and Check.digit(self.peek(3)))
        ):
            _type = "number"
            raw += self.next() + self.next()
            while Check.digit(self.peek()):
                raw += self.next()

        if _type == "integer":
            return int(raw), _type, raw
        return float(raw), _type, raw

    def _consume_numeric_(self) -> Number | Percentage | Dimension:
        """Consume code points and produce a Number, Percentage, or Dimension token."""
        value, _type, raw = self._consume_number_()
        if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
            unit = self._consume_ident_()
            return Dimension(value, _type, unit, raw + unit)
        elif self.peek() == "%":
            self.next()
            return Percentage(value, _type, raw)
        return Number(value, _type, raw)

    def _consume_ident_like_(self) -> Ident | Function:
        ident = self._consume_ident_()
        if self.peek() == "(":
            self.next()
            return Function(ident)
        return Ident(ident)

    def consume(self) -> Token:
        """Consume code points and return the next token."""
        start = self.index
        token = self._consume_token_()
        token.start = start
        token.end = self.index
        return token

    def _consume_token_(self) -> Token:
        next = self.next()
        if next is None:
            return EOF()
        elif next == "/" and self.peek() == "*":
            return self._consume_comment_()
        elif next in '"\'':
            return self._consume_string_(next)
        elif next == '#':
            return self._consume_hash_(next)
        elif next in "+.":
            if Check.starts_with_number(next, self.peek(), self.peek(2)):
                self.reconsume()
                return self._consume_numeric_()
            return Delim(next)
        elif next == "-":
            if Check.starts_with_number(next, self.peek(), self.peek(2)):
                self.reconsume()
                return self._consume_numeric_()
            elif self.peek() == "-" and self.peek(2) == ">":
                self.next()
                self.next()
                return CDC('-->')
            elif Check.starts_with_ident(next, self.peek(), self.peek(2)):
                self.reconsume()
                return self._consume_ident_like_()
            return Delim(next)
        elif next == "<":
            if (self.peek(1) or '') + (self.peek(2) or '') + (self.peek(3) or '') == "!--":
                self.next()
                self.next()
                self.next()
                return CDO('<!--')
            return Delim("<")
        elif next == "@":
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                return AtKeyword(self._consume_ident_())
            return Delim(next)
        elif next == "\\":
            if Check.escape(next, self.peek()):
                self.reconsume()
                return self._consume_ident_like_()
            self.error("Invalid backslash")
            return Delim(next)
        elif Check.digit(next):
            self.reconsume()
            return self._consume_numeric_()
        elif Check.ident_start(next):
            self.reconsume()
            return self._consume_ident_like_()
        elif Check.whitespace(next):
            return self._consume_whitespace_(next)
        elif next == "(":
            return LParantheses(next)
        elif next == ")":
            return RParantheses(next)
        elif next == "[":
            return LSquareBracket(next)
        elif next == "]":
            return RSquareBracket(next)
        elif next == "{":
            return LCurlyBracket(next)
        elif next == "}":
            return RCurlyBracket(next)
        elif next == ",":
            return Comma(next)
        elif next == ":":
            return Colon(next)
        elif next == ";":
            return Semicolon(next)
        else:
            return Delim(next)
