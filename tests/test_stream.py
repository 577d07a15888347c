"""Tests for the tokenizer, component parser and value stream."""

import pytest

from restyle.css.errors import InvalidValue, SourceLocation, VarFunction
from restyle.css.lexer import Lexer
from restyle.css.parser import Block, FunctionBlock, Parse
from restyle.css.stream import ValueStream, contains_var
from restyle.css.tokens import Comma, Dimension, Hash, Ident, Number, Percentage, Whitespace


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


class TestLexer:
    def test_numeric_tokens(self):
        tokens = Lexer("2px 50% 3").process()
        assert isinstance(tokens[0], Dimension)
        assert tokens[0].value == 2
        assert tokens[0].unit == "px"
        assert isinstance(tokens[2], Percentage)
        assert tokens[2].unit_value == 0.5
        assert isinstance(tokens[4], Number)
        assert tokens[4].type == "integer"

    def test_tokens_keep_source_spans(self):
        source = "a  #fff"
        tokens = Lexer(source).process()
        assert [type(token) for token in tokens] == [Ident, Whitespace, Hash]
        hash_token = tokens[2]
        assert source[hash_token.start:hash_token.end] == "#fff"

    def test_custom_property_name_is_ident(self):
        tokens = Lexer("--main-color").process()
        assert len(tokens) == 1
        assert isinstance(tokens[0], Ident)
        assert tokens[0].raw == "--main-color"

    def test_comments_are_dropped(self):
        tokens = Lexer("a/* note */b").process()
        assert [token.raw for token in tokens] == ["a", "b"]

    def test_location_is_one_based(self):
        lexer = Lexer("a\n  b")
        assert lexer.location(0) == SourceLocation(1, 1)
        assert lexer.location(4) == SourceLocation(2, 3)


# ---------------------------------------------------------------------------
# Component values
# ---------------------------------------------------------------------------


class TestComponents:
    def test_function_block(self):
        components, parser = Parse.parse_component_values("rgb(1, 2, 3)")
        assert not parser.errors
        assert len(components) == 1
        function = components[0]
        assert isinstance(function, FunctionBlock)
        assert function.matches("rgb")
        assert parser.source[function.start:function.end] == "rgb(1, 2, 3)"

    def test_nested_blocks(self):
        components, parser = Parse.parse_component_values("[a (b)]")
        assert not parser.errors
        assert isinstance(components[0], Block)
        assert any(isinstance(nested, Block) for nested in components[0].walk())

    def test_unclosed_function_is_an_error(self):
        _, parser = Parse.parse_component_values("calc(1 + 2")
        assert parser.errors

    def test_contains_var_finds_nested_calls(self):
        components, _ = Parse.parse_component_values("rgb(var(--r), 0, 0)")
        assert contains_var(components[0])


# ---------------------------------------------------------------------------
# ValueStream
# ---------------------------------------------------------------------------


class TestValueStream:
    def test_next_skips_whitespace(self):
        stream = ValueStream.from_source("  a   b ")
        assert stream.next().raw == "a"
        assert stream.next().raw == "b"
        assert stream.is_exhausted()

    def test_next_at_end_raises(self):
        stream = ValueStream.from_source("a")
        stream.next()
        with pytest.raises(InvalidValue):
            stream.next()

    def test_attempt_rewinds_on_failure(self):
        stream = ValueStream.from_source("a b")
        assert stream.attempt(lambda s: s.number()) is None
        assert stream.ident().raw == "a"

    def test_attempt_never_swallows_var(self):
        stream = ValueStream.from_source("var(--x)")
        with pytest.raises(VarFunction):
            stream.attempt(lambda s: s.number())

    def test_keyword_is_case_insensitive(self):
        stream = ValueStream.from_source("ITALIC")
        assert stream.keyword("normal", "italic") == "italic"

    def test_is_keyword_exhausted(self):
        assert ValueStream.from_source(" inherit ").is_keyword_exhausted("inherit")
        stream = ValueStream.from_source("inherit 2px")
        assert not stream.is_keyword_exhausted("inherit")
        assert stream.ident().raw == "inherit"

    def test_expect_exhausted(self):
        stream = ValueStream.from_source("a b")
        stream.next()
        with pytest.raises(InvalidValue):
            stream.expect_exhausted()

    def test_expect_exhausted_reports_var(self):
        stream = ValueStream.from_source("a rgb(var(--g), 0, 0)")
        stream.next()
        with pytest.raises(VarFunction):
            stream.expect_exhausted()

    def test_split_commas(self):
        parts = ValueStream.from_source("a b, c").split_commas()
        assert len(parts) == 2
        assert parts[0].remaining() == "a b"
        assert parts[1].remaining() == "c"

    def test_remaining_is_trimmed_source(self):
        stream = ValueStream.from_source("1px   var(--a)  ")
        stream.next()
        assert stream.remaining() == "var(--a)"

    def test_comma_helpers(self):
        stream = ValueStream.from_source("1, 2 3")
        stream.number()
        assert stream.try_comma()
        stream.number()
        assert not stream.try_comma()
        assert isinstance(stream.peek(), Number)
        assert not isinstance(stream.peek(), Comma)
