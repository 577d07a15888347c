"""Tests for selector parsing, specificity and matching."""

from dataclasses import dataclass, field

import pytest

from restyle.css.errors import InvalidValue
from restyle.css.lexer import Lexer
from restyle.css.matching import matches_chain
from restyle.css.selectors import Selector, SelectorKind, parse_selector_list, serialize, specificity
from restyle.css.stream import ValueStream


def parse(text):
    return parse_selector_list(ValueStream.from_source(text))


@dataclass
class Node:
    classes: set = field(default_factory=set)
    parent: "Node | None" = None
    hover: bool = False
    focus: bool = False
    active: bool = False
    enabled: bool = True


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseChain:
    def test_bare_ident_is_class(self):
        assert parse("button") == [(Selector.cls("button"),)]

    def test_dot_prefix_is_optional(self):
        assert parse(".button") == parse("button")

    def test_wildcard(self):
        assert parse("*") == [(Selector(SelectorKind.Wildcard),)]

    def test_descendant(self):
        (chain,) = parse(".a .b")
        assert [selector.kind for selector in chain] == [
            SelectorKind.Class,
            SelectorKind.Descendant,
            SelectorKind.Class,
        ]

    def test_child_absorbs_whitespace(self):
        (chain,) = parse(".a > .b")
        assert chain == (Selector.cls("a"), Selector(SelectorKind.Child), Selector.cls("b"))

    def test_compound_with_pseudo(self):
        (chain,) = parse("button:hover")
        assert chain == (Selector.cls("button"), Selector(SelectorKind.Hover))

    def test_leading_and_trailing_whitespace(self):
        assert parse("  .a  ") == [(Selector.cls("a"),)]

    def test_selector_list(self):
        chains = parse(".a, .b > .c")
        assert len(chains) == 2
        assert serialize(chains[1]) == ".b > .c"

    def test_class_names_are_interned(self):
        (chain,) = parse(".some-long-class-name")
        assert chain[0].name is Selector.cls("some-long-class-name").name


class TestRejectedChains:
    @pytest.mark.parametrize("text", [".a >", "> ", "", ".a:unknown", ".a:", "#id", ".a + .b"])
    def test_rejected(self, text):
        with pytest.raises(InvalidValue):
            parse(text)

    def test_one_bad_chain_rejects_the_list(self):
        with pytest.raises(InvalidValue):
            parse(".a, .b >")


# ---------------------------------------------------------------------------
# Specificity
# ---------------------------------------------------------------------------


class TestSpecificity:
    def test_classes_and_pseudos(self):
        (chain,) = parse(".a .b:hover")
        assert specificity(chain) == 30

    def test_wildcard_and_combinators_are_free(self):
        (chain,) = parse("* > *")
        assert specificity(chain) == 0


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class TestMatching:
    def test_class(self):
        (chain,) = parse(".a")
        assert matches_chain(chain, Node({"a"}))
        assert not matches_chain(chain, Node({"b"}))

    def test_child_needs_direct_parent(self):
        (chain,) = parse(".a > .c")
        root = Node({"a"})
        middle = Node({"b"}, root)
        assert matches_chain(chain, Node({"c"}, root))
        assert not matches_chain(chain, Node({"c"}, middle))

    def test_descendant_backtracks(self):
        (chain,) = parse(".a .b > .c")
        root = Node({"a"})
        b_outer = Node({"b"}, root)
        x = Node({"x"}, b_outer)
        b_inner = Node({"b"}, x)
        assert matches_chain(chain, Node({"c"}, b_inner))

    def test_pseudo_classes(self):
        (hover,) = parse(".a:hover")
        (disabled,) = parse(":disabled")
        assert matches_chain(hover, Node({"a"}, hover=True))
        assert not matches_chain(hover, Node({"a"}))
        assert matches_chain(disabled, Node(enabled=False))
        assert not matches_chain(disabled, Node())
