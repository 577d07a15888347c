"""Tests for stylesheet parsing, error tiers and rule lookup."""

from dataclasses import dataclass, field
import logging

from restyle.colors import Color
from restyle.css.properties import Deferred, Exact, Property, PropertyKind
from restyle.css.selectors import Selector, SelectorKind
from restyle.css.stylesheet import Stylesheet
from restyle.style import Unit

RED = Color(1.0, 0.0, 0.0)


@dataclass
class Node:
    classes: set = field(default_factory=set)
    parent: "Node | None" = None
    hover: bool = False
    focus: bool = False
    active: bool = False
    enabled: bool = True


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TestRules:
    def test_single_rule(self):
        sheet = Stylesheet.parse(".button { color: red; width: 10px }")
        assert len(sheet) == 1
        rule = sheet.rules[0]
        assert rule.selectors == (Selector.cls("button"),)
        assert rule.specificity == 10
        assert rule.properties == (
            Property(PropertyKind.Color, Exact(RED)),
            Property(PropertyKind.Width, Exact(Unit.px(10))),
        )
        assert not rule.has_pseudos

    def test_selector_list_shares_properties(self):
        sheet = Stylesheet.parse(".a, .b:hover { color: red }")
        assert len(sheet) == 2
        first, second = sheet.rules
        assert first.properties is second.properties
        assert second.has_pseudos
        assert second.specificity == 20

    def test_sorted_by_specificity(self):
        sheet = Stylesheet.parse(".a .b { color: red } * { color: red } .c { color: red }")
        assert [rule.specificity for rule in sheet.rules] == [0, 10, 20]
        assert [rule.order for rule in sheet.rules] == [0, 1, 2]

    def test_variables_are_captured_raw(self):
        sheet = Stylesheet.parse(".a { --gap:   4px  8px ; --Empty:; width: var(--gap) }")
        rule = sheet.rules[0]
        assert rule.variables == (("--gap", "4px  8px"), ("--Empty", ""))
        assert isinstance(rule.properties[0].value, Deferred)

    def test_comments_and_whitespace(self):
        sheet = Stylesheet.parse("/* theme */\n.a {\n  /* main */\n  color: red;\n}\n")
        assert len(sheet) == 1
        assert sheet.rules[0].properties == (Property(PropertyKind.Color, Exact(RED)),)

    def test_str(self):
        sheet = Stylesheet.parse(".a > .b { --x: 1px; width: 50%; color: var(--c) }")
        assert str(sheet) == ".a > .b { --x: 1px; width: 50%; color: var(--c); }"


# ---------------------------------------------------------------------------
# Error tiers
# ---------------------------------------------------------------------------


class TestErrors:
    def test_bad_declaration_is_skipped(self, caplog):
        with caplog.at_level(logging.ERROR):
            sheet = Stylesheet.parse(".a { color: nope; width: 1px; height: }")
        assert [prop.kind for prop in sheet.rules[0].properties] == [PropertyKind.Width]
        assert "Failed to parse CSS property: `color: nope` <no-filename>:1:13" in caplog.text

    def test_unsupported_is_reported_separately(self, caplog):
        with caplog.at_level(logging.ERROR):
            sheet = Stylesheet.parse(".a { border: 2px dashed red }", file_name="app.css")
        assert sheet.rules[0].properties == ()
        assert "Unsupported CSS value: `border: 2px dashed red` app.css:1:18" in caplog.text

    def test_bad_selector_drops_whole_rule(self, caplog):
        with caplog.at_level(logging.ERROR):
            sheet = Stylesheet.parse(".a, .b > { color: red }\n.c { color: red }")
        assert len(sheet) == 1
        assert sheet.rules[0].selectors == (Selector.cls("c"),)
        assert "Failed to parse CSS rule: `.a, .b > { color: red }`" in caplog.text

    def test_unknown_pseudo_class(self):
        assert len(Stylesheet.parse(".a:checked { color: red }")) == 0

    def test_at_rules_are_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            sheet = Stylesheet.parse("@media screen { .a { color: red } } .b { color: red }")
        assert len(sheet) == 1
        assert "Skipping unsupported at-rule `@media`" in caplog.text

    def test_important_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            sheet = Stylesheet.parse(".a { color: red !important }")
        assert sheet.rules[0].properties == (Property(PropertyKind.Color, Exact(RED)),)
        assert "`!important` is not supported" in caplog.text


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestMatch:
    def test_index(self):
        sheet = Stylesheet.parse("* { color: red } .a .b { color: red } :hover { color: red } .c:focus { color: red }")
        assert len(sheet.wildcard) == 2
        assert set(sheet.classes) == {"b", "c"}

    def test_match_in_cascade_order(self):
        sheet = Stylesheet.parse(".b:hover { color: red } .a .b { color: red } * { color: red } .x { color: red }")
        root = Node({"a"})
        leaf = Node({"b"}, root, hover=True)
        matched = sheet.match(leaf)
        assert [rule.order for rule in matched] == sorted(rule.order for rule in matched)
        assert len(matched) == 3

    def test_pseudo_state_changes_match(self):
        sheet = Stylesheet.parse(".b:hover { color: red }")
        assert sheet.match(Node({"b"})) == []
        assert len(sheet.match(Node({"b"}, hover=True))) == 1

    def test_disabled(self):
        sheet = Stylesheet.parse(":disabled { opacity: 0.5 } :enabled { opacity: 1 }")
        (rule,) = sheet.match(Node(enabled=False))
        assert rule.selectors == (Selector(SelectorKind.Disabled),)
