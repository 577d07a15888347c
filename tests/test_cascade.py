"""Tests for the cascade: ordering, inheritance, currentcolor and var()."""

from dataclasses import dataclass, field
import logging

from restyle.colors import Color
from restyle.css.cascade import VariableContext, compute_style
from restyle.css.errors import ResolveErrorKind
from restyle.css.stylesheet import Stylesheet
from restyle.style import BLACK, Length, Style, Unit

RED = Color(1.0, 0.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)


@dataclass
class Node:
    classes: set = field(default_factory=set)
    parent: "Node | None" = None
    hover: bool = False
    focus: bool = False
    active: bool = False
    enabled: bool = True


def compute(css, classes=("a",), parent_style=None, parent_variables=None):
    sheet = Stylesheet.parse(css)
    return sheet.compute(Node(set(classes)), parent_style, parent_variables)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_later_rule_wins_a_tie(self):
        assert compute(".a{color:red} .a{color:blue}").style.color == BLUE

    def test_specificity_beats_order(self):
        assert compute(".a.b { color: red } .a { color: blue }", ("a", "b")).style.color == RED

    def test_later_declaration_wins_in_block(self):
        assert compute(".a { width: 1px; width: 2px }").style.width == Unit.px(2)

    def test_rules_in_any_order(self):
        sheet = Stylesheet.parse(".a{color:red} .a{color:blue}")
        rules = list(reversed(sheet.match(Node({"a"}))))
        assert compute_style(rules).style.color == BLUE


# ---------------------------------------------------------------------------
# currentcolor
# ---------------------------------------------------------------------------


class TestCurrentColor:
    def test_color_declared_after(self):
        style = compute(".a { outline-color: currentcolor; color: red }").style
        assert style.outline_color == RED

    def test_color_declared_before(self):
        style = compute(".a { color: red; outline-color: currentcolor }").style
        assert style.outline_color == RED

    def test_color_from_a_less_specific_rule(self):
        style = compute(".a.b { border-top-color: currentColor } .a { color: red }", ("a", "b")).style
        assert style.border_top_color == RED

    def test_uses_own_color_not_parent(self):
        parent = Style(color=BLUE)
        style = compute(".a { border-color: currentcolor; color: red }", parent_style=parent).style
        assert style.border_left_color == RED

    def test_inherited_color(self):
        parent = Style(color=BLUE)
        assert compute(".a { outline-color: currentcolor }", parent_style=parent).style.outline_color == BLUE


# ---------------------------------------------------------------------------
# Inheritance
# ---------------------------------------------------------------------------


class TestInheritance:
    def test_inherited_fields_carry_over(self):
        parent = Style(font_size=20.0, width=Unit.px(10))
        style = compute(".b {}", parent_style=parent).style
        assert style.font_size == 20.0
        assert style.width == Style().width

    def test_inherit_keyword(self):
        parent = Style(width=Unit.px(10))
        assert compute(".a { width: inherit }", parent_style=parent).style.width == Unit.px(10)

    def test_inherit_at_root_is_default(self):
        assert compute(".a { width: 5px; width: inherit }").style.width == Style().width

    def test_initial_keyword(self):
        parent = Style(color=RED)
        assert compute(".a { color: initial }", parent_style=parent).style.color == BLACK

    def test_shorthand_inherit(self):
        parent = Style(top=Unit.px(1), right=Unit.px(2), bottom=Unit.px(3), left=Unit.px(4))
        style = compute(".a { space: inherit }", parent_style=parent).style
        assert (style.top, style.right, style.bottom, style.left) == (
            Unit.px(1),
            Unit.px(2),
            Unit.px(3),
            Unit.px(4),
        )

    def test_auto_spacing_is_none(self):
        style = compute(".a { letter-spacing: auto; word-spacing: 2px }").style
        assert style.letter_spacing is None
        assert style.word_spacing == Unit.px(2)


# ---------------------------------------------------------------------------
# Custom properties
# ---------------------------------------------------------------------------


class TestVariables:
    def test_variable_in_same_rule(self):
        assert compute(".a { --w: 3px; width: var(--w) }").style.width == Unit.px(3)

    def test_inherited_from_parent(self):
        sheet = Stylesheet.parse(".root { --fg: red } .leaf { color: var(--fg) }")
        root = Node({"root"})
        parent = sheet.compute(root)
        child = sheet.compute(Node({"leaf"}, root), parent.style, parent.variables)
        assert child.style.color == RED

    def test_later_rule_overrides(self):
        css = ".a { --x: 1px } .a { --x: 2px } .a { width: var(--x) }"
        assert compute(css).style.width == Unit.px(2)

    def test_more_specific_rule_overrides(self):
        css = ".a.b { --x: 1px } .a { --x: 2px; width: var(--x) }"
        assert compute(css, ("a", "b")).style.width == Unit.px(1)

    def test_child_shadows_parent(self):
        parent_variables = VariableContext({"--x": "1px"})
        result = compute(".a { --x: 4px; width: var(--x) }", parent_variables=parent_variables)
        assert result.style.width == Unit.px(4)
        assert result.variables.lookup("--x") == "4px"
        assert parent_variables.lookup("--x") == "1px"

    def test_deferred_shorthand_with_currentcolor(self):
        css = ".a { border: 1px solid var(--c); color: red; --c: currentcolor }"
        style = compute(css).style
        assert style.border_top_color == RED
        assert style.border_top_width == Length.px(1)

    def test_deferred_color(self):
        style = compute(".a { --c: blue; color: var(--c); outline-color: currentcolor }").style
        assert style.color == BLUE
        assert style.outline_color == BLUE


class TestVariableErrors:
    def test_unresolved_leaves_field(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = compute(".a { width: 10px; width: var(--missing) }")
        assert result.style.width == Unit.px(10)
        assert [error.kind for error in result.errors] == [ResolveErrorKind.UnresolvedNoFallback]
        assert "Unresolved var() reference (no fallback): `var(--missing)` <no-filename>:1:" in caplog.text

    def test_cycle(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = compute(".a { --a: var(--b); --b: var(--a); width: var(--a) }")
        assert result.style.width == Style().width
        assert result.errors[0].kind is ResolveErrorKind.DepthExceeded
        assert "var() expansion limit exceeded (possible cycle)" in caplog.text

    def test_bad_value_after_expansion(self):
        result = compute(".a { --c: 4px; color: var(--c) }")
        assert result.style.color == BLACK
        assert result.errors[0].kind is ResolveErrorKind.ParseFailed

    def test_file_name_in_diagnostics(self, caplog):
        sheet = Stylesheet.parse(".a { width: var(--nope) }", file_name="theme.css")
        with caplog.at_level(logging.ERROR):
            sheet.compute(Node({"a"}))
        assert "theme.css:1:13" in caplog.text


# ---------------------------------------------------------------------------
# Layout flag
# ---------------------------------------------------------------------------


class TestAffectsLayout:
    def test_paint_only(self):
        assert not compute(".a { color: red; opacity: 0.5; outline: 1px red }").affects_layout

    def test_layout(self):
        assert compute(".a { color: red; width: 1px }").affects_layout

    def test_no_rules(self):
        assert not compute(".b { width: 1px }").affects_layout
