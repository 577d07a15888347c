"""Selector matching against a tree of UI nodes.

Nodes only need to look like `Element`; `restyle` never owns them.
"""
from __future__ import annotations
from collections.abc import Collection
from typing import TYPE_CHECKING, Protocol

from restyle.css.selectors import Selector, SelectorKind

if TYPE_CHECKING:
    from restyle.css.stylesheet import Rule

__all__ = ["Element", "matches_atom", "matches_chain", "rule_matches"]


class Element(Protocol):
    @property
    def classes(self) -> Collection[str]: ...
    @property
    def parent(self) -> Element | None: ...
    @property
    def hover(self) -> bool: ...
    @property
    def focus(self) -> bool: ...
    @property
    def active(self) -> bool: ...
    @property
    def enabled(self) -> bool: ...


def matches_atom(selector: Selector, element: Element) -> bool:
    kind = selector.kind
    if kind is SelectorKind.Class:
        return selector.name in element.classes
    elif kind is SelectorKind.Wildcard:
        return True
    elif kind is SelectorKind.Hover:
        return element.hover
    elif kind is SelectorKind.Focus:
        return element.focus
    elif kind is SelectorKind.Active:
        return element.active
    elif kind is SelectorKind.Enabled:
        return element.enabled
    elif kind is SelectorKind.Disabled:
        return not element.enabled
    return False


def _compound(chain: tuple[Selector, ...], end: int) -> tuple[int, tuple[Selector, ...]]:
    """The atoms before `end` up to the previous combinator, and where they start."""
    start = end
    while start > 0 and not chain[start - 1].kind.combinator:
        start -= 1
    return start, chain[start:end]


def _matches(chain: tuple[Selector, ...], end: int, element: Element) -> bool:
    start, compound = _compound(chain, end)
    if not all(matches_atom(selector, element) for selector in compound):
        return False
    if start == 0:
        return True

    combinator = chain[start - 1]
    if combinator.kind is SelectorKind.Child:
        return element.parent is not None and _matches(chain, start - 1, element.parent)

    ancestor = element.parent
    while ancestor is not None:
        if _matches(chain, start - 1, ancestor):
            return True
        ancestor = ancestor.parent
    return False


def matches_chain(chain: tuple[Selector, ...], element: Element) -> bool:
    """Match right to left, backtracking through ancestors for descendant combinators."""
    return bool(chain) and _matches(chain, len(chain), element)


def rule_matches(rule: Rule, element: Element) -> bool:
    return matches_chain(rule.selectors, element)
