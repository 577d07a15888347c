"""Selector chains.

Only classes, `*`, the descendant and child combinators, and the five state
pseudo classes exist. A bare identifier is a class, so `button` and `.button`
select the same nodes.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import sys

from restyle.css.errors import InvalidValue
from restyle.css.stream import ValueStream
from restyle.css.tokens import Colon, Delim, Ident, Whitespace

__all__ = ["SelectorKind", "Selector", "parse_selector_list", "specificity", "serialize"]


class SelectorKind(Enum):
    Class = "class"
    Wildcard = "wildcard"
    Child = "child"
    Descendant = "descendant"
    Focus = "focus"
    Hover = "hover"
    Active = "active"
    Enabled = "enabled"
    Disabled = "disabled"

    @property
    def pseudo(self) -> bool:
        return self in PSEUDOS

    @property
    def combinator(self) -> bool:
        return self in (SelectorKind.Child, SelectorKind.Descendant)


PSEUDOS = (
    SelectorKind.Focus,
    SelectorKind.Hover,
    SelectorKind.Active,
    SelectorKind.Enabled,
    SelectorKind.Disabled,
)


@dataclass(frozen=True)
class Selector:
    kind: SelectorKind
    name: str | None = None

    @staticmethod
    def cls(name: str) -> Selector:
        return Selector(SelectorKind.Class, sys.intern(name))

    def __str__(self) -> str:
        if self.kind is SelectorKind.Class:
            return f".{self.name}"
        elif self.kind is SelectorKind.Wildcard:
            return "*"
        elif self.kind is SelectorKind.Child:
            return " > "
        elif self.kind is SelectorKind.Descendant:
            return " "
        return f":{self.kind.value}"


PSEUDO_NAMES = {kind.value: kind for kind in PSEUDOS}

WILDCARD = Selector(SelectorKind.Wildcard)
CHILD = Selector(SelectorKind.Child)
DESCENDANT = Selector(SelectorKind.Descendant)


def specificity(chain: tuple[Selector, ...]) -> int:
    """10 for every class and pseudo class in the chain."""
    return sum(10 for selector in chain if selector.kind is SelectorKind.Class or selector.kind.pseudo)


def serialize(chain: tuple[Selector, ...]) -> str:
    return "".join(str(selector) for selector in chain)


def _parse_chain(stream: ValueStream) -> tuple[Selector, ...]:
    chain: list[Selector] = []
    pending: Selector | None = None
    found = False

    def push(selector: Selector):
        nonlocal pending, found
        if pending is not None:
            chain.append(pending)
            pending = None
        chain.append(selector)
        found = True

    while (component := stream.next_including_whitespace()) is not None:
        if isinstance(component, Whitespace):
            if found and pending is None:
                pending = DESCENDANT
        elif isinstance(component, Ident):
            push(Selector.cls(component.raw))
        elif isinstance(component, Colon):
            name = stream.next_including_whitespace()
            if not isinstance(name, Ident):
                raise stream.error("Expected a pseudo class", component)
            kind = PSEUDO_NAMES.get(name.raw.lower())
            if kind is None:
                raise stream.error(f"Unknown pseudo class `:{name.raw}`", name)
            push(Selector(kind))
        elif isinstance(component, Delim) and component.raw == ">":
            pending = CHILD
        elif isinstance(component, Delim) and component.raw == "*":
            push(WILDCARD)
        elif isinstance(component, Delim) and component.raw == ".":
            pass
        else:
            raise stream.error(component=component)

    if pending is DESCENDANT:
        pending = None
    if not found or pending is not None:
        raise InvalidValue("Selector is empty or ends with a combinator", stream.location())
    return tuple(chain)


def parse_selector_list(prelude: ValueStream) -> list[tuple[Selector, ...]]:
    """Parse a comma separated rule prelude into selector chains.

    Raises:
        InvalidValue: If any chain is malformed, which rejects the whole rule.
    """
    return [_parse_chain(part) for part in prelude.split_commas()]
