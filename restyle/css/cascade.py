"""Computing a node's `Style` from the rules that match it.

Rules are applied in ascending specificity, ties in sheet order, so the last
declared of two equally specific rules wins. Custom properties from every
matching rule are merged in the same order on top of the parent's, and
`color` is settled before anything else so `currentcolor` always refers to
the node's own final color.
"""
from __future__ import annotations
from collections import ChainMap
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from restyle.css.declarations import reparse
from restyle.css.errors import ResolveError
from restyle.css.properties import Deferred, Property, PropertyKind, apply
from restyle.css.resolver import VAR_LIMIT, resolve
from restyle.diagnostics import log_error
from restyle.style import Style

if TYPE_CHECKING:
    from restyle.css.stylesheet import Rule

__all__ = ["VariableContext", "ComputedStyle", "cascade_order", "compute_style"]

logger = getLogger(__name__)


class VariableContext:
    """Custom properties visible to a node, shadowing those of its ancestors."""

    def __init__(self, variables: Mapping[str, str] | None = None, parent: VariableContext | None = None) -> None:
        layer = dict(variables or {})
        if parent is not None:
            self.variables = parent.variables.new_child(layer)
        else:
            self.variables = ChainMap(layer)

    def lookup(self, name: str) -> str | None:
        return self.variables.get(name)

    def child(self, variables: Iterable[tuple[str, str]]) -> VariableContext:
        return VariableContext(dict(variables), self)

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def __repr__(self) -> str:
        return f"VariableContext({dict(self.variables)})"


@dataclass
class ComputedStyle:
    style: Style
    variables: VariableContext
    affects_layout: bool = False
    errors: list[ResolveError] = field(default_factory=list)


def cascade_order(rules: Iterable[Rule]) -> list[Rule]:
    return sorted(rules, key=lambda rule: (rule.specificity, rule.order))


class _Apply:
    def __init__(
        self,
        result: ComputedStyle,
        parent: Style | None,
        var_limit: int,
        file_name: str | None,
    ) -> None:
        self.result = result
        self.parent = parent
        self.var_limit = var_limit
        self.file_name = file_name

    def __call__(self, prop: Property):
        if isinstance(prop.value, Deferred):
            try:
                text = resolve(prop.value.raw, prop.value.location, self.result.variables, self.var_limit)
                expanded = reparse(prop.kind, text, prop.value)
            except ResolveError as error:
                logger.debug("Leaving `%s` unchanged", prop.kind)
                log_error(str(error), error.location, self.file_name)
                self.result.errors.append(error)
                return
            for resolved in expanded:
                self(resolved)
            return

        apply(prop, self.result.style, self.parent)
        if prop.affects_layout:
            self.result.affects_layout = True


def compute_style(
    rules: Sequence[Rule],
    parent_style: Style | None = None,
    parent_variables: VariableContext | None = None,
    var_limit: int = VAR_LIMIT,
    file_name: str | None = None,
) -> ComputedStyle:
    """Cascade the rules matching one node into a fresh `Style`.

    Args:
        rules: Every rule that matches the node, in any order.
        parent_style: The parent's computed style, or None at the root.
        parent_variables: The parent's custom properties, or None at the root.
        var_limit: Maximum number of `var()` substitution passes.
        file_name: Name used when logging resolution failures.

    Returns:
        The node's style, its variable context for its children, and whether
        any applied property affects layout. Failed `var()` resolutions are
        logged, collected in `errors` and leave their field unchanged.
    """
    ordered = cascade_order(rules)

    variables = (parent_variables or VariableContext()).child(
        variable for rule in ordered for variable in rule.variables
    )
    result = ComputedStyle(Style.inherit(parent_style), variables)
    write = _Apply(result, parent_style, var_limit, file_name)

    # `color` first, so `currentcolor` anywhere below sees the final value
    for rule in ordered:
        for prop in rule.properties:
            if prop.kind is PropertyKind.Color:
                write(prop)

    for rule in ordered:
        for prop in rule.properties:
            if prop.kind is not PropertyKind.Color:
                write(prop)

    return result
