"""Parsing stylesheet text into an ordered, indexed list of rules.

Errors never abort a parse. A broken declaration is logged and skipped, a
broken selector list drops its whole rule, and at-rules are skipped.
"""
from __future__ import annotations
from dataclasses import dataclass
from logging import getLogger
from typing_extensions import Unpack

from restyle.css.cascade import ComputedStyle, VariableContext, cascade_order, compute_style
from restyle.css.declarations import parse_declaration
from restyle.css.errors import ParseError, UnsupportedValue
from restyle.css.lexer import Lexer
from restyle.css.matching import Element, rule_matches
from restyle.css.parser import AtRule, Decleration, Parse, QualifiedRule
from restyle.css.properties import Property
from restyle.css.selectors import Selector, SelectorKind, parse_selector_list, serialize, specificity
from restyle.css.stream import ValueStream
from restyle.diagnostics import log_error
from restyle.options import Options, default_options
from restyle.style import Style

__all__ = ["Rule", "Stylesheet", "parse_block"]

logger = getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    specificity: int
    selectors: tuple[Selector, ...]
    properties: tuple[Property, ...]
    has_pseudos: bool
    variables: tuple[tuple[str, str], ...]
    order: int = 0

    def __str__(self) -> str:
        body = [f"{name}: {raw};" for name, raw in self.variables]
        body.extend(f"{prop};" for prop in self.properties)
        return f"{serialize(self.selectors)} {{ {' '.join(body)} }}"


def _snippet(lexer: Lexer, decl: Decleration) -> str:
    end = decl.value[-1].end if decl.value else decl.start + len(decl.name)
    return lexer.source[decl.start:end]


def parse_block(
    declarations: list[Decleration],
    lexer: Lexer,
    file_name: str | None = None,
) -> tuple[tuple[Property, ...], tuple[tuple[str, str], ...]]:
    """Parse the declarations of one block into properties and custom properties.

    Each declaration stands alone; one that fails is logged and skipped.
    """
    properties: list[Property] = []
    variables: list[tuple[str, str]] = []

    for decl in declarations:
        if decl.important:
            logger.warning("`!important` is not supported and was ignored: `%s`", _snippet(lexer, decl))

        if decl.name.startswith("--"):
            raw = lexer.source[decl.value[0].start:decl.value[-1].end].strip() if decl.value else ""
            variables.append((decl.name, raw))
            continue

        end = decl.value[-1].end if decl.value else decl.start + len(decl.name)
        stream = ValueStream(decl.value, lexer, end)
        try:
            properties.extend(parse_declaration(decl.name, stream))
        except UnsupportedValue as error:
            log_error(f"Unsupported CSS value: `{_snippet(lexer, decl)}`", error.location, file_name)
            logger.debug(error.message)
        except ParseError as error:
            log_error(f"Failed to parse CSS property: `{_snippet(lexer, decl)}`", error.location, file_name)
            logger.debug(error.message)

    return tuple(properties), tuple(variables)


def _index_key(chain: tuple[Selector, ...]) -> str | None:
    """The class of the rightmost compound selector, or None to check on every node."""
    for selector in reversed(chain):
        if selector.kind.combinator:
            return None
        if selector.kind is SelectorKind.Class:
            return selector.name
    return None


class Stylesheet:
    """An immutable, specificity ordered list of rules with a class index."""

    def __init__(self, rules: tuple[Rule, ...] = (), options: Options | None = None) -> None:
        self.rules = rules
        self.options = default_options(dict(options or {}))
        self.wildcard: list[Rule] = []
        self.classes: dict[str, list[Rule]] = {}
        for rule in rules:
            if (key := _index_key(rule.selectors)) is None:
                self.wildcard.append(rule)
            else:
                self.classes.setdefault(key, []).append(rule)

    @staticmethod
    def parse(text: str, **options: Unpack[Options]) -> Stylesheet:
        """Parse stylesheet text.

        Nothing is raised for bad input. Skipped rules and declarations are
        reported through `restyle.diagnostics.log_error`.
        """
        options = default_options(options)
        file_name = options["file_name"]
        rules, parser = Parse.parse_rule_list(text)
        lexer = parser.lexer

        for error in parser.errors:
            log_error(error.message, error.location, file_name)

        pending = []
        for rule in rules:
            if isinstance(rule, AtRule):
                logger.warning("Skipping unsupported at-rule `@%s`", rule.name)
                continue
            if not isinstance(rule, QualifiedRule) or rule.block is None:
                continue

            try:
                chains = parse_selector_list(ValueStream(rule.prelude, lexer, rule.block.start))
            except ParseError as error:
                first_line = lexer.source[rule.start:rule.block.end].strip().splitlines()[0]
                log_error(f"Failed to parse CSS rule: `{first_line}`", error.location, file_name)
                logger.debug(error.message)
                continue

            declarations, errors = Parse.parse_decl_list(rule.block, lexer)
            for error in errors:
                log_error(f"Failed to parse CSS property: {error.message}", error.location, file_name)
            properties, variables = parse_block(declarations, lexer, file_name)

            for chain in chains:
                has_pseudos = any(selector.kind.pseudo for selector in chain)
                pending.append((specificity(chain), chain, properties, has_pseudos, variables))

        pending.sort(key=lambda entry: entry[0])
        ordered = tuple(Rule(*entry, order=order) for order, entry in enumerate(pending))
        logger.debug("Parsed %d rule(s) from %s", len(ordered), file_name or "<no-filename>")
        return Stylesheet(ordered, options)

    def match(self, element: Element) -> list[Rule]:
        """Every rule whose selector matches `element`, in cascade order."""
        candidates = list(self.wildcard)
        for name in set(element.classes):
            candidates.extend(self.classes.get(name, ()))
        return cascade_order(rule for rule in candidates if rule_matches(rule, element))

    def compute(
        self,
        element: Element,
        parent_style: Style | None = None,
        parent_variables: VariableContext | None = None,
    ) -> ComputedStyle:
        """Match `element` and cascade the matching rules."""
        return compute_style(
            self.match(element),
            parent_style,
            parent_variables,
            var_limit=self.options["var_limit"],
            file_name=self.options["file_name"],
        )

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def __str__(self) -> str:
        return "\n".join(str(rule) for rule in self.rules)
