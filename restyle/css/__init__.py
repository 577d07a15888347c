"""
References:
    - [basics](https://developer.mozilla.org/en-US/docs/Learn/CSS/First_steps/How_CSS_is_structured)
    - [syntax](https://www.w3.org/TR/css-syntax-3/)
    - [custom properites](https://developer.mozilla.org/en-US/docs/Web/CSS/Using_CSS_custom_properties)
    - [pseudo classes](https://developer.mozilla.org/en-US/docs/Web/CSS/Pseudo-classes)
    - [linear-gradient](https://developer.mozilla.org/en-US/docs/Web/CSS/gradient/linear-gradient)

<comment></comment>
<ruleset>
    <selector/> <block>
        <property/>: <value/>;
        <variable/>: <anything/>;
    </block>
</ruleset>

property => one of `declarations.HANDLERS`,
value => length, unit, color, keyword, function, shorthand, var(),
block => `{}`,
selector => class, `*`, descendant, child, :hover/:focus/:active/:enabled/:disabled,
at-rules => skipped,
"""
from restyle.css.cascade import ComputedStyle, VariableContext, compute_style
from restyle.css.errors import (
    InvalidValue,
    ParseError,
    ResolveError,
    ResolveErrorKind,
    SourceLocation,
    UnsupportedValue,
)
from restyle.css.matching import Element, rule_matches
from restyle.css.properties import INHERIT, INITIAL, Deferred, Exact, Property, PropertyKind
from restyle.css.selectors import Selector, SelectorKind
from restyle.css.stylesheet import Rule, Stylesheet

__all__ = [
    "ComputedStyle",
    "VariableContext",
    "compute_style",
    "InvalidValue",
    "ParseError",
    "ResolveError",
    "ResolveErrorKind",
    "SourceLocation",
    "UnsupportedValue",
    "Element",
    "rule_matches",
    "INHERIT",
    "INITIAL",
    "Deferred",
    "Exact",
    "Property",
    "PropertyKind",
    "Selector",
    "SelectorKind",
    "Rule",
    "Stylesheet",
]
