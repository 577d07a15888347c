"""Declaration dispatch.

`HANDLERS` maps every lowercase property name to a function that reads the
declaration value from a `ValueStream` and returns the properties it sets.
Values that contain `var()` come back as `Deferred` and are parsed again by
`reparse` once custom properties are known.
"""
from __future__ import annotations
from collections.abc import Callable
from logging import getLogger
from typing import Any, TypeVar

from restyle.css import grammar, shorthands
from restyle.css.errors import ParseError, ResolveError, ResolveErrorKind, SourceLocation, VarFunction
from restyle.css.gradient import background_image
from restyle.css.properties import INHERIT, INITIAL, Deferred, Exact, Property, PropertyKind, PropertyValue
from restyle.css.stream import ValueStream
from restyle.css.transform import transform

__all__ = ["Handler", "HANDLERS", "exact_or_deferred", "longhand", "shorthand", "parse_declaration", "reparse"]

logger = getLogger(__name__)

T = TypeVar("T")
Handler = Callable[[ValueStream], list[Property]]


def exact_or_deferred(
    stream: ValueStream,
    reader: Callable[[ValueStream], T],
    deferred: Callable[[str, SourceLocation], T],
) -> T:
    """Read the whole value with `reader`, deferring it if a `var()` call shows up.

    On the `VarFunction` signal the stream is rewound and everything left in
    the value is kept as raw text for `deferred`. Any other error propagates.
    """
    state = stream.state()
    try:
        value = reader(stream)
        stream.expect_exhausted()
        return value
    except VarFunction:
        stream.reset(state)
        location = stream.location()
        raw = stream.remaining()
        stream.reset(len(stream.components))
        return deferred(raw, location)


def _exact(value: Any) -> PropertyValue:
    if isinstance(value, PropertyValue):
        return value
    return Exact(value)


def longhand(kind: PropertyKind, reader: Callable[[ValueStream], Any]) -> Handler:
    """A handler for a single property that takes `initial`, `inherit` or its grammar."""

    def handle(stream: ValueStream) -> list[Property]:
        if stream.is_keyword_exhausted("initial"):
            return [Property(kind, INITIAL)]
        if stream.is_keyword_exhausted("inherit"):
            return [Property(kind, INHERIT)]
        value = exact_or_deferred(
            stream,
            lambda s: _exact(reader(s)),
            lambda raw, location: Deferred(raw, location),
        )
        return [Property(kind, value)]

    return handle


def shorthand(kind: PropertyKind, reader: Handler) -> Handler:
    """A handler for a shorthand, deferred as a whole when any part uses `var()`."""

    def handle(stream: ValueStream) -> list[Property]:
        return exact_or_deferred(stream, reader, lambda raw, location: [Property(kind, Deferred(raw, location))])

    return handle


K = PropertyKind
HANDLERS: dict[str, Handler] = {
    "background-color": longhand(K.BackgroundColor, grammar.color),
    "background-image": longhand(K.BackgroundImage, background_image),
    "border-bottom-color": longhand(K.BorderBottomColor, grammar.color),
    "border-bottom-left-radius": longhand(K.BorderBottomLeftRadius, grammar.positive_length),
    "border-bottom-right-radius": longhand(K.BorderBottomRightRadius, grammar.positive_length),
    "border-bottom-width": longhand(K.BorderBottomWidth, grammar.positive_length),
    "border-bottom": shorthand(K.BorderBottom, shorthands.border_side("bottom")),
    "border-color": shorthand(K.BorderColor, shorthands.border_color),
    "border-left-color": longhand(K.BorderLeftColor, grammar.color),
    "border-left-width": longhand(K.BorderLeftWidth, grammar.positive_length),
    "border-left": shorthand(K.BorderLeft, shorthands.border_side("left")),
    "border-radius": shorthand(K.BorderRadius, shorthands.border_radius),
    "border-right-color": longhand(K.BorderRightColor, grammar.color),
    "border-right-width": longhand(K.BorderRightWidth, grammar.positive_length),
    "border-right": shorthand(K.BorderRight, shorthands.border_side("right")),
    "border-top-color": longhand(K.BorderTopColor, grammar.color),
    "border-top-left-radius": longhand(K.BorderTopLeftRadius, grammar.positive_length),
    "border-top-right-radius": longhand(K.BorderTopRightRadius, grammar.positive_length),
    "border-top-width": longhand(K.BorderTopWidth, grammar.positive_length),
    "border-top": shorthand(K.BorderTop, shorthands.border_side("top")),
    "border-width": shorthand(K.BorderWidth, shorthands.border_width),
    "border": shorthand(K.Border, shorthands.border),
    "bottom": longhand(K.Bottom, grammar.unit),
    "left": longhand(K.Left, grammar.unit),
    "right": longhand(K.Right, grammar.unit),
    "top": longhand(K.Top, grammar.unit),
    "box-shadow": longhand(K.BoxShadow, grammar.box_shadow),
    "child-between": longhand(K.ChildBetween, grammar.positive_unit),
    "child-bottom": longhand(K.ChildBottom, grammar.positive_unit),
    "child-left": longhand(K.ChildLeft, grammar.positive_unit),
    "child-right": longhand(K.ChildRight, grammar.positive_unit),
    "child-space": shorthand(K.ChildSpace, shorthands.child_space),
    "child-top": longhand(K.ChildTop, grammar.positive_unit),
    "color": longhand(K.Color, grammar.color),
    "display": longhand(K.Display, grammar.display),
    "flex-basis": longhand(K.FlexBasis, grammar.positive_length),
    "font-family": longhand(K.FontFamily, grammar.font_family),
    "font-size": longhand(K.FontSize, grammar.font_size),
    "font-width": longhand(K.FontWidth, grammar.font_width),
    "font-style": longhand(K.FontStyle, grammar.font_style),
    "font-weight": longhand(K.FontWeight, grammar.font_weight),
    "font": shorthand(K.Font, shorthands.font),
    "height": longhand(K.Height, grammar.positive_unit),
    "width": longhand(K.Width, grammar.positive_unit),
    "letter-spacing": longhand(K.LetterSpacing, grammar.unit),
    "word-spacing": longhand(K.WordSpacing, grammar.unit),
    "line-height": longhand(K.LineHeight, grammar.positive_unit),
    "max-bottom": longhand(K.MaxBottom, grammar.positive_length),
    "max-child-between": longhand(K.MaxChildBetween, grammar.positive_length),
    "max-child-bottom": longhand(K.MaxChildBottom, grammar.positive_length),
    "max-child-left": longhand(K.MaxChildLeft, grammar.positive_length),
    "max-child-right": longhand(K.MaxChildRight, grammar.positive_length),
    "max-child-top": longhand(K.MaxChildTop, grammar.positive_length),
    "max-height": longhand(K.MaxHeight, grammar.positive_length),
    "max-left": longhand(K.MaxLeft, grammar.positive_length),
    "max-right": longhand(K.MaxRight, grammar.positive_length),
    "max-top": longhand(K.MaxTop, grammar.positive_length),
    "max-width": longhand(K.MaxWidth, grammar.positive_length),
    "min-bottom": longhand(K.MinBottom, grammar.positive_length),
    "min-child-between": longhand(K.MinChildBetween, grammar.positive_length),
    "min-child-bottom": longhand(K.MinChildBottom, grammar.positive_length),
    "min-child-left": longhand(K.MinChildLeft, grammar.positive_length),
    "min-child-right": longhand(K.MinChildRight, grammar.positive_length),
    "min-child-top": longhand(K.MinChildTop, grammar.positive_length),
    "min-height": longhand(K.MinHeight, grammar.positive_length),
    "min-left": longhand(K.MinLeft, grammar.positive_length),
    "min-right": longhand(K.MinRight, grammar.positive_length),
    "min-top": longhand(K.MinTop, grammar.positive_length),
    "min-width": longhand(K.MinWidth, grammar.positive_length),
    "opacity": longhand(K.Opacity, grammar.opacity),
    "outline-color": longhand(K.OutlineColor, grammar.color),
    "outline-offset": longhand(K.OutlineOffset, grammar.length),
    "outline-width": longhand(K.OutlineWidth, grammar.positive_length),
    "outline": shorthand(K.Outline, shorthands.outline),
    "position": longhand(K.Position, grammar.position),
    "selection-background": longhand(K.SelectionBackground, grammar.color),
    "selection-color": longhand(K.SelectionColor, grammar.color),
    "space": shorthand(K.Space, shorthands.space),
    "text-align": longhand(K.TextAlign, grammar.text_align),
    "text-shadow": longhand(K.TextShadow, grammar.text_shadow),
    "transform": longhand(K.Transform, transform),
    "z-index": longhand(K.ZIndex, grammar.integer),
}
del K


def parse_declaration(name: str, stream: ValueStream) -> list[Property]:
    """Parse one declaration value.

    Raises:
        InvalidValue: For an unknown property name or a malformed value.
        UnsupportedValue: For a value that is recognized but not implemented.
    """
    if (handler := HANDLERS.get(name.lower())) is None:
        raise stream.error(f"Unknown property `{name}`")
    return handler(stream)


def reparse(kind: PropertyKind, text: str, deferred: Deferred) -> list[Property]:
    """Parse var() free `text` with the grammar that produced `deferred`.

    Raises:
        ResolveError: `ParseFailed` when the text does not fit the grammar.
    """
    try:
        properties = HANDLERS[kind.css_name](ValueStream.from_source(text))
    except ParseError as error:
        logger.debug("Reparse of `%s` failed: %s", text, error.message)
        raise ResolveError(ResolveErrorKind.ParseFailed, deferred.raw, deferred.location) from error

    if any(isinstance(prop.value, Deferred) for prop in properties):
        raise ResolveError(ResolveErrorKind.ParseFailed, deferred.raw, deferred.location)
    return properties
