"""Shorthand grammars.

A shorthand expands into several longhand properties. Unlike longhand grammars
each one handles `initial` and `inherit` itself, since the keyword has to fan
out to every longhand it covers.
"""
from __future__ import annotations
from collections.abc import Callable, Sequence
from typing import Any

from restyle.css.grammar import color, font_family, font_size, font_style, font_weight, font_width, positive_length, unit
from restyle.css.properties import INHERIT, INITIAL, Exact, Property, PropertyKind, PropertyValue
from restyle.css.stream import ValueStream
from restyle.css.tokens import Delim, Ident
from restyle.style import Length

__all__ = [
    "quad",
    "border",
    "border_side",
    "border_color",
    "border_width",
    "border_radius",
    "space",
    "child_space",
    "font",
    "outline",
]

BORDER_COLORS = (
    PropertyKind.BorderTopColor,
    PropertyKind.BorderRightColor,
    PropertyKind.BorderBottomColor,
    PropertyKind.BorderLeftColor,
)
BORDER_WIDTHS = (
    PropertyKind.BorderTopWidth,
    PropertyKind.BorderRightWidth,
    PropertyKind.BorderBottomWidth,
    PropertyKind.BorderLeftWidth,
)
BORDER_RADII = (
    PropertyKind.BorderTopLeftRadius,
    PropertyKind.BorderTopRightRadius,
    PropertyKind.BorderBottomRightRadius,
    PropertyKind.BorderBottomLeftRadius,
)
SPACE = (PropertyKind.Top, PropertyKind.Right, PropertyKind.Bottom, PropertyKind.Left)
CHILD_SPACE = (PropertyKind.ChildTop, PropertyKind.ChildRight, PropertyKind.ChildBottom, PropertyKind.ChildLeft)
BORDER_SIDES = {
    "top": (PropertyKind.BorderTopColor, PropertyKind.BorderTopWidth),
    "right": (PropertyKind.BorderRightColor, PropertyKind.BorderRightWidth),
    "bottom": (PropertyKind.BorderBottomColor, PropertyKind.BorderBottomWidth),
    "left": (PropertyKind.BorderLeftColor, PropertyKind.BorderLeftWidth),
}
FONT = (
    PropertyKind.FontFamily,
    PropertyKind.FontStyle,
    PropertyKind.FontWeight,
    PropertyKind.FontWidth,
    PropertyKind.FontSize,
    PropertyKind.LineHeight,
)

LINE_WIDTHS = {"thin": 2.0, "medium": 4.0, "thick": 6.0}
LINE_STYLES = ("dotted", "dashed", "double", "groove", "ridge", "inset", "outset")


def fan_out(kinds: Sequence[PropertyKind], value: PropertyValue) -> list[Property]:
    return [Property(kind, value) for kind in kinds]


def keywords(stream: ValueStream, kinds: Sequence[PropertyKind]) -> list[Property] | None:
    """The fan out of a lone `initial` or `inherit`, otherwise None."""
    if stream.is_keyword_exhausted("initial"):
        return fan_out(kinds, INITIAL)
    if stream.is_keyword_exhausted("inherit"):
        return fan_out(kinds, INHERIT)
    return None


def quad(stream: ValueStream, reader: Callable[[ValueStream], Any]) -> tuple[Any, Any, Any, Any]:
    """One to four values expanded to `(top, right, bottom, left)` like `margin`."""
    first = reader(stream)
    if stream.is_exhausted():
        return first, first, first, first

    second = reader(stream)
    if stream.is_exhausted():
        return first, second, first, second

    third = reader(stream)
    if stream.is_exhausted():
        return first, second, third, second

    fourth = reader(stream)
    stream.expect_exhausted()
    return first, second, third, fourth


def _quad_shorthand(stream: ValueStream, kinds: Sequence[PropertyKind], reader: Callable[[ValueStream], Any]) -> list[Property]:
    if (result := keywords(stream, kinds)) is not None:
        return result
    return [Property(kind, Exact(value)) for kind, value in zip(kinds, quad(stream, reader))]


def line_width(stream: ValueStream) -> Length:
    """`thin`, `medium`, `thick`, or a non negative length."""
    component = stream.peek()
    if isinstance(component, Ident):
        stream.next()
        if (width := LINE_WIDTHS.get(component.raw.lower())) is None:
            raise stream.error(component=component)
        return Length.px(width)
    return positive_length(stream)


def stroke(stream: ValueStream, color_kinds: Sequence[PropertyKind], width_kinds: Sequence[PropertyKind]) -> list[Property]:
    """An unordered mix of at most one color, one width and the `solid` style."""
    result: list[Property] = []
    seen_color = seen_width = seen_style = False

    while not stream.is_exhausted():
        if (parsed := stream.attempt(color)) is not None:
            if seen_color:
                raise stream.error("Color was given twice")
            seen_color = True
            result.extend(fan_out(color_kinds, Exact(parsed)))
            continue

        if (width := stream.attempt(line_width)) is not None:
            if seen_width:
                raise stream.error("Width was given twice")
            seen_width = True
            result.extend(fan_out(width_kinds, Exact(width)))
            continue

        component = stream.next()
        if not isinstance(component, Ident):
            raise stream.error(component=component)
        keyword = component.raw.lower()
        if keyword in LINE_STYLES:
            raise stream.unsupported(component, f"Border style `{keyword}` is not supported")
        if keyword != "solid" or seen_style:
            raise stream.error(component=component)
        seen_style = True

    return result


def border(stream: ValueStream) -> list[Property]:
    if stream.is_keyword_exhausted("initial"):
        return fan_out(BORDER_COLORS, INITIAL) + fan_out(BORDER_WIDTHS, INITIAL)
    if stream.is_keyword_exhausted("inherit"):
        return fan_out(BORDER_COLORS, INHERIT) + fan_out(BORDER_WIDTHS, INHERIT)
    return stroke(stream, BORDER_COLORS, BORDER_WIDTHS)


def border_side(side: str) -> Callable[[ValueStream], list[Property]]:
    """The grammar of `border-top`, `border-right`, `border-bottom` or `border-left`."""
    color_kind, width_kind = BORDER_SIDES[side]

    def parse(stream: ValueStream) -> list[Property]:
        if (result := keywords(stream, (color_kind, width_kind))) is not None:
            return result
        return stroke(stream, (color_kind,), (width_kind,))

    return parse


def outline(stream: ValueStream) -> list[Property]:
    kinds = (PropertyKind.OutlineColor, PropertyKind.OutlineWidth)
    if (result := keywords(stream, kinds)) is not None:
        return result
    return stroke(stream, kinds[:1], kinds[1:])


def border_color(stream: ValueStream) -> list[Property]:
    return _quad_shorthand(stream, BORDER_COLORS, color)


def border_width(stream: ValueStream) -> list[Property]:
    return _quad_shorthand(stream, BORDER_WIDTHS, line_width)


def border_radius(stream: ValueStream) -> list[Property]:
    """Four radii as top-left, top-right, bottom-right and bottom-left."""
    return _quad_shorthand(stream, BORDER_RADII, positive_length)


def space(stream: ValueStream) -> list[Property]:
    return _quad_shorthand(stream, SPACE, unit)


def child_space(stream: ValueStream) -> list[Property]:
    return _quad_shorthand(stream, CHILD_SPACE, unit)


def font(stream: ValueStream) -> list[Property]:
    """`[<style> || <weight> || <width>]? <size> [/ <line-height>]? <family>`"""
    if (result := keywords(stream, FONT)) is not None:
        return result

    style = weight = width = None
    while True:
        if style is None and (style := stream.attempt(lambda s: font_style(s, strict=False))) is not None:
            continue
        if weight is None and (weight := stream.attempt(font_weight)) is not None:
            continue
        if width is None and (width := stream.attempt(font_width)) is not None:
            continue
        break

    size = font_size(stream)

    line_height: PropertyValue = INITIAL
    following = stream.peek()
    if isinstance(following, Delim) and following.raw == "/":
        stream.next()
        if stream.try_keyword("normal") is None:
            line_height = Exact(unit(stream))

    family = font_family(stream)

    def exact_or_initial(value) -> PropertyValue:
        return INITIAL if value is None else Exact(value)

    return [
        Property(PropertyKind.FontStyle, exact_or_initial(style)),
        Property(PropertyKind.FontWeight, exact_or_initial(weight)),
        Property(PropertyKind.FontWidth, exact_or_initial(width)),
        Property(PropertyKind.FontSize, Exact(size)),
        Property(PropertyKind.LineHeight, line_height),
        Property(PropertyKind.FontFamily, Exact(family)),
    ]
