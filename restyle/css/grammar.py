"""Value grammars for longhand properties.

Each grammar reads one property value from a `ValueStream` and returns the typed
value, or a `PropertyValue` directly when a keyword such as `none` maps to one.
Grammars never check for `initial`/`inherit` or leftover input, the declaration
layer does that.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import math

from restyle.colors import CURRENT_COLOR, ColorProperty, parse_color
from restyle.css.errors import InvalidValue
from restyle.css.parser import FunctionBlock
from restyle.css.properties import INITIAL, PropertyValue
from restyle.css.stream import ValueStream
from restyle.css.tokens import *
from restyle.style import (
    BoxShadow,
    Direction,
    FontStyle,
    FontWidth,
    Length,
    Position,
    TextAlign,
    TextShadow,
    Unit,
)

__all__ = [
    "length",
    "positive_length",
    "unit",
    "positive_unit",
    "angle",
    "color",
    "integer",
    "opacity",
    "display",
    "position",
    "text_align",
    "font_family",
    "font_size",
    "font_style",
    "font_weight",
    "font_width",
    "box_shadow",
    "text_shadow",
]

# ---- leaf readers ----

# Length units that parse but have no layout meaning here
OTHER_LENGTHS = frozenset({
    "rem", "ex", "rex", "ch", "rch", "ic", "lh", "rlh",
    "vw", "vh", "vi", "vb", "vmin", "vmax",
    "cm", "mm", "q", "in", "pt", "pc",
})


def length(stream: ValueStream) -> Length:
    """`<number>px`, `<number>em`, or a bare `0`."""
    component = stream.next()
    if isinstance(component, Dimension) and component.unit.lower() in ("px", "em"):
        return Length(float(component.value), component.unit.lower())
    elif isinstance(component, Number) and component.value == 0:
        return Length.px(0)
    elif isinstance(component, Dimension) and component.unit.lower() in OTHER_LENGTHS:
        raise stream.unsupported(component)
    raise stream.error(component=component)


def positive_length(stream: ValueStream) -> Length:
    location = stream.location()
    value = length(stream)
    if value.negative:
        raise InvalidValue("Length must not be negative", location)
    return value


def unit(stream: ValueStream) -> Unit:
    """A length, `<percentage>`, `auto`, or a stretch factor (`2s` or a bare `2`)."""
    component = stream.next()
    if isinstance(component, Number):
        if component.value == 0:
            return Unit.px(0)
        return Unit.stretch(component.value)
    elif isinstance(component, Dimension):
        kind = component.unit.lower()
        if kind == "s":
            return Unit.stretch(component.value)
        elif kind in ("px", "em"):
            return Unit(kind, float(component.value))
        elif kind in OTHER_LENGTHS:
            raise stream.unsupported(component)
    elif isinstance(component, Percentage):
        return Unit.percent(component.unit_value)
    elif isinstance(component, Ident) and component.matches("auto"):
        return Unit.auto()
    raise stream.error(component=component)


def positive_unit(stream: ValueStream) -> Unit:
    location = stream.location()
    value = unit(stream)
    if value.negative:
        raise InvalidValue("Value must not be negative", location)
    return value


ANGLES = {
    "rad": 1.0,
    "deg": math.pi / 180,
    "grad": math.pi / 200,
    "turn": math.tau,
}


def angle(stream: ValueStream) -> float:
    """An angle in radians. Only a bare `0` may omit the unit."""
    component = stream.next()
    if isinstance(component, Number) and component.value == 0:
        return 0.0
    if isinstance(component, Dimension):
        if (scale := ANGLES.get(component.unit.lower())) is None:
            raise stream.unsupported(component)
        return float(component.value) * scale
    raise stream.error(component=component)


def color(stream: ValueStream) -> ColorProperty:
    """A CSS Level 3 color or `currentcolor`."""
    component = stream.next()
    stream.check_var(component)
    if isinstance(component, (Ident, Hash, FunctionBlock)):
        parsed = parse_color(stream.slice(component))
        if parsed is not None:
            return parsed
    raise stream.error(component=component)


def integer(stream: ValueStream) -> int:
    component = stream.next()
    if not isinstance(component, Number) or component.type != "integer":
        raise stream.error(component=component)
    return int(component.value)


# ---- longhands ----

def opacity(stream: ValueStream) -> float:
    component = stream.next()
    if isinstance(component, Percentage):
        return min(max(component.unit_value, 0.0), 1.0)
    elif isinstance(component, Number):
        return min(max(float(component.value), 0.0), 1.0)
    raise stream.error(component=component)


def display(stream: ValueStream) -> Direction | None:
    keyword = stream.keyword("none", *(direction.value for direction in Direction))
    if keyword == "none":
        return None
    return Direction(keyword)


def position(stream: ValueStream) -> Position:
    return Position(stream.keyword(*(position.value for position in Position)))


def text_align(stream: ValueStream) -> TextAlign:
    return TextAlign(stream.keyword(*(align.value for align in TextAlign)))


def font_family(stream: ValueStream) -> str:
    """A comma separated family list, each a quoted string or a run of identifiers.

    The list is returned as the trimmed source text it was written as.
    """
    start = stream.state()
    first = True
    while not stream.is_exhausted():
        if not first:
            stream.expect_comma()
            if stream.is_exhausted():
                raise stream.error("Expected a font family after `,`")

        component = stream.next()
        if isinstance(component, Ident):
            while (following := stream.peek()) is not None and not isinstance(following, Comma):
                component = stream.next()
                if not isinstance(component, Ident):
                    raise stream.error(component=component)
        elif not isinstance(component, String):
            raise stream.error(component=component)
        first = False

    if first:
        raise stream.error("Expected a font family")
    return stream.slice_from(start).strip()


def font_size(stream: ValueStream) -> float:
    """A `<number>` or `<number>px`."""
    component = stream.next()
    if isinstance(component, Number):
        value = float(component.value)
    elif isinstance(component, Dimension):
        if component.unit.lower() != "px":
            raise stream.unsupported(component)
        value = float(component.value)
    else:
        raise stream.error(component=component)

    if value < 0:
        raise stream.error("Font size must not be negative", component)
    return value


def font_style(stream: ValueStream, strict: bool = True) -> FontStyle:
    """`normal`, `italic`, or `oblique` with an optional angle in degrees.

    With `strict` an oblique angle in any other unit is unsupported, otherwise
    it is left for the next reader, as the `font` shorthand needs.
    """
    keyword = stream.keyword("normal", "italic", "oblique")
    if keyword != "oblique":
        return FontStyle(keyword)

    component = stream.peek()
    if isinstance(component, Dimension):
        if component.unit.lower() == "deg":
            stream.next()
            return FontStyle("oblique", float(component.value))
        if strict:
            raise stream.unsupported(component)
    elif component is not None:
        stream.check_var(component)
    return FontStyle("oblique")


def font_weight(stream: ValueStream) -> float:
    """`normal`, `bold`, or a `<number>` clamped into `1..1000`."""
    component = stream.next()
    if isinstance(component, Ident):
        keyword = component.raw.lower()
        if keyword == "normal":
            return 400.0
        elif keyword == "bold":
            return 700.0
        elif keyword in ("bolder", "lighter"):
            raise stream.unsupported(component)
    elif isinstance(component, Number):
        return min(max(float(component.value), 1.0), 1000.0)
    raise stream.error(component=component)


FONT_WIDTHS = {
    "ultra-condensed": 0.5,
    "extra-condensed": 0.625,
    "condensed": 0.75,
    "semi-condensed": 0.875,
    "normal": 1.0,
    "semi-expanded": 1.125,
    "expanded": 1.25,
    "extra-expanded": 1.5,
    "ultra-expanded": 2.0,
}


def font_width(stream: ValueStream) -> FontWidth:
    """A width keyword or a non negative `<percentage>`."""
    component = stream.next()
    if isinstance(component, Percentage):
        if component.value < 0:
            raise stream.error("Font width must not be negative", component)
        return FontWidth(component.unit_value)
    elif isinstance(component, Ident) and (width := FONT_WIDTHS.get(component.raw.lower())) is not None:
        return FontWidth(width)
    raise stream.error(component=component)


# ---- shadows ----

@dataclass
class ShadowParts:
    """The pieces of one comma separated shadow as they are read."""

    lengths: list[Length] = field(default_factory=list)
    color: ColorProperty | None = None
    inset: bool = False

    def finish(self, stream: ValueStream) -> tuple[Length, Length, Length | None, Length | None]:
        if not 2 <= len(self.lengths) <= 4:
            raise stream.error("A shadow needs two to four lengths")
        offset_x, offset_y, blur, spread = (*self.lengths, None, None)[:4]
        if blur is not None and blur.negative:
            raise stream.error("Shadow blur must not be negative")
        return offset_x, offset_y, blur, spread


def shadow_list(stream: ValueStream, allow_inset: bool) -> list[ShadowParts] | PropertyValue:
    if stream.is_keyword_exhausted("none"):
        return INITIAL

    shadows = [ShadowParts()]
    while not stream.is_exhausted():
        current = shadows[-1]
        if (parsed := stream.attempt(color)) is not None:
            if current.color is not None:
                raise stream.error("A shadow may only have one color")
            current.color = parsed
            continue

        if (parsed := stream.attempt(length)) is not None:
            if len(current.lengths) == 4:
                raise stream.error("A shadow has at most four lengths")
            current.lengths.append(parsed)
            continue

        component = stream.next()
        if isinstance(component, Comma):
            current.finish(stream)
            shadows.append(ShadowParts())
        elif allow_inset and isinstance(component, Ident) and component.matches("inset"):
            if current.inset:
                raise stream.error(component=component)
            current.inset = True
        else:
            raise stream.error(component=component)

    shadows[-1].finish(stream)
    return shadows


def _paint_color(value: ColorProperty | None):
    # currentcolor is resolved at paint time
    return None if value is CURRENT_COLOR else value


def box_shadow(stream: ValueStream) -> tuple[BoxShadow, ...] | PropertyValue:
    shadows = shadow_list(stream, True)
    if isinstance(shadows, PropertyValue):
        return shadows

    result = []
    for parts in shadows:
        offset_x, offset_y, blur, spread = parts.finish(stream)
        result.append(BoxShadow(
            offset_x,
            offset_y,
            blur or Length(0),
            spread or Length(0),
            _paint_color(parts.color),
            parts.inset,
        ))
    return tuple(result)


def text_shadow(stream: ValueStream) -> tuple[TextShadow, ...] | PropertyValue:
    shadows = shadow_list(stream, False)
    if isinstance(shadows, PropertyValue):
        return shadows

    result = []
    for parts in shadows:
        offset_x, offset_y, blur, spread = parts.finish(stream)
        if spread is not None:
            raise stream.error("text-shadow does not take a spread")
        result.append(TextShadow(offset_x, offset_y, blur or Length(0), _paint_color(parts.color)))
    return tuple(result)
