"""Computed style values.

`Style` is the flat record a node ends up with after the cascade. Every other
class here is one of the typed values a property can carry. Each value's
`str()` is valid CSS for the property it belongs to.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Literal, NamedTuple

from typing_extensions import TypeAliasType

from restyle.colors import Color, ColorProperty, ColorSpace, HueDirection, format_number

__all__ = [
    "Length",
    "Unit",
    "Direction",
    "Position",
    "TextAlign",
    "FontStyle",
    "FontWidth",
    "BoxShadow",
    "TextShadow",
    "Affine",
    "IDENTITY",
    "GradientDirection",
    "GradientAngle",
    "LinearGradient",
    "GradientStack",
    "Style",
    "INHERITED",
]


@dataclass(frozen=True)
class Length:
    value: float
    unit: Literal["px", "em"] = "px"

    @staticmethod
    def px(value: float) -> Length:
        return Length(float(value), "px")

    @property
    def negative(self) -> bool:
        return self.value < 0

    def __str__(self) -> str:
        return f"{format_number(self.value)}{self.unit}"


@dataclass(frozen=True)
class Unit:
    """`auto`, a length, a percentage, or a stretch factor for flexible layout."""

    kind: Literal["auto", "px", "em", "percent", "stretch"]
    value: float = 0.0

    @staticmethod
    def auto() -> Unit:
        return Unit("auto")

    @staticmethod
    def px(value: float) -> Unit:
        return Unit("px", float(value))

    @staticmethod
    def em(value: float) -> Unit:
        return Unit("em", float(value))

    @staticmethod
    def percent(value: float) -> Unit:
        """`value` is a fraction, `Unit.percent(0.5)` is `50%`."""
        return Unit("percent", float(value))

    @staticmethod
    def stretch(value: float) -> Unit:
        return Unit("stretch", float(value))

    @property
    def negative(self) -> bool:
        return self.kind != "auto" and self.value < 0

    def __str__(self) -> str:
        if self.kind == "auto":
            return "auto"
        elif self.kind == "percent":
            return f"{format_number(self.value * 100)}%"
        elif self.kind == "stretch":
            return f"{format_number(self.value)}s"
        return f"{format_number(self.value)}{self.kind}"


class Keyword(Enum):
    def __str__(self) -> str:
        return self.value


class Direction(Keyword):
    Row = "row"
    RowReverse = "row-reverse"
    Column = "column"
    ColumnReverse = "column-reverse"


class Position(Keyword):
    ParentDirected = "parent-directed"
    SelfDirected = "self-directed"
    Fixed = "fixed"


class TextAlign(Keyword):
    Start = "start"
    End = "end"
    Left = "left"
    Right = "right"
    Center = "center"
    Justify = "justify"


@dataclass(frozen=True)
class FontStyle:
    kind: Literal["normal", "italic", "oblique"] = "normal"
    angle: float | None = None
    """Oblique angle in degrees, None for the font's default slant."""

    def __str__(self) -> str:
        if self.kind == "oblique" and self.angle is not None:
            return f"oblique {format_number(self.angle)}deg"
        return self.kind


class FontWidth(float):
    """A font width as a fraction of normal, written as a percentage."""

    def __str__(self) -> str:
        return f"{format_number(self * 100)}%"


@dataclass(frozen=True)
class BoxShadow:
    offset_x: Length = Length(0)
    offset_y: Length = Length(0)
    blur: Length = Length(0)
    spread: Length = Length(0)
    color: Color | None = None
    """None paints with the current color."""
    inset: bool = False

    def __str__(self) -> str:
        parts = ["inset"] if self.inset else []
        parts.extend(str(length) for length in (self.offset_x, self.offset_y, self.blur, self.spread))
        if self.color is not None:
            parts.append(str(self.color))
        return " ".join(parts)


@dataclass(frozen=True)
class TextShadow:
    offset_x: Length = Length(0)
    offset_y: Length = Length(0)
    blur: Length = Length(0)
    color: Color | None = None

    def __str__(self) -> str:
        parts = [str(length) for length in (self.offset_x, self.offset_y, self.blur)]
        if self.color is not None:
            parts.append(str(self.color))
        return " ".join(parts)


class Affine(NamedTuple):
    """2D affine matrix `[a b c d e f]` mapping `(x, y)` to `(ax + cy + e, bx + dy + f)`."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def then(self, other: Affine) -> Affine:
        """Apply `self` first and `other` second."""
        a1, b1, c1, d1, e1, f1 = self
        a2, b2, c2, d2, e2, f2 = other
        return Affine(
            a2 * a1 + c2 * b1,
            b2 * a1 + d2 * b1,
            a2 * c1 + c2 * d1,
            b2 * c1 + d2 * d1,
            a2 * e1 + c2 * f1 + e2,
            b2 * e1 + d2 * f1 + f2,
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f

    def isclose(self, other: Affine, abs_tol: float = 1e-9) -> bool:
        return all(math.isclose(x, y, abs_tol=abs_tol) for x, y in zip(self, other))

    def __str__(self) -> str:
        if self == IDENTITY:
            return "none"
        return f"matrix({', '.join(repr(float(value)) for value in self)})"


IDENTITY = Affine()


class GradientDirection(Keyword):
    ToTop = "to top"
    ToRight = "to right"
    ToBottom = "to bottom"
    ToLeft = "to left"
    ToTopLeft = "to top left"
    ToTopRight = "to top right"
    ToBottomLeft = "to bottom left"
    ToBottomRight = "to bottom right"


GradientAngle = TypeAliasType("GradientAngle", GradientDirection | float)
"""Either a side or corner keyword or an angle in radians."""


@dataclass(frozen=True)
class LinearGradient:
    angle: GradientAngle = GradientDirection.ToBottom
    stops: tuple[tuple[float, ColorProperty], ...] = ()
    color_space: ColorSpace = ColorSpace.Srgb
    hue_direction: HueDirection = HueDirection.Shorter

    def __str__(self) -> str:
        prelude = []
        if isinstance(self.angle, GradientDirection):
            if self.angle is not GradientDirection.ToBottom:
                prelude.append(str(self.angle))
        else:
            prelude.append(f"{repr(float(self.angle))}rad")
        if self.color_space is not ColorSpace.Srgb or self.hue_direction is not HueDirection.Shorter:
            prelude.append(f"in {self.color_space}")
            if self.hue_direction is not HueDirection.Shorter:
                prelude.append(f"{self.hue_direction} hue")

        parts = [" ".join(prelude)] if prelude else []
        parts.extend(f"{color} {format_number(position * 100)}%" for position, color in self.stops)
        return f"linear-gradient({', '.join(parts)})"


GradientStack = TypeAliasType("GradientStack", tuple[LinearGradient, ...])


INHERITED = (
    "color",
    "font_width",
    "font_size",
    "font_style",
    "font_family",
    "font_weight",
    "text_shadow",
    "letter_spacing",
    "word_spacing",
    "line_height",
)
"""Fields a fresh `Style` takes from the parent instead of the default."""


def _px(value: float = 0.0):
    return field(default=Length(value))


def _auto():
    return field(default=Unit("auto"))


BLACK = Color(0.0, 0.0, 0.0)


@dataclass
class Style:
    background_color: Color = Color(0.0, 0.0, 0.0, 0.0)
    background_image: GradientStack | None = None

    border_top_color: Color = BLACK
    border_right_color: Color = BLACK
    border_bottom_color: Color = BLACK
    border_left_color: Color = BLACK

    border_top_left_radius: Length = _px()
    border_top_right_radius: Length = _px()
    border_bottom_right_radius: Length = _px()
    border_bottom_left_radius: Length = _px()

    border_top_width: Length = _px()
    border_right_width: Length = _px()
    border_bottom_width: Length = _px()
    border_left_width: Length = _px()

    top: Unit = _auto()
    right: Unit = _auto()
    bottom: Unit = _auto()
    left: Unit = _auto()

    box_shadow: tuple[BoxShadow, ...] | None = None

    child_top: Unit = _auto()
    child_right: Unit = _auto()
    child_bottom: Unit = _auto()
    child_left: Unit = _auto()
    child_between: Unit = _auto()

    color: Color = BLACK
    display: Direction | None = Direction.Column
    flex_basis: Length = _px()

    font_family: str | None = None
    font_size: float = 16.0
    font_style: FontStyle = FontStyle()
    font_weight: float = 400.0
    font_width: FontWidth = FontWidth(1.0)

    width: Unit = field(default=Unit("stretch", 1.0))
    height: Unit = field(default=Unit("stretch", 1.0))
    line_height: Unit = field(default=Unit("stretch", 1.2))
    letter_spacing: Unit | None = None
    word_spacing: Unit | None = None

    max_top: Length | None = None
    max_right: Length | None = None
    max_bottom: Length | None = None
    max_left: Length | None = None
    max_child_top: Length | None = None
    max_child_right: Length | None = None
    max_child_bottom: Length | None = None
    max_child_left: Length | None = None
    max_child_between: Length | None = None
    max_width: Length | None = None
    max_height: Length | None = None

    min_top: Length | None = None
    min_right: Length | None = None
    min_bottom: Length | None = None
    min_left: Length | None = None
    min_child_top: Length | None = None
    min_child_right: Length | None = None
    min_child_bottom: Length | None = None
    min_child_left: Length | None = None
    min_child_between: Length | None = None
    min_width: Length | None = None
    min_height: Length | None = None

    opacity: float = 1.0
    outline_color: Color = BLACK
    outline_offset: Length = _px()
    outline_width: Length = _px()
    position: Position = Position.ParentDirected

    selection_background: Color = Color.rgba8(4, 101, 175, 128)
    selection_color: Color | None = None

    text_align: TextAlign = TextAlign.Start
    text_shadow: tuple[TextShadow, ...] | None = None
    transform: Affine = IDENTITY
    z_index: int = 0

    @staticmethod
    def inherit(parent: Style | None) -> Style:
        """A fresh style seeded with the inherited fields of `parent` and defaults elsewhere."""
        style = Style()
        if parent is not None:
            for name in INHERITED:
                setattr(style, name, getattr(parent, name))
        return style


DEFAULT_STYLE = Style()
