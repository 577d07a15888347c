"""Parsed property values and how they are written into a `Style`.

A `Property` pairs a `PropertyKind` with one of four `PropertyValue` variants:

- `Initial` resets the field to its default.
- `Inherit` copies the field from the parent style.
- `Exact` carries a concrete, already parsed value.
- `Deferred` carries raw text that still contains `var()` calls and is parsed
  again once custom properties are known.

Shorthand kinds never carry `Exact`. Their grammars fan out to longhands at
parse time, so a shorthand `Property` only exists while it is deferred.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from restyle.colors import ColorKeyword, format_number, resolve_color
from restyle.css.errors import SourceLocation
from restyle.style import DEFAULT_STYLE, Style, Unit

__all__ = [
    "PropertyValue",
    "Initial",
    "Inherit",
    "Exact",
    "Deferred",
    "INITIAL",
    "INHERIT",
    "PropertyKind",
    "Property",
    "to_css",
    "apply",
]


class PropertyValue:
    __slots__ = ()


@dataclass(frozen=True)
class Initial(PropertyValue):
    def __str__(self) -> str:
        return "initial"


@dataclass(frozen=True)
class Inherit(PropertyValue):
    def __str__(self) -> str:
        return "inherit"


@dataclass(frozen=True)
class Exact(PropertyValue):
    value: Any

    def __str__(self) -> str:
        return to_css(self.value)


@dataclass(frozen=True)
class Deferred(PropertyValue):
    raw: str
    location: SourceLocation

    def __str__(self) -> str:
        return self.raw


INITIAL = Initial()
INHERIT = Inherit()


def to_css(value: Any) -> str:
    """Serialize an exact value back into CSS text."""
    if value is None:
        return "none"
    # Subclasses such as `Affine` and `FontWidth` serialize themselves
    if type(value) is tuple:
        return ", ".join(to_css(item) for item in value)
    if type(value) is float:
        return format_number(value)
    return str(value)


class PropertyKind(Enum):
    """Every supported property as `(css name, style field, affects layout)`.

    Shorthands have no style field.
    """

    BackgroundColor = ("background-color", "background_color", False)
    BackgroundImage = ("background-image", "background_image", False)
    BorderBottomColor = ("border-bottom-color", "border_bottom_color", False)
    BorderBottomLeftRadius = ("border-bottom-left-radius", "border_bottom_left_radius", True)
    BorderBottomRightRadius = ("border-bottom-right-radius", "border_bottom_right_radius", True)
    BorderBottomWidth = ("border-bottom-width", "border_bottom_width", True)
    BorderBottom = ("border-bottom", None, True)
    BorderColor = ("border-color", None, False)
    BorderLeftColor = ("border-left-color", "border_left_color", False)
    BorderLeftWidth = ("border-left-width", "border_left_width", True)
    BorderLeft = ("border-left", None, True)
    BorderRadius = ("border-radius", None, True)
    BorderRightColor = ("border-right-color", "border_right_color", False)
    BorderRightWidth = ("border-right-width", "border_right_width", True)
    BorderRight = ("border-right", None, True)
    BorderTopColor = ("border-top-color", "border_top_color", False)
    BorderTopLeftRadius = ("border-top-left-radius", "border_top_left_radius", True)
    BorderTopRightRadius = ("border-top-right-radius", "border_top_right_radius", True)
    BorderTopWidth = ("border-top-width", "border_top_width", True)
    BorderTop = ("border-top", None, True)
    BorderWidth = ("border-width", None, True)
    Border = ("border", None, True)
    Bottom = ("bottom", "bottom", True)
    Left = ("left", "left", True)
    Right = ("right", "right", True)
    Top = ("top", "top", True)
    BoxShadow = ("box-shadow", "box_shadow", False)
    ChildBetween = ("child-between", "child_between", True)
    ChildBottom = ("child-bottom", "child_bottom", True)
    ChildLeft = ("child-left", "child_left", True)
    ChildRight = ("child-right", "child_right", True)
    ChildSpace = ("child-space", None, True)
    ChildTop = ("child-top", "child_top", True)
    Color = ("color", "color", False)
    Display = ("display", "display", True)
    FlexBasis = ("flex-basis", "flex_basis", True)
    FontFamily = ("font-family", "font_family", True)
    FontSize = ("font-size", "font_size", True)
    FontWidth = ("font-width", "font_width", True)
    FontStyle = ("font-style", "font_style", True)
    FontWeight = ("font-weight", "font_weight", True)
    Font = ("font", None, True)
    Height = ("height", "height", True)
    Width = ("width", "width", True)
    LetterSpacing = ("letter-spacing", "letter_spacing", True)
    WordSpacing = ("word-spacing", "word_spacing", True)
    LineHeight = ("line-height", "line_height", True)
    MaxBottom = ("max-bottom", "max_bottom", True)
    MaxChildBetween = ("max-child-between", "max_child_between", True)
    MaxChildBottom = ("max-child-bottom", "max_child_bottom", True)
    MaxChildLeft = ("max-child-left", "max_child_left", True)
    MaxChildRight = ("max-child-right", "max_child_right", True)
    MaxChildTop = ("max-child-top", "max_child_top", True)
    MaxHeight = ("max-height", "max_height", True)
    MaxLeft = ("max-left", "max_left", True)
    MaxRight = ("max-right", "max_right", True)
    MaxTop = ("max-top", "max_top", True)
    MaxWidth = ("max-width", "max_width", True)
    MinBottom = ("min-bottom", "min_bottom", True)
    MinChildBetween = ("min-child-between", "min_child_between", True)
    MinChildBottom = ("min-child-bottom", "min_child_bottom", True)
    MinChildLeft = ("min-child-left", "min_child_left", True)
    MinChildRight = ("min-child-right", "min_child_right", True)
    MinChildTop = ("min-child-top", "min_child_top", True)
    MinHeight = ("min-height", "min_height", True)
    MinLeft = ("min-left", "min_left", True)
    MinRight = ("min-right", "min_right", True)
    MinTop = ("min-top", "min_top", True)
    MinWidth = ("min-width", "min_width", True)
    Opacity = ("opacity", "opacity", False)
    OutlineColor = ("outline-color", "outline_color", False)
    OutlineOffset = ("outline-offset", "outline_offset", False)
    OutlineWidth = ("outline-width", "outline_width", False)
    Outline = ("outline", None, False)
    Position = ("position", "position", True)
    SelectionBackground = ("selection-background", "selection_background", False)
    SelectionColor = ("selection-color", "selection_color", False)
    Space = ("space", None, True)
    TextAlign = ("text-align", "text_align", True)
    TextShadow = ("text-shadow", "text_shadow", False)
    Transform = ("transform", "transform", False)
    ZIndex = ("z-index", "z_index", False)

    def __init__(self, css_name: str, field: str | None, affects_layout: bool) -> None:
        self.css_name = css_name
        self.field = field
        self.affects_layout = affects_layout

    @property
    def shorthand(self) -> bool:
        return self.field is None

    def __str__(self) -> str:
        return self.css_name


@dataclass(frozen=True)
class Property:
    kind: PropertyKind
    value: PropertyValue

    def __post_init__(self):
        if self.kind.shorthand and isinstance(self.value, Exact):
            raise TypeError(f"Shorthand `{self.kind}` cannot carry an exact value")

    @property
    def affects_layout(self) -> bool:
        return self.kind.affects_layout

    def __str__(self) -> str:
        return f"{self.kind}: {self.value}"


NONE_FOR_AUTO = (PropertyKind.LetterSpacing, PropertyKind.WordSpacing)


def apply(prop: Property, style: Style, parent: Style | None = None):
    """Write an initial, inherit or exact value into `style`.

    `currentcolor` resolves against `style.color`, so `color` must already be
    final on `style` before any other color is applied.

    Raises:
        TypeError: For deferred values and shorthands, which must be reparsed first.
    """
    kind, value = prop.kind, prop.value
    if kind.shorthand or isinstance(value, Deferred):
        raise TypeError(f"`{prop}` must be resolved before it can be applied")

    field = kind.field
    if isinstance(value, Initial):
        setattr(style, field, getattr(DEFAULT_STYLE, field))
    elif isinstance(value, Inherit):
        setattr(style, field, getattr(parent if parent is not None else DEFAULT_STYLE, field))
    elif isinstance(value, Exact):
        exact = value.value
        if isinstance(exact, ColorKeyword):
            exact = resolve_color(exact, style.color)
        elif kind in NONE_FOR_AUTO and isinstance(exact, Unit) and exact.kind == "auto":
            exact = None
        setattr(style, field, exact)
