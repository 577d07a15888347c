"""Color primitives.

Parsing is delegated to `tinycss2.color3`, interpolation converts through the
standard library `colorsys` for the cylindrical spaces and small matrices for
the linear/oklab/xyz spaces.

References:
    - [interpolation](https://www.w3.org/TR/css-color-4/#interpolation)
    - [oklab](https://bottosson.github.io/posts/oklab/)
"""
from __future__ import annotations
import colorsys
from dataclasses import dataclass
from enum import Enum
import math

from tinycss2 import color3
from typing_extensions import TypeAliasType

__all__ = [
    "Color",
    "ColorKeyword",
    "CURRENT_COLOR",
    "ColorProperty",
    "ColorSpace",
    "HueDirection",
    "parse_color",
    "resolve_color",
    "interpolate",
    "format_number",
]


@dataclass(frozen=True)
class Color:
    """A straight alpha sRGB color with every channel in `0..1`."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @staticmethod
    def rgba8(red: int, green: int, blue: int, alpha: int = 255) -> Color:
        return Color(red / 255, green / 255, blue / 255, alpha / 255)

    def to_rgba8(self) -> tuple[int, int, int, int]:
        return tuple(round(channel * 255) for channel in self)  # type: ignore[return-value]

    def __iter__(self):
        return iter((self.red, self.green, self.blue, self.alpha))

    def _is_8bit(self) -> bool:
        return all(math.isclose(channel * 255, round(channel * 255), abs_tol=1e-6) for channel in self)

    def __str__(self) -> str:
        if self._is_8bit():
            red, green, blue, alpha = self.to_rgba8()
            if alpha == 255:
                return f"#{red:02x}{green:02x}{blue:02x}"
            return f"#{red:02x}{green:02x}{blue:02x}{alpha:02x}"
        return "rgba({}%, {}%, {}%, {})".format(
            format_number(self.red * 100), format_number(self.green * 100), format_number(self.blue * 100), format_number(self.alpha)
        )


class ColorKeyword(Enum):
    CurrentColor = "currentcolor"

    def __str__(self) -> str:
        return self.value


CURRENT_COLOR = ColorKeyword.CurrentColor

ColorProperty = TypeAliasType("ColorProperty", Color | ColorKeyword)


class ColorSpace(Enum):
    Srgb = "srgb"
    SrgbLinear = "srgb-linear"
    Hsl = "hsl"
    Hwb = "hwb"
    Oklab = "oklab"
    Oklch = "oklch"
    XyzD65 = "xyz-d65"

    @property
    def polar(self) -> bool:
        return self in (ColorSpace.Hsl, ColorSpace.Hwb, ColorSpace.Oklch)

    def __str__(self) -> str:
        return self.value


class HueDirection(Enum):
    Shorter = "shorter"
    Longer = "longer"
    Increasing = "increasing"
    Decreasing = "decreasing"

    def __str__(self) -> str:
        return self.value


def format_number(value: float) -> str:
    value = round(value, 6)
    if value == int(value):
        return str(int(value))
    return repr(value)


def parse_color(text: str) -> ColorProperty | None:
    """Parse a CSS Level 3 color, `currentcolor` included. None when it isn't a color."""
    parsed = color3.parse_color(text)
    if parsed is None:
        return None
    if isinstance(parsed, str):
        return CURRENT_COLOR
    return Color(*parsed)


def resolve_color(value: ColorProperty, current: Color) -> Color:
    if value is CURRENT_COLOR:
        return current
    return value


# ---- conversions ----

def _to_linear(channel: float) -> float:
    magnitude = abs(channel)
    if magnitude <= 0.04045:
        return channel / 12.92
    return math.copysign(((magnitude + 0.055) / 1.055) ** 2.4, channel)


def _from_linear(channel: float) -> float:
    magnitude = abs(channel)
    if magnitude <= 0.0031308:
        return channel * 12.92
    return math.copysign(1.055 * magnitude ** (1 / 2.4) - 0.055, channel)


def _mul(matrix: tuple[tuple[float, float, float], ...], vector: tuple[float, float, float]) -> tuple[float, float, float]:
    return tuple(sum(m * v for m, v in zip(row, vector)) for row in matrix)  # type: ignore[return-value]


LINEAR_TO_XYZ = (
    (0.41239079926595934, 0.357584339383878, 0.1804807884018343),
    (0.21263900587151027, 0.715168678767756, 0.07219231536073371),
    (0.01933081871559182, 0.11919477979462598, 0.9505321522496607),
)
XYZ_TO_LINEAR = (
    (3.2409699419045226, -1.537383177570094, -0.4986107602930034),
    (-0.9692436362808796, 1.8759675015077202, 0.04155505740717559),
    (0.05563007969699366, -0.20397695888897652, 1.0569715142428786),
)
LINEAR_TO_LMS = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)
LMS_TO_OKLAB = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)
OKLAB_TO_LMS = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)
LMS_TO_LINEAR = (
    (4.0767416621, -3.3077115913, 0.2309699292),
    (-1.2684380046, 2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, 1.7076147010),
)


def _to_space(color: Color, space: ColorSpace) -> tuple[float, float, float]:
    rgb = (color.red, color.green, color.blue)
    if space is ColorSpace.Srgb:
        return rgb
    if space is ColorSpace.Hsl:
        hue, lightness, saturation = colorsys.rgb_to_hls(*rgb)
        return hue * 360, saturation, lightness
    if space is ColorSpace.Hwb:
        hue, saturation, value = colorsys.rgb_to_hsv(*rgb)
        return hue * 360, (1 - saturation) * value, 1 - value

    linear = tuple(_to_linear(channel) for channel in rgb)
    if space is ColorSpace.SrgbLinear:
        return linear
    if space is ColorSpace.XyzD65:
        return _mul(LINEAR_TO_XYZ, linear)

    lms = tuple(math.copysign(abs(c) ** (1 / 3), c) for c in _mul(LINEAR_TO_LMS, linear))
    lab = _mul(LMS_TO_OKLAB, lms)
    if space is ColorSpace.Oklab:
        return lab
    lightness, a, b = lab
    return lightness, math.hypot(a, b), math.degrees(math.atan2(b, a)) % 360


def _from_space(coords: tuple[float, float, float], space: ColorSpace) -> tuple[float, float, float]:
    if space is ColorSpace.Srgb:
        return coords
    if space is ColorSpace.Hsl:
        hue, saturation, lightness = coords
        return colorsys.hls_to_rgb((hue % 360) / 360, lightness, saturation)
    if space is ColorSpace.Hwb:
        hue, whiteness, blackness = coords
        if whiteness + blackness >= 1:
            gray = whiteness / (whiteness + blackness)
            return gray, gray, gray
        value = 1 - blackness
        saturation = 1 - whiteness / value if value > 0 else 0.0
        return colorsys.hsv_to_rgb((hue % 360) / 360, saturation, value)

    if space is ColorSpace.SrgbLinear:
        linear = coords
    elif space is ColorSpace.XyzD65:
        linear = _mul(XYZ_TO_LINEAR, coords)
    else:
        if space is ColorSpace.Oklch:
            lightness, chroma, hue = coords
            coords = (lightness, chroma * math.cos(math.radians(hue)), chroma * math.sin(math.radians(hue)))
        lms = tuple(c ** 3 for c in _mul(OKLAB_TO_LMS, coords))
        linear = _mul(LMS_TO_LINEAR, lms)
    return tuple(_from_linear(channel) for channel in linear)  # type: ignore[return-value]


def _hue_index(space: ColorSpace) -> int:
    return 2 if space is ColorSpace.Oklch else 0


def _adjust_hues(first: float, second: float, direction: HueDirection) -> tuple[float, float]:
    first %= 360
    second %= 360
    delta = second - first
    if direction is HueDirection.Shorter:
        if delta > 180:
            first += 360
        elif delta < -180:
            second += 360
    elif direction is HueDirection.Longer:
        if 0 < delta < 180:
            first += 360
        elif -180 < delta <= 0:
            second += 360
    elif direction is HueDirection.Increasing:
        if second < first:
            second += 360
    elif first < second:
        first += 360
    return first, second


def interpolate(
    first: Color,
    second: Color,
    t: float,
    space: ColorSpace = ColorSpace.Srgb,
    direction: HueDirection = HueDirection.Shorter,
) -> Color:
    """Mix two colors at fraction `t` in `space` using premultiplied alpha."""
    a = list(_to_space(first, space))
    b = list(_to_space(second, space))

    if space.polar:
        index = _hue_index(space)
        a[index], b[index] = _adjust_hues(a[index], b[index], direction)

    alpha = first.alpha + (second.alpha - first.alpha) * t
    mixed = []
    for i, (x, y) in enumerate(zip(a, b)):
        if space.polar and i == _hue_index(space):
            mixed.append(x + (y - x) * t)
            continue
        value = x * first.alpha + (y * second.alpha - x * first.alpha) * t
        mixed.append(value / alpha if alpha > 0 else value)

    red, green, blue = _from_space(tuple(mixed), space)  # type: ignore[arg-type]
    return Color(
        min(max(red, 0.0), 1.0),
        min(max(green, 0.0), 1.0),
        min(max(blue, 0.0), 1.0),
        min(max(alpha, 0.0), 1.0),
    )
