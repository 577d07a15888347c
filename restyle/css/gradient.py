"""`linear-gradient()` parsing and color stop normalization.

References:
    - [linear-gradient](https://www.w3.org/TR/css-images-3/#linear-gradients)
    - [color stop fixup](https://www.w3.org/TR/css-images-4/#color-stop-fixup)
"""
from __future__ import annotations
from dataclasses import dataclass

from restyle.colors import CURRENT_COLOR, ColorProperty, ColorSpace, HueDirection, interpolate
from restyle.css.errors import InvalidValue
from restyle.css.grammar import angle, color
from restyle.css.properties import INITIAL
from restyle.css.stream import ValueStream
from restyle.css.tokens import Ident, Percentage
from restyle.style import GradientAngle, GradientDirection, LinearGradient

__all__ = ["StopPiece", "normalize_stops", "linear_gradient", "background_image"]

SIDES = {
    frozenset({"top"}): GradientDirection.ToTop,
    frozenset({"right"}): GradientDirection.ToRight,
    frozenset({"bottom"}): GradientDirection.ToBottom,
    frozenset({"left"}): GradientDirection.ToLeft,
    frozenset({"top", "left"}): GradientDirection.ToTopLeft,
    frozenset({"top", "right"}): GradientDirection.ToTopRight,
    frozenset({"bottom", "left"}): GradientDirection.ToBottomLeft,
    frozenset({"bottom", "right"}): GradientDirection.ToBottomRight,
}

COLOR_SPACES = {
    "srgb": ColorSpace.Srgb,
    "srgb-linear": ColorSpace.SrgbLinear,
    "linear-srgb": ColorSpace.SrgbLinear,
    "hsl": ColorSpace.Hsl,
    "hwb": ColorSpace.Hwb,
    "oklab": ColorSpace.Oklab,
    "oklch": ColorSpace.Oklch,
    "xyz": ColorSpace.XyzD65,
    "xyz-d65": ColorSpace.XyzD65,
}
UNSUPPORTED_SPACES = (
    "display-p3",
    "a98-rgb",
    "prophoto-rgb",
    "rec2020",
    "lab",
    "lch",
    "xyz-d50",
    "acescg",
    "aces-cg",
    "aces2065-1",
)

EPSILON = 1.1920929e-07


@dataclass(frozen=True)
class StopPiece:
    """One entry of a stop list.

    A piece without a color is an interpolation hint, a piece without a
    position is a color stop that still needs placing.
    """

    color: ColorProperty | None = None
    position: float | None = None

    @property
    def hint(self) -> bool:
        return self.color is None


def _hint_color(
    before: ColorProperty,
    start: float,
    after: ColorProperty,
    end: float,
    position: float,
    space: ColorSpace,
    direction: HueDirection,
) -> ColorProperty:
    if before is CURRENT_COLOR or after is CURRENT_COLOR:
        return CURRENT_COLOR

    span = end - start
    t = min(max((position - start) / span, 0.0), 1.0) if abs(span) > EPSILON else 0.5
    return interpolate(before, after, t, space, direction)


def normalize_stops(
    pieces: list[StopPiece],
    space: ColorSpace = ColorSpace.Srgb,
    direction: HueDirection = HueDirection.Shorter,
) -> list[tuple[float, ColorProperty]]:
    """Give every piece a position and every hint a color.

    Missing positions are spread evenly between their known neighbours, each
    known position is clamped so the list never runs backwards, and hints
    become stops colored at their point between the surrounding colors.

    Raises:
        InvalidValue: With fewer than two color stops, a hint before the first or
            after the last color stop, or two hints in a row.
    """
    colors = [i for i, piece in enumerate(pieces) if not piece.hint]
    if len(colors) < 2:
        raise InvalidValue("A gradient needs at least two color stops")
    first, last = colors[0], colors[-1]
    if first != 0:
        raise InvalidValue("A gradient cannot start with a color hint")
    if last != len(pieces) - 1:
        raise InvalidValue("A color hint must be followed by a color stop")

    pieces = list(pieces)
    if pieces[first].position is None:
        pieces[first] = StopPiece(pieces[first].color, 0.0)
    if pieces[last].position is None:
        pieces[last] = StopPiece(pieces[last].color, 1.0)

    last_color, last_position = pieces[first].color, pieces[first].position
    i = first + 1
    while i <= last:
        # Find the next color stop with a known position
        end = i
        missing = 0
        while pieces[end].hint or pieces[end].position is None:
            if not pieces[end].hint:
                missing += 1
            end += 1

        end_color = pieces[end].color
        end_position = max(pieces[end].position, last_position)
        pieces[end] = StopPiece(end_color, end_position)
        step = (end_position - last_position) / (missing + 1)

        placed = 0
        previous_color, previous_position = last_color, last_position
        pending: tuple[int, float] | None = None
        for j in range(i, end + 1):
            piece = pieces[j]
            if piece.hint:
                if pending is not None:
                    raise InvalidValue("Two color hints in a row")
                pending = (j, piece.position)
                continue

            if j == end:
                position = end_position
            else:
                placed += 1
                position = last_position + step * placed
                pieces[j] = StopPiece(piece.color, position)

            if pending is not None:
                index, raw = pending
                clamped = min(max(raw, previous_position), position)
                pieces[index] = StopPiece(
                    _hint_color(previous_color, previous_position, piece.color, position, clamped, space, direction),
                    clamped,
                )
                pending = None
            previous_color, previous_position = piece.color, position

        last_color, last_position = end_color, end_position
        i = end + 1

    return [(piece.position, piece.color) for piece in pieces]


def _direction(stream: ValueStream) -> GradientAngle:
    """An `<angle>` or `to <side-or-corner>`."""
    parsed = stream.attempt(angle)
    if parsed is not None:
        return parsed

    stream.keyword("to")
    sides: set[str] = set()
    for _ in range(2):
        component = stream.peek()
        if not isinstance(component, Ident) or component.raw.lower() not in ("left", "right", "top", "bottom"):
            break
        side = stream.next().raw.lower()
        if side in sides:
            raise stream.error(component=component)
        sides.add(side)

    if (direction := SIDES.get(frozenset(sides))) is None:
        raise stream.error("Expected a side or corner")
    return direction


def _hue_direction(stream: ValueStream) -> HueDirection:
    direction = stream.keyword(*(direction.value for direction in HueDirection))
    stream.keyword("hue")
    return HueDirection(direction)


def _interpolation(stream: ValueStream) -> tuple[ColorSpace, HueDirection]:
    """`<color-space> [<hue-direction> hue]?`, after `in` was read."""
    ident = stream.ident()
    name = ident.raw.lower()
    if name in UNSUPPORTED_SPACES:
        raise stream.unsupported(ident)
    if (space := COLOR_SPACES.get(name)) is None:
        raise stream.error(component=ident)

    direction = stream.attempt(_hue_direction)
    return space, direction or HueDirection.Shorter


def _stop_pieces(stream: ValueStream) -> list[StopPiece]:
    pieces = []
    while True:
        if isinstance(stream.peek(), Percentage):
            pieces.append(StopPiece(None, stream.percentage()))
        else:
            stop_color = color(stream)
            positions = []
            while len(positions) < 2 and isinstance(stream.peek(), Percentage):
                positions.append(stream.percentage())

            if not positions:
                pieces.append(StopPiece(stop_color))
            pieces.extend(StopPiece(stop_color, position) for position in positions)

        if not stream.try_comma():
            return pieces


def linear_gradient(stream: ValueStream) -> LinearGradient:
    """The inside of a `linear-gradient()` call."""
    gradient_angle: GradientAngle = GradientDirection.ToBottom
    space = ColorSpace.Srgb
    hue = HueDirection.Shorter
    prelude = False

    if (parsed := stream.attempt(_direction)) is not None:
        gradient_angle = parsed
        prelude = True
    if stream.try_keyword("in") is not None:
        space, hue = _interpolation(stream)
        prelude = True
    if prelude:
        stream.expect_comma()

    pieces = _stop_pieces(stream)
    stream.expect_exhausted()
    try:
        stops = normalize_stops(pieces, space, hue)
    except InvalidValue as error:
        raise InvalidValue(error.message, stream.location()) from error
    return LinearGradient(gradient_angle, tuple(stops), space, hue)


def background_image(stream: ValueStream):
    """`none` or a comma separated list of `linear-gradient()` calls."""
    if stream.is_keyword_exhausted("none"):
        return INITIAL

    gradients = []
    for part in stream.split_commas():
        function = part.function()
        if not function.matches("linear-gradient"):
            raise part.error(component=function)
        gradients.append(linear_gradient(part.nested(function)))
        part.expect_exhausted()
    return tuple(gradients)
