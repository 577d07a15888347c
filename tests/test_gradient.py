"""Tests for linear-gradient parsing and color stop normalization."""

import math

import pytest

from restyle.colors import CURRENT_COLOR, Color, ColorSpace, HueDirection
from restyle.css.declarations import parse_declaration
from restyle.css.errors import InvalidValue, UnsupportedValue
from restyle.css.gradient import StopPiece, normalize_stops
from restyle.css.properties import INITIAL, Property, PropertyKind
from restyle.css.stream import ValueStream
from restyle.style import GradientDirection

RED = Color(1.0, 0.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)


def gradients(text):
    (prop,) = parse_declaration("background-image", ValueStream.from_source(text))
    return prop.value.value


def gradient(text):
    (result,) = gradients(text)
    return result


def positions(stops):
    return [position for position, _ in stops]


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestPositions:
    def test_missing_ends_default(self):
        result = gradient("linear-gradient(red, green 20%, blue)")
        assert positions(result.stops) == [0.0, 0.2, 1.0]
        assert [str(color) for _, color in result.stops] == ["#ff0000", "#008000", "#0000ff"]

    def test_even_distribution(self):
        result = gradient("linear-gradient(red, blue, green, white)")
        assert positions(result.stops) == pytest.approx([0.0, 1 / 3, 2 / 3, 1.0])

    def test_never_rewinds(self):
        result = gradient("linear-gradient(red 50%, blue 20%)")
        assert positions(result.stops) == [0.5, 0.5]

    def test_distribution_after_clamp(self):
        stops = normalize_stops([StopPiece(RED, 0.6), StopPiece(BLUE), StopPiece(RED, 0.2)])
        assert positions(stops) == pytest.approx([0.6, 0.6, 0.6])

    def test_hard_stop(self):
        result = gradient("linear-gradient(red 0% 50%, blue)")
        assert positions(result.stops) == [0.0, 0.5, 1.0]
        assert result.stops[0][1] == result.stops[1][1] == RED


class TestHints:
    def test_hint_is_interpolated(self):
        stops = normalize_stops([StopPiece(RED, 0.0), StopPiece(None, 0.25), StopPiece(BLUE, 1.0)])
        assert stops[1] == (0.25, Color(0.75, 0.0, 0.25))

    def test_hint_in_segment(self):
        stops = normalize_stops([StopPiece(RED), StopPiece(BLUE, 0.5), StopPiece(None, 0.75), StopPiece(RED)])
        position, color = stops[2]
        assert position == 0.75
        assert color == Color(0.5, 0.0, 0.5)

    def test_hint_is_clamped_into_segment(self):
        stops = normalize_stops([StopPiece(RED, 0.2), StopPiece(None, 0.0), StopPiece(BLUE, 1.0)])
        assert stops[1] == (0.2, RED)

    def test_empty_segment(self):
        stops = normalize_stops([StopPiece(RED, 0.5), StopPiece(None, 0.5), StopPiece(BLUE, 0.5)])
        assert stops[1] == (0.5, Color(0.5, 0.0, 0.5))

    def test_currentcolor_is_kept(self):
        result = gradient("linear-gradient(currentcolor, 30%, red)")
        assert result.stops[1] == (0.3, CURRENT_COLOR)

    @pytest.mark.parametrize(
        "pieces",
        [
            [StopPiece(RED)],
            [StopPiece(None, 0.1), StopPiece(RED), StopPiece(BLUE)],
            [StopPiece(RED), StopPiece(BLUE), StopPiece(None, 0.9)],
            [StopPiece(RED), StopPiece(None, 0.3), StopPiece(None, 0.6), StopPiece(BLUE)],
        ],
    )
    def test_rejected(self, pieces):
        with pytest.raises(InvalidValue):
            normalize_stops(pieces)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestLinearGradient:
    def test_default_direction(self):
        assert gradient("linear-gradient(red, blue)").angle is GradientDirection.ToBottom

    def test_corner(self):
        assert gradient("linear-gradient(to top right, red, blue)").angle is GradientDirection.ToTopRight
        assert gradient("linear-gradient(to right top, red, blue)").angle is GradientDirection.ToTopRight

    def test_angle(self):
        assert math.isclose(gradient("linear-gradient(90deg, red, blue)").angle, math.pi / 2)

    def test_interpolation(self):
        result = gradient("linear-gradient(to left in oklch longer hue, red, blue)")
        assert result.angle is GradientDirection.ToLeft
        assert result.color_space is ColorSpace.Oklch
        assert result.hue_direction is HueDirection.Longer

    def test_unsupported_space(self):
        with pytest.raises(UnsupportedValue):
            gradients("linear-gradient(in display-p3, red, blue)")

    def test_unknown_space(self):
        with pytest.raises(InvalidValue):
            gradients("linear-gradient(in bogus, red, blue)")

    def test_missing_comma_after_prelude(self):
        with pytest.raises(InvalidValue):
            gradients("linear-gradient(to top red, blue)")

    def test_single_color(self):
        with pytest.raises(InvalidValue):
            gradients("linear-gradient(red)")


class TestBackgroundImage:
    def test_none(self):
        assert parse_declaration("background-image", ValueStream.from_source("none")) == [
            Property(PropertyKind.BackgroundImage, INITIAL)
        ]

    def test_stack(self):
        assert len(gradients("linear-gradient(red, blue), linear-gradient(white, black)")) == 2

    def test_other_images(self):
        with pytest.raises(InvalidValue):
            gradients("radial-gradient(red, blue)")
        with pytest.raises(InvalidValue):
            gradients("url(a.png)")
