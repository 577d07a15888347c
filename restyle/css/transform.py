"""The `transform` grammar.

Each function becomes a 2D affine matrix and the matrices are composed left to
right, so `translate(10px) scale(2)` translates first and scales second.
"""
from __future__ import annotations
from collections.abc import Callable
import math

from restyle.css.grammar import angle
from restyle.css.parser import FunctionBlock
from restyle.css.stream import ValueStream
from restyle.css.tokens import Dimension, Number, Percentage
from restyle.style import IDENTITY, Affine

__all__ = ["transform", "FUNCTIONS"]


def _offset(stream: ValueStream) -> float:
    component = stream.next()
    if isinstance(component, Number) and component.value == 0:
        return 0.0
    if isinstance(component, Dimension) and component.unit.lower() == "px":
        return float(component.value)
    if isinstance(component, (Dimension, Percentage)):
        raise stream.unsupported(component)
    raise stream.error(component=component)


def translate(stream: ValueStream) -> Affine:
    tx = _offset(stream)
    if stream.is_exhausted():
        return Affine(e=tx)
    stream.optional_comma()
    return Affine(e=tx, f=_offset(stream))


def rotate(stream: ValueStream) -> Affine:
    theta = angle(stream)
    sin, cos = math.sin(theta), math.cos(theta)
    return Affine(cos, sin, -sin, cos)


def scale(stream: ValueStream) -> Affine:
    sx = stream.number()
    if stream.is_exhausted():
        return Affine(sx, 0.0, 0.0, sx)
    stream.optional_comma()
    return Affine(sx, 0.0, 0.0, stream.number())


def skew(stream: ValueStream) -> Affine:
    ax = angle(stream)
    ay = 0.0
    if not stream.is_exhausted():
        stream.optional_comma()
        ay = angle(stream)
    return Affine(1.0, math.tan(ay), math.tan(ax), 1.0)


def matrix(stream: ValueStream) -> Affine:
    values = [stream.number()]
    for _ in range(5):
        stream.optional_comma()
        values.append(stream.number())
    return Affine(*values)


FUNCTIONS: dict[str, Callable[[ValueStream], Affine]] = {
    "translate": translate,
    "rotate": rotate,
    "scale": scale,
    "skew": skew,
    "matrix": matrix,
}


def transform(stream: ValueStream) -> Affine:
    """`none` or a list of transform functions composed into one matrix."""
    if stream.is_keyword_exhausted("none"):
        return IDENTITY

    result = IDENTITY
    while not stream.is_exhausted():
        function = stream.next()
        if not isinstance(function, FunctionBlock):
            raise stream.error(component=function)
        if (reader := FUNCTIONS.get(function.name.lower())) is None:
            raise stream.unsupported(function)

        arguments = stream.nested(function)
        step = reader(arguments)
        arguments.expect_exhausted()
        result = result.then(step)
    return result
