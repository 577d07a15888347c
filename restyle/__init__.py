from __future__ import annotations
from logging import NullHandler, getLogger

from restyle.colors import Color, ColorKeyword, CURRENT_COLOR
from restyle.css import Stylesheet, VariableContext, compute_style
from restyle.loader import WatchedStylesheet, load_stylesheet
from restyle.options import DEFAULTS, Options, default_options
from restyle.style import DEFAULT_STYLE, Style

__version__ = "0.1.0"

getLogger(__name__).addHandler(NullHandler())

__all__ = [
    "Color",
    "ColorKeyword",
    "CURRENT_COLOR",
    "Stylesheet",
    "VariableContext",
    "compute_style",
    "WatchedStylesheet",
    "load_stylesheet",
    "DEFAULTS",
    "Options",
    "default_options",
    "DEFAULT_STYLE",
    "Style",
]
