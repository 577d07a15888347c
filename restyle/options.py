from __future__ import annotations
from typing import TypedDict

from restyle.css.resolver import VAR_LIMIT

__all__ = ["Options", "DEFAULTS", "default_options"]


class Options(TypedDict, total=False):
    file_name: str | None
    """Name shown in diagnostics, `<no-filename>` when None."""
    var_limit: int
    """Maximum number of `var()` substitution passes before giving up."""


DEFAULTS: Options = {
    "file_name": None,
    "var_limit": VAR_LIMIT,
}


def default_options(origin: Options | dict) -> Options:
    for key, value in DEFAULTS.items():
        origin[key] = origin.get(key, value)
    return origin
