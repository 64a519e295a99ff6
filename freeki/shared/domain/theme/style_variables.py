"""Mapping from ColorScheme attributes to named style variables.

One variable per attribute, written as ``--freeki-<kebab-name>``. Sizes are
emitted in pixels, colors as given.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from .palette import DEFAULT_LIGHT_SCHEME

VARIABLE_PREFIX = "--freeki-"

SIZE_ATTRIBUTES = frozenset(name for name in DEFAULT_LIGHT_SCHEME if name.endswith("FontSize"))
SCHEME_ATTRIBUTES = tuple(DEFAULT_LIGHT_SCHEME)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def variable_name(attribute: str) -> str:
    """``appBarBackground`` -> ``--freeki-app-bar-background``"""
    return VARIABLE_PREFIX + _CAMEL_BOUNDARY.sub("-", attribute).lower()


def format_value(attribute: str, value: Any) -> str:
    if attribute in SIZE_ATTRIBUTES:
        return f"{float(value):g}px"
    return str(value)


def build_style_variables(scheme: Mapping[str, Any]) -> Dict[str, str]:
    """Resolve every attribute of one scheme into a style variable.

    Missing attributes fall back to the light defaults so the surface never
    holds a stale value from the other mode.
    """
    variables: Dict[str, str] = {}
    for attribute in SCHEME_ATTRIBUTES:
        value = scheme.get(attribute)
        if value is None or value == "":
            value = DEFAULT_LIGHT_SCHEME[attribute]
        variables[variable_name(attribute)] = format_value(attribute, value)
    return variables
