"""Styling surfaces that receive resolved style variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Protocol

from jinja2 import Environment, StrictUndefined

logger = logging.getLogger(__name__)

STYLESHEET_TEMPLATE = """\
/* Generated by the FreeKi theme applier ({{ mode }} scheme). Do not edit. */
:root {
{%- for name, value in variables.items() %}
  {{ name }}: {{ value }};
{%- endfor %}
}
"""


class StyleSurface(Protocol):
    """Destination of style-variable writes (document root, stylesheet...)."""

    def apply(self, variables: Mapping[str, str], mode: str) -> None: ...


class InMemoryStyleSurface:
    """Keeps the current variables and a history of every apply."""

    def __init__(self) -> None:
        self.variables: Dict[str, str] = {}
        self.mode: str | None = None
        self.history: List[Dict[str, str]] = []

    @property
    def apply_count(self) -> int:
        return len(self.history)

    def apply(self, variables: Mapping[str, str], mode: str) -> None:
        self.variables.update(variables)
        self.mode = mode
        self.history.append(dict(variables))


class StylesheetFileSurface:
    """Renders the variables into a ``:root`` stylesheet on disk."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._template = Environment(undefined=StrictUndefined, autoescape=False).from_string(
            STYLESHEET_TEMPLATE
        )

    def render(self, variables: Mapping[str, str], mode: str) -> str:
        return self._template.render(variables=dict(variables), mode=mode)

    def apply(self, variables: Mapping[str, str], mode: str) -> None:
        css = self.render(variables, mode)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(css, encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug(f"Wrote {len(variables)} style variables to {self.path}")
