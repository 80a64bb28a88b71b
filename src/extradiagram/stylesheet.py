"""Named styles and style resolution.

A Stylesheet maps style names to dicts of key/value pairs. Cells refer to
named styles from their style string; get_cell_style turns such a string
into the resolved dict the renderer consumes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .style import NONE, coerce_value, parse_style

DEFAULT_VERTEX = "defaultVertex"
DEFAULT_EDGE = "defaultEdge"


class Stylesheet:
    """Registry of named styles with the two built-in defaults."""

    def __init__(self) -> None:
        self.styles: dict[str, dict[str, Any]] = {}
        self.put_default_vertex_style(self.create_default_vertex_style())
        self.put_default_edge_style(self.create_default_edge_style())

    def create_default_vertex_style(self) -> dict[str, Any]:
        return {
            "shape": "rectangle",
            "perimeter": "rectanglePerimeter",
            "verticalAlign": "middle",
            "align": "center",
            "fillColor": "#C3D9FF",
            "strokeColor": "#6482B9",
            "fontColor": "#774400",
        }

    def create_default_edge_style(self) -> dict[str, Any]:
        return {
            "shape": "connector",
            "endArrow": "classic",
            "verticalAlign": "middle",
            "align": "center",
            "strokeColor": "#6482B9",
            "fontColor": "#446299",
        }

    def put_default_vertex_style(self, style: dict[str, Any]) -> None:
        self.put_cell_style(DEFAULT_VERTEX, style)

    def put_default_edge_style(self, style: dict[str, Any]) -> None:
        self.put_cell_style(DEFAULT_EDGE, style)

    def get_default_vertex_style(self) -> dict[str, Any] | None:
        return self.styles.get(DEFAULT_VERTEX)

    def get_default_edge_style(self) -> dict[str, Any] | None:
        return self.styles.get(DEFAULT_EDGE)

    def put_cell_style(self, name: str, style: dict[str, Any]) -> None:
        self.styles[name] = style

    def get_style(self, name: str) -> dict[str, Any] | None:
        return self.styles.get(name)

    def remove_cell_style(self, name: str) -> dict[str, Any] | None:
        return self.styles.pop(name, None)

    def extend_style(
        self,
        name: str,
        base: str | None,
        add: Mapping[str, Any] | None = None,
        remove: Iterable[str] = (),
    ) -> dict[str, Any]:
        """Store a copy of the base style with keys added and removed.

        An unknown or missing base starts from an empty style.
        """
        style = dict(self.styles.get(base) or {}) if base else {}
        for key in remove:
            style.pop(key, None)
        if add:
            style.update(add)
        self.put_cell_style(name, style)
        return style

    def get_cell_style(
        self, name: str | None, default_style: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Resolve a style string against the named styles.

        Args:
            name: Style string of the form [(stylename|key=value);]
            default_style: Style the result starts from, unless name
                begins with ";"

        Returns:
            A new dict; stored styles are never modified.
        """
        if not name:
            return dict(default_style) if default_style is not None else {}

        if default_style is not None and not name.startswith(";"):
            style = dict(default_style)
        else:
            style = {}

        for key, value in parse_style(name):
            if value is None:
                named = self.styles.get(key)
                if named is not None:
                    style.update(named)
            elif value == NONE:
                style.pop(key, None)
            else:
                style[key] = coerce_value(value)
        return style
