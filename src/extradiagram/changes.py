"""Undoable edits of a single cell property.

A change is created with the new value for one field of a cell; previous
holds the value the next execute() applies. Executing swaps the applied
value with the cell's current one, so executing twice restores the cell.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from .model import Cell, Geometry, GraphModel


class CellChange:
    """Base for changes that swap one field of a cell."""

    field_name: ClassVar[str]

    cell: Cell | None
    previous: Any

    def __post_init__(self) -> None:
        self.previous = getattr(self, self.field_name)

    def execute(self) -> None:
        if self.cell is None:
            return
        applied = self.previous
        setattr(self, self.field_name, applied)
        self.previous = getattr(self.cell, self.field_name)
        setattr(self.cell, self.field_name, applied)


@dataclass(eq=False)
class ValueChange(CellChange):
    field_name: ClassVar[str] = "value"

    model: GraphModel | None = None
    cell: Cell | None = None
    value: Any = None
    previous: Any = field(default=None, init=False)


@dataclass(eq=False)
class StyleChange(CellChange):
    field_name: ClassVar[str] = "style"

    model: GraphModel | None = None
    cell: Cell | None = None
    style: str | None = None
    previous: str | None = field(default=None, init=False)


@dataclass(eq=False)
class GeometryChange(CellChange):
    field_name: ClassVar[str] = "geometry"

    model: GraphModel | None = None
    cell: Cell | None = None
    geometry: Geometry | None = None
    previous: Geometry | None = field(default=None, init=False)


@dataclass(eq=False)
class CollapseChange(CellChange):
    field_name: ClassVar[str] = "collapsed"

    model: GraphModel | None = None
    cell: Cell | None = None
    collapsed: bool = False
    previous: bool = field(default=False, init=False)


@dataclass(eq=False)
class VisibleChange(CellChange):
    field_name: ClassVar[str] = "visible"

    model: GraphModel | None = None
    cell: Cell | None = None
    visible: bool = True
    previous: bool = field(default=True, init=False)
