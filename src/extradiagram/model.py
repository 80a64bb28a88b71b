"""Cell and graph model types handled by the codec.

Cells form a tree through parent/children links. Edge-like cells also
reference a source and a target terminal, and every terminal keeps the
list of edges connected to it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any
from xml.etree.ElementTree import Element

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass
class Point:
    """A 2D point."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Geometry:
    """Bounds of a vertex or the control points of an edge."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    relative: bool = False
    points: list[Point] | None = None
    source_point: Point | None = None
    target_point: Point | None = None
    offset: Point | None = None


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Cell:
    """A vertex, edge or group in the diagram.

    Equality is identity. Structural links are excluded from repr to keep
    it finite on cyclic graphs.
    """

    value: Any = None
    geometry: Geometry | None = None
    style: str | None = None
    id: str | None = None
    vertex: bool = False
    edge: bool = False
    connectable: bool = True
    visible: bool = True
    collapsed: bool = False
    parent: Cell | None = field(default=None, repr=False)
    source: Cell | None = field(default=None, repr=False)
    target: Cell | None = field(default=None, repr=False)
    children: list[Cell] = field(default_factory=list, repr=False)
    edges: list[Cell] = field(default_factory=list, repr=False)

    def get_id(self) -> str | None:
        return self.id

    def get_parent(self) -> Cell | None:
        return self.parent

    def get_terminal(self, is_source: bool) -> Cell | None:
        return self.source if is_source else self.target

    def set_terminal(self, terminal: Cell | None, is_source: bool) -> Cell | None:
        if is_source:
            self.source = terminal
        else:
            self.target = terminal
        return terminal

    # -- children -----------------------------------------------------------

    def get_child_count(self) -> int:
        return len(self.children)

    def get_child_at(self, index: int) -> Cell:
        return self.children[index]

    def get_index(self, child: Cell) -> int:
        """Return the index of child, or -1 if it is not a child."""
        for i, c in enumerate(self.children):
            if c is child:
                return i
        return -1

    def insert(self, child: Cell, index: int | None = None) -> Cell:
        """Insert child at index (default: append), detaching it first.

        Re-inserting a child into its current parent moves it.
        """
        if index is None:
            index = len(self.children)
            if child.parent is self:
                index -= 1
        child.remove_from_parent()
        child.parent = self
        self.children.insert(index, child)
        return child

    def remove(self, index: int) -> Cell:
        child = self.children.pop(index)
        child.parent = None
        return child

    def remove_from_parent(self) -> None:
        if self.parent is not None:
            index = self.parent.get_index(self)
            if index >= 0:
                self.parent.remove(index)
            self.parent = None

    # -- edges --------------------------------------------------------------

    def get_edge_count(self) -> int:
        return len(self.edges)

    def get_edge_at(self, index: int) -> Cell:
        return self.edges[index]

    def get_edge_index(self, edge: Cell) -> int:
        for i, e in enumerate(self.edges):
            if e is edge:
                return i
        return -1

    def insert_edge(self, edge: Cell, is_outgoing: bool) -> Cell:
        """Connect edge to this cell as its source (outgoing) or target."""
        edge.remove_from_terminal(is_outgoing)
        edge.set_terminal(self, is_outgoing)
        # Loops are listed once
        if self.get_edge_index(edge) < 0 or edge.get_terminal(not is_outgoing) is not self:
            self.edges.append(edge)
        return edge

    def remove_edge(self, edge: Cell, is_outgoing: bool) -> Cell:
        if edge.get_terminal(not is_outgoing) is not self:
            index = self.get_edge_index(edge)
            if index >= 0:
                self.edges.pop(index)
        edge.set_terminal(None, is_outgoing)
        return edge

    def remove_from_terminal(self, is_source: bool) -> None:
        terminal = self.get_terminal(is_source)
        if terminal is not None:
            terminal.remove_edge(self, is_source)

    # -- user object attributes ---------------------------------------------

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        """Read an attribute of an XML user object value."""
        if isinstance(self.value, Element):
            return self.value.get(name, default)
        return default

    def set_attribute(self, name: str, value: str) -> None:
        if isinstance(self.value, Element):
            self.value.set(name, value)

    def clone(self) -> Cell:
        """Copy value, style and flags, without parent, terminals or children."""
        value = copy.deepcopy(self.value) if isinstance(self.value, Element) else self.value
        return Cell(
            value=value,
            geometry=copy.deepcopy(self.geometry),
            style=self.style,
            vertex=self.vertex,
            edge=self.edge,
            connectable=self.connectable,
            visible=self.visible,
            collapsed=self.collapsed,
        )


# ---------------------------------------------------------------------------
# Graph model
# ---------------------------------------------------------------------------


class GraphModel:
    """Owns the root cell of a diagram and indexes its cells by id."""

    def __init__(self, root: Cell | None = None, prefix: str = "", postfix: str = "") -> None:
        self.prefix = prefix
        self.postfix = postfix
        self.next_id = 0
        self.cells: dict[str, Cell] = {}
        self.root: Cell | None = None
        if root is None:
            root = Cell()
            root.insert(Cell())
        self.set_root(root)

    def get_root(self) -> Cell | None:
        return self.root

    def set_root(self, root: Cell | None) -> Cell | None:
        """Replace the root and re-index every cell of the new tree."""
        self.root = root
        self.cells = {}
        self.next_id = 0
        if root is not None:
            self._cell_added(root)
        return root

    def get_default_parent(self) -> Cell | None:
        if self.root is None or self.root.get_child_count() == 0:
            return self.root
        return self.root.get_child_at(0)

    def get_cell(self, id: str) -> Cell | None:
        return self.cells.get(id)

    def contains(self, cell: Cell) -> bool:
        return cell.id is not None and self.cells.get(cell.id) is cell

    def create_id(self) -> str:
        id = f"{self.prefix}{self.next_id}{self.postfix}"
        self.next_id += 1
        return id

    def add(self, parent: Cell, child: Cell, index: int | None = None) -> Cell:
        """Insert child under parent and register its subtree."""
        parent.insert(child, index)
        self._cell_added(child)
        return child

    def remove(self, cell: Cell) -> Cell:
        """Detach cell from its parent and unregister its subtree."""
        if cell is self.root:
            self.set_root(None)
        else:
            cell.remove_from_parent()
            self._cell_removed(cell)
        return cell

    def _cell_added(self, cell: Cell) -> None:
        if cell.id is None:
            cell.id = self.create_id()
            while cell.id in self.cells:
                cell.id = self.create_id()
        elif cell.id in self.cells and self.cells[cell.id] is not cell:
            while cell.id in self.cells:
                cell.id = self.create_id()
        # Keep generated ids ahead of numeric ids seen in the tree
        if cell.id.isdigit():
            self.next_id = max(self.next_id, int(cell.id) + 1)
        self.cells[cell.id] = cell
        for child in cell.children:
            self._cell_added(child)

    def _cell_removed(self, cell: Cell) -> None:
        for child in cell.children:
            self._cell_removed(child)
        if cell.id is not None and self.cells.get(cell.id) is cell:
            del self.cells[cell.id]
