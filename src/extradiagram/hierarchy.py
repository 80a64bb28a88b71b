"""Encoding and decoding of cell hierarchies.

A cell tree is written as a flat pre-order sequence of cell elements; each
element names its parent and terminals by id. Decoding first creates every
cell, then re-applies parent and terminal links as insertions, so links
may point at cells that appear later in the document.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from xml.etree.ElementTree import Element, ElementTree

from loguru import logger

from .cell_path import sort_cells
from .codec import XmlCodec
from .config import CodecSettings
from .exceptions import SelfReferenceError
from .model import Cell, GraphModel
from .object_codec import ObjectCodec
from .registry import CodecRegistry
from .xml_utils import element_children, is_element


class HierarchyCodec(XmlCodec):
    """XmlCodec with support for cell trees.

    Args:
        model: Optional model whose cells resolve ids before the document
            is consulted, e.g. when pasting cells that refer to existing
            parents
    """

    def __init__(
        self,
        document: Element | ElementTree | None = None,
        registry: CodecRegistry | None = None,
        *,
        model: GraphModel | None = None,
        encode_defaults: bool | None = None,
        settings: CodecSettings | None = None,
    ) -> None:
        super().__init__(
            document, registry, encode_defaults=encode_defaults, settings=settings
        )
        self.model = model

    def lookup(self, id: str) -> Any:
        if self.model is not None:
            return self.model.get_cell(id)
        return None

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def encode_cell(self, cell: Cell, node: Element, include_children: bool = True) -> None:
        """Append cell (and, by default, its descendants in pre-order) to node."""
        child = self.encode(cell)
        if child is not None:
            node.append(child)
        if include_children:
            for i in range(cell.get_child_count()):
                self.encode_cell(cell.get_child_at(i), node)

    def encode_cells(self, cells: Iterable[Cell], node: Element | None = None) -> Element:
        """Encode a selection of cells with their descendants.

        Cells are written in tree order. Cells whose ancestor is also
        selected are written once, as part of that ancestor.
        """
        if node is None:
            node = Element("root")
        ordered = sort_cells(cells)
        selected = {id(cell) for cell in ordered}
        for cell in ordered:
            if not _has_ancestor_in(cell, selected):
                self.encode_cell(cell, node)
        return node

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def decode(self, node: Element | None, into: Any = None) -> Any:
        """Decode an element; a user object wrapping one cell decodes to the cell."""
        if (
            into is None
            and node is not None
            and is_element(node)
            and self.registry.get_codec(node.tag) is None
            and self.wrapped_cell_node(node) is not None
        ):
            self.update_elements()
            return self.decode_cell(node, restore_structures=False)
        return super().decode(node, into)

    def is_cell_codec(self, codec: ObjectCodec | None) -> bool:
        is_cell = getattr(codec, "is_cell_codec", None)
        return bool(is_cell()) if callable(is_cell) else False

    def wrapped_cell_node(self, node: Element) -> Element | None:
        """Return the cell element of a user object, which wraps exactly one."""
        cells = [
            child
            for child in element_children(node)
            if self.is_cell_codec(self.registry.get_codec(child.tag))
        ]
        return cells[0] if len(cells) == 1 else None

    def decode_cell(self, node: Element | None, restore_structures: bool = True) -> Cell | None:
        """Decode a cell element, or a user object element wrapping one.

        Args:
            node: The element to decode
            restore_structures: Insert the cell into its parent and
                terminals after decoding
        """
        cell = None
        if node is not None and is_element(node):
            decoder = self.registry.get_codec(node.tag)
            if not self.is_cell_codec(decoder):
                inner = self.wrapped_cell_node(node)
                if inner is not None:
                    decoder = self.registry.get_codec(inner.tag)
            if not self.is_cell_codec(decoder):
                decoder = self.registry.get_codec(Cell)

            if decoder is None:
                logger.warning(f"HierarchyCodec.decode_cell: No cell codec for {node.tag}")
                return None
            cell = decoder.decode(self, node)
            if restore_structures and cell is not None:
                self.insert_into_graph(cell)
        return cell

    def decode_cells(self, nodes: Iterable[Element]) -> list[Cell]:
        """Decode a flat sequence of cell elements and rebuild their structure.

        Decoding runs in three passes: every node is decoded with reference
        fields kept as ids, the ids are resolved against the decoded cells,
        and each cell is inserted into its parent and terminals in
        document order.
        """
        with self.deferring_references():
            decoded = [self.decode_cell(node, restore_structures=False) for node in nodes]
        cells = [cell for cell in decoded if cell is not None]
        for cell in cells:
            self.insert_into_graph(cell)
        return cells

    def insert_into_graph(self, cell: Cell) -> None:
        """Turn the decoded parent and terminal references into insertions.

        Raises:
            SelfReferenceError: If the cell is its own parent or ancestor
        """
        parent = cell.parent
        source = cell.get_terminal(True)
        target = cell.get_terminal(False)

        cell.set_terminal(None, False)
        cell.set_terminal(None, True)
        cell.parent = None

        if parent is not None:
            if _is_ancestor(cell, parent):
                raise SelfReferenceError(cell.id)
            parent.insert(cell)

        if source is not None:
            source.insert_edge(cell, True)
        if target is not None:
            target.insert_edge(cell, False)


def _has_ancestor_in(cell: Cell, selected: set[int]) -> bool:
    parent = cell.get_parent()
    while parent is not None:
        if id(parent) in selected:
            return True
        parent = parent.get_parent()
    return False


def _is_ancestor(cell: Cell, parent: Cell | None) -> bool:
    """True if cell is parent or one of its ancestors."""
    seen: set[int] = set()
    while parent is not None and id(parent) not in seen:
        if parent is cell:
            return True
        seen.add(id(parent))
        parent = parent.get_parent()
    return False
