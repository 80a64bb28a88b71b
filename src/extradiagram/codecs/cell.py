"""Codec for cells (mxCell).

Children and connected edges are not written: the hierarchy is encoded
as a flat sequence with parent, source and target ids. A cell whose value
is an XML element is inverted on the wire: the value becomes the outer
element and carries the id, with the cell element nested inside.

    <UserObject id="2" label="Hello"><mxCell vertex="1" parent="1"/></UserObject>
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element

from loguru import logger

from extradiagram.model import Cell
from extradiagram.object_codec import ObjectCodec
from extradiagram.xml_utils import element_children, import_node, is_element

if TYPE_CHECKING:
    from extradiagram.codec import XmlCodec

CELL_CODEC_NAME = "mxCell"


class CellCodec(ObjectCodec):
    def __init__(self, template: Cell | None = None, name: str = CELL_CODEC_NAME) -> None:
        super().__init__(
            template if template is not None else Cell(),
            name=name,
            exclude=["children", "edges"],
            idrefs=["parent", "source", "target"],
        )

    def is_cell_codec(self) -> bool:
        return True

    def is_excluded(self, obj: Any, attr: str, value: Any, write: bool) -> bool:
        # Element values are written as the enclosing node
        return super().is_excluded(obj, attr, value, write) or (
            write and attr == "value" and is_element(value)
        )

    def after_encode(self, enc: XmlCodec, obj: Any, node: Element) -> Element | None:
        if not is_element(obj.value):
            return node
        outer = import_node(obj.value)
        id = node.attrib.pop("id", None)
        if id is not None:
            outer.set("id", id)
        outer.append(node)
        return outer

    def decode(self, dec: XmlCodec, node: Element, into: Any = None) -> Any:
        if node.tag == self.get_name():
            return super().decode(dec, node, into)

        value = import_node(node)
        cells = [child for child in element_children(value) if child.tag == self.get_name()]
        if len(cells) > 1:
            logger.warning(f"CellCodec.decode: {node.tag} wraps {len(cells)} cells, expected one")
            return None
        inner = cells[0] if cells else None
        if inner is not None:
            value.remove(inner)
        value.attrib.pop("as", None)
        id = value.attrib.pop("id", None)

        if id is not None and id in dec.objects:
            return dec.objects[id]

        cell = into if into is not None else self.clone_template()
        if id is not None:
            cell.id = id
            dec.put_object(id, cell)
        cell.value = value
        self.decode_node(dec, inner, cell)
        return self.after_decode(dec, node, cell)
