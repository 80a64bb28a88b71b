"""Codec for graph models (mxGraphModel).

The cells of the model are written in pre-order as children of a single
<root> element:

    <mxGraphModel>
      <root>
        <mxCell id="0"/>
        <mxCell id="1" parent="0"/>
        <mxCell id="2" value="A" vertex="1" parent="1"/>
      </root>
    </mxGraphModel>
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element, SubElement

from loguru import logger

from extradiagram.hierarchy import HierarchyCodec
from extradiagram.model import GraphModel
from extradiagram.object_codec import ObjectCodec
from extradiagram.xml_utils import element_children

if TYPE_CHECKING:
    from extradiagram.codec import XmlCodec


class GraphModelCodec(ObjectCodec):
    def __init__(self) -> None:
        super().__init__(GraphModel(), name="mxGraphModel", fields=())

    def encode_object(self, enc: XmlCodec, obj: Any, node: Element) -> None:
        root = obj.get_root()
        if root is None:
            return
        if not isinstance(enc, HierarchyCodec):
            logger.warning("GraphModelCodec.encode: Cells need a HierarchyCodec, skipping root")
            return
        enc.encode_cell(root, SubElement(node, "root"))

    def decode_child(self, dec: XmlCodec, child: Element, obj: Any) -> None:
        if child.tag == "root":
            self.decode_root(dec, child, obj)
        else:
            super().decode_child(dec, child, obj)

    def decode_root(self, dec: XmlCodec, node: Element, model: GraphModel) -> None:
        """Decode the cells below node and make the first parentless one the root."""
        if not isinstance(dec, HierarchyCodec):
            logger.warning("GraphModelCodec.decode: Cells need a HierarchyCodec, skipping root")
            return
        cells = dec.decode_cells(element_children(node))
        root = next((cell for cell in cells if cell.get_parent() is None), None)
        if root is not None:
            model.set_root(root)
