"""Tests for cell hierarchy encoding and decoding."""

from __future__ import annotations

from xml.etree.ElementTree import Element

import pytest

from extradiagram import from_xml_string, to_xml_string
from extradiagram.exceptions import SelfReferenceError, SerializationError
from extradiagram.hierarchy import HierarchyCodec
from extradiagram.model import Cell, Geometry, GraphModel
from extradiagram.registry import CodecRegistry
from extradiagram.xml_utils import parse_xml


def _make_tree() -> tuple[Cell, Cell, Cell, Cell]:
    """r -> a -> [b, c]"""
    r = Cell(id="r")
    a = Cell(id="a", value="A")
    b = Cell(id="b", value="B")
    c = Cell(id="c", value="C")
    r.insert(a)
    a.insert(b)
    a.insert(c)
    return r, a, b, c


class TestEncodeCells:
    def test_encode_cell_is_flat_pre_order(self, registry: CodecRegistry) -> None:
        r, _, _, _ = _make_tree()
        node = Element("root")
        HierarchyCodec(registry=registry).encode_cell(r, node)
        assert [child.get("id") for child in node] == ["r", "a", "b", "c"]
        assert [child.get("parent") for child in node] == [None, "r", "a", "a"]

    def test_encode_cell_without_children(self, registry: CodecRegistry) -> None:
        r, _, _, _ = _make_tree()
        node = Element("root")
        HierarchyCodec(registry=registry).encode_cell(r, node, include_children=False)
        assert len(node) == 1

    def test_selected_descendants_are_written_once(self, registry: CodecRegistry) -> None:
        _, a, b, c = _make_tree()
        node = HierarchyCodec(registry=registry).encode_cells([c, a, b])
        assert node.tag == "root"
        assert [child.get("id") for child in node] == ["a", "b", "c"]

    def test_siblings_in_tree_order(self, registry: CodecRegistry) -> None:
        _, _, b, c = _make_tree()
        node = HierarchyCodec(registry=registry).encode_cells([c, b])
        assert [child.get("id") for child in node] == ["b", "c"]


class TestDecodeCells:
    def test_rebuilds_structure_from_forward_references(self, registry: CodecRegistry) -> None:
        doc = parse_xml(
            "<root>"
            '<mxCell id="c" value="C" parent="a"/>'
            '<mxCell id="b" value="B" parent="a"/>'
            '<mxCell id="a" value="A" parent="r"/>'
            '<mxCell id="r"/>'
            "</root>"
        )
        cells = HierarchyCodec(doc, registry).decode_cells(list(doc))
        c, b, a, r = cells
        assert r.get_parent() is None
        assert r.children == [a]
        assert a.children == [c, b]
        assert b.get_parent() is a

    def test_edges_are_connected(self, registry: CodecRegistry) -> None:
        doc = parse_xml(
            "<root>"
            '<mxCell id="e" edge="1" source="v1" target="v2" parent="p"/>'
            '<mxCell id="p"/>'
            '<mxCell id="v1" vertex="1" parent="p"/>'
            '<mxCell id="v2" vertex="1" parent="p"/>'
            "</root>"
        )
        e, p, v1, v2 = HierarchyCodec(doc, registry).decode_cells(list(doc))
        assert e.source is v1
        assert e.target is v2
        assert v1.edges == [e]
        assert v2.edges == [e]
        assert p.children == [e, v1, v2]

    def test_loop_is_listed_once(self, registry: CodecRegistry) -> None:
        doc = parse_xml('<root><mxCell id="v"/><mxCell id="e" edge="1" source="v" target="v"/></root>')
        v, e = HierarchyCodec(doc, registry).decode_cells(list(doc))
        assert v.edges == [e]

    def test_self_reference_raises(self, registry: CodecRegistry) -> None:
        doc = parse_xml('<root><mxCell id="5" parent="5"/></root>')
        with pytest.raises(SelfReferenceError, match="5: Self Reference"):
            HierarchyCodec(doc, registry).decode_cells(list(doc))

    def test_parent_cycle_raises(self, registry: CodecRegistry) -> None:
        doc = parse_xml('<root><mxCell id="a" parent="b"/><mxCell id="b" parent="a"/></root>')
        with pytest.raises(SelfReferenceError, match="a: Self Reference"):
            HierarchyCodec(doc, registry).decode_cells(list(doc))

    def test_parent_from_model(self, registry: CodecRegistry, model: GraphModel) -> None:
        layer = model.get_cell("1")
        node = parse_xml('<mxCell id="9" value="pasted" vertex="1" parent="1"/>')
        cell = HierarchyCodec(node, registry, model=model).decode_cell(node)
        assert cell is not None
        assert cell.get_parent() is layer
        assert layer.get_child_at(layer.get_child_count() - 1) is cell


class TestUserObjects:
    def test_element_value_wraps_cell(self, registry: CodecRegistry) -> None:
        parent = Cell(id="1")
        cell = Cell(value=Element("UserObject", {"label": "Hello"}), vertex=True, id="2")
        parent.insert(cell)
        node = HierarchyCodec(registry=registry).encode(cell)
        assert node is not None
        assert node.tag == "UserObject"
        assert node.attrib == {"label": "Hello", "id": "2"}
        inner = node.find("mxCell")
        assert inner is not None
        assert inner.attrib == {"vertex": "1", "parent": "1"}
        assert len(cell.value) == 0

    def test_wrapped_cell_decodes_to_cell(self, registry: CodecRegistry) -> None:
        doc = parse_xml(
            "<root>"
            '<mxCell id="1"/>'
            '<UserObject id="2" label="Hello"><mxCell vertex="1" parent="1"/></UserObject>'
            "</root>"
        )
        layer, cell = HierarchyCodec(doc, registry).decode_cells(list(doc))
        assert cell.id == "2"
        assert cell.vertex is True
        assert cell.get_parent() is layer
        assert isinstance(cell.value, Element)
        assert cell.value.tag == "UserObject"
        assert cell.get_attribute("label") == "Hello"
        assert cell.value.get("id") is None
        assert len(cell.value) == 0

    def test_forward_reference_to_wrapped_cell(self, registry: CodecRegistry) -> None:
        doc = parse_xml(
            "<root>"
            '<mxCell id="3" edge="1" source="2"/>'
            '<UserObject id="2" label="Hello"><mxCell vertex="1"/></UserObject>'
            "</root>"
        )
        dec = HierarchyCodec(doc, registry)
        edge = dec.decode(doc[0])
        assert isinstance(edge.source, Cell)
        assert edge.source.get_attribute("label") == "Hello"
        assert dec.get_object("2") is edge.source

    def test_root_of_several_cells_stays_an_element(self, registry: CodecRegistry) -> None:
        value = from_xml_string(
            '<root><mxCell id="a"/><mxCell id="b" parent="a"/></root>', registry=registry
        )
        assert not isinstance(value, Cell)
        assert isinstance(value, Element)
        assert value.tag == "root"
        assert [child.get("id") for child in value] == ["a", "b"]

    def test_wrapper_of_several_cells_is_not_a_cell(
        self, registry: CodecRegistry, log_messages: list[str]
    ) -> None:
        node = parse_xml('<Group id="g"><mxCell id="a"/><mxCell id="b"/></Group>')
        assert HierarchyCodec(node, registry).decode_cell(node) is None
        assert "CellCodec.decode: Group wraps 2 cells, expected one" in log_messages

    def test_value_with_children_round_trips(self, registry: CodecRegistry) -> None:
        value = Element("UserObject", {"label": "Hello"})
        value.append(Element("data", {"key": "k"}))
        cell = Cell(value=value, vertex=True, id="2")
        node = HierarchyCodec(registry=registry).encode(cell)
        decoded = HierarchyCodec(node, registry).decode(node)
        assert isinstance(decoded, Cell)
        assert decoded.vertex is True
        assert [child.tag for child in decoded.value] == ["data"]


class TestPathIds:
    def test_cells_without_ids_round_trip(self, registry: CodecRegistry) -> None:
        root = Cell()
        a = Cell(vertex=True)
        b = Cell(edge=True)
        c = Cell(vertex=True)
        root.insert(a)
        a.insert(b)
        a.insert(c)
        b.set_terminal(a, True)
        b.set_terminal(c, False)

        node = Element("root")
        HierarchyCodec(registry=registry).encode_cell(root, node)
        assert [child.get("id") for child in node] == ["root", "0", "0.0", "0.1"]
        edge = node[2]
        assert (edge.get("parent"), edge.get("source"), edge.get("target")) == ("0", "0", "0.1")

        root2, a2, b2, c2 = HierarchyCodec(node, registry).decode_cells(list(node))
        assert [cell.id for cell in (root2, a2, b2, c2)] == ["root", "0", "0.0", "0.1"]
        assert root2.children == [a2]
        assert a2.children == [b2, c2]
        assert b2.source is a2
        assert b2.target is c2
        assert a2.edges == [b2]
        assert c2.edges == [b2]


class TestModel:
    def test_model_round_trip(self, registry: CodecRegistry, model: GraphModel) -> None:
        xml = to_xml_string(model, registry=registry)
        decoded = from_xml_string(xml, registry=registry)
        assert isinstance(decoded, GraphModel)

        root = decoded.get_root()
        assert root is not None
        assert root.id == "0"
        layer = decoded.get_cell("1")
        assert root.children == [layer]
        a, b, edge = (decoded.get_cell(id) for id in ("2", "3", "4"))
        assert layer.children == [a, b, edge]
        assert a.value == "A"
        assert a.geometry == Geometry(x=10, y=20, width=80, height=30)
        assert b.style == "rounded=1;fillColor=#FF0000"
        assert edge.source is a
        assert edge.target is b
        assert a.edges == [edge]
        assert edge.geometry is not None
        assert edge.geometry.relative is True

    def test_model_wire_format(self, registry: CodecRegistry, model: GraphModel) -> None:
        node = HierarchyCodec(registry=registry).encode(model)
        assert node is not None
        assert node.tag == "mxGraphModel"
        (root,) = list(node)
        assert root.tag == "root"
        assert [cell.get("id") for cell in root] == ["0", "1", "2", "3", "4"]
        edge = root[4]
        assert edge.get("source") == "2"
        assert edge.get("target") == "3"
        assert edge.find("mxGeometry").get("as") == "geometry"

    def test_decode_into_existing_model(self, registry: CodecRegistry, model: GraphModel) -> None:
        xml = to_xml_string(model, registry=registry)
        target = GraphModel()
        assert from_xml_string(xml, into=target, registry=registry) is target
        assert target.get_cell("4") is not None

    def test_root_found_after_children(self, registry: CodecRegistry) -> None:
        decoded = from_xml_string(
            "<mxGraphModel><root>"
            '<mxCell id="1" parent="0"/>'
            '<mxCell id="0"/>'
            "</root></mxGraphModel>",
            registry=registry,
        )
        assert decoded.get_root().id == "0"
        assert decoded.get_default_parent().id == "1"

    def test_pretty_output(self, registry: CodecRegistry, model: GraphModel) -> None:
        xml = to_xml_string(model, pretty=True, registry=registry)
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<mxGraphModel>')
        assert "\n    <mxCell" in xml

    def test_unencodable_object(self, registry: CodecRegistry) -> None:
        with pytest.raises(SerializationError):
            to_xml_string(object(), registry=registry)
