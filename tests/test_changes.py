"""Tests for cell changes and their codec."""

from __future__ import annotations

from xml.etree.ElementTree import Element

from extradiagram.changes import (
    CollapseChange,
    GeometryChange,
    StyleChange,
    ValueChange,
    VisibleChange,
)
from extradiagram.hierarchy import HierarchyCodec
from extradiagram.model import Cell, Geometry, GraphModel
from extradiagram.registry import CodecRegistry


class TestExecute:
    def test_execute_swaps_value(self) -> None:
        cell = Cell(value="old")
        change = ValueChange(cell=cell, value="new")
        assert change.previous == "new"
        change.execute()
        assert cell.value == "new"
        assert change.previous == "old"
        change.execute()
        assert cell.value == "old"
        assert change.previous == "new"

    def test_flags(self) -> None:
        cell = Cell()
        CollapseChange(cell=cell, collapsed=True).execute()
        VisibleChange(cell=cell, visible=False).execute()
        assert cell.collapsed is True
        assert cell.visible is False

    def test_without_cell(self) -> None:
        change = StyleChange(style="rounded=1")
        change.execute()
        assert change.previous == "rounded=1"


class TestCodec:
    def test_encode(self, registry: CodecRegistry, model: GraphModel) -> None:
        cell = model.get_cell("2")
        change = StyleChange(model=model, cell=cell, style="rounded=1")
        node = HierarchyCodec(registry=registry).encode(change)
        assert node is not None
        assert node.tag == "mxStyleChange"
        assert node.attrib == {"cell": "2", "style": "rounded=1"}

    def test_decode_resolves_cell_from_model(
        self, registry: CodecRegistry, model: GraphModel
    ) -> None:
        cell = model.get_cell("2")
        node = HierarchyCodec(registry=registry).encode(
            GeometryChange(model=model, cell=cell, geometry=Geometry(x=5, y=6))
        )
        assert node is not None
        change = HierarchyCodec(node, registry, model=model).decode(node)
        assert isinstance(change, GeometryChange)
        assert change.cell is cell
        assert change.model is None
        assert change.geometry == Geometry(x=5, y=6)
        assert change.previous is change.geometry

        change.execute()
        assert cell.geometry == Geometry(x=5, y=6)

    def test_element_values(self, registry: CodecRegistry, model: GraphModel) -> None:
        cell = model.get_cell("3")
        value = Element("UserObject", {"label": "B"})
        node = HierarchyCodec(registry=registry).encode(ValueChange(cell=cell, value=value))
        assert node is not None
        assert node.find("UserObject").get("as") == "value"

        change = HierarchyCodec(node, registry, model=model).decode(node)
        assert change.cell is cell
        assert change.value.tag == "UserObject"
        assert change.value.get("label") == "B"
        assert change.value.get("as") is None

    def test_boolean_changes(self, registry: CodecRegistry, model: GraphModel) -> None:
        cell = model.get_cell("2")
        for change_type, field, value in (
            (CollapseChange, "collapsed", True),
            (VisibleChange, "visible", False),
        ):
            node = HierarchyCodec(registry=registry).encode(
                change_type(cell=cell, **{field: value})
            )
            assert node is not None
            decoded = HierarchyCodec(node, registry, model=model).decode(node)
            assert getattr(decoded, field) is value
