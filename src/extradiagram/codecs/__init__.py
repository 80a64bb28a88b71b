"""Built-in codecs for the diagram types."""

from __future__ import annotations

from extradiagram.changes import (
    CollapseChange,
    GeometryChange,
    StyleChange,
    ValueChange,
    VisibleChange,
)
from extradiagram.codecs.cell import CellCodec
from extradiagram.codecs.changes import GenericChangeCodec
from extradiagram.codecs.containers import DictCodec, ListCodec
from extradiagram.codecs.geometry import create_geometry_codec, create_point_codec
from extradiagram.codecs.model import GraphModelCodec
from extradiagram.codecs.stylesheet import StylesheetCodec
from extradiagram.expressions import StyleRegistry
from extradiagram.registry import CodecRegistry

__all__ = [
    "CellCodec",
    "DictCodec",
    "GenericChangeCodec",
    "GraphModelCodec",
    "ListCodec",
    "StylesheetCodec",
    "register_builtin_codecs",
]


def register_builtin_codecs(
    registry: CodecRegistry, style_registry: StyleRegistry | None = None
) -> CodecRegistry:
    """Register the codecs for cells, models, style sheets and changes."""
    registry.register(CellCodec())
    registry.register(create_geometry_codec())
    registry.register(create_point_codec())
    registry.register(GraphModelCodec())
    registry.register(StylesheetCodec(style_registry))
    registry.register(ListCodec())
    registry.register(DictCodec())

    registry.register(GenericChangeCodec(ValueChange(), "value"))
    registry.register(GenericChangeCodec(StyleChange(), "style"))
    registry.register(GenericChangeCodec(GeometryChange(), "geometry"))
    registry.register(GenericChangeCodec(CollapseChange(), "collapsed"))
    registry.register(GenericChangeCodec(VisibleChange(), "visible"))
    return registry
