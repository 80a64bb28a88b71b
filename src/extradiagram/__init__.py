"""extradiagram - XML codec and style language for cell-based diagrams.

Encodes a tree of cells (vertices, edges and groups) with their geometry
and style strings to XML and back, resolves style strings against named
style sheets and edits style strings in place.
"""

from __future__ import annotations

__version__ = "0.1.0"

from typing import Any
from xml.etree.ElementTree import Element

from extradiagram import cell_path
from extradiagram.changes import (
    CollapseChange,
    GeometryChange,
    StyleChange,
    ValueChange,
    VisibleChange,
)
from extradiagram.codec import XmlCodec
from extradiagram.config import CodecSettings, get_settings
from extradiagram.exceptions import (
    CodecError,
    DuplicateIdError,
    ExpressionError,
    SelfReferenceError,
    SerializationError,
)
from extradiagram.hierarchy import HierarchyCodec
from extradiagram.logging import setup_logging
from extradiagram.model import Cell, Geometry, GraphModel, Point
from extradiagram.object_codec import ObjectCodec
from extradiagram.registry import (
    CodecRegistry,
    build_default_registry,
    default_registry,
    serializable,
)
from extradiagram.stylesheet import Stylesheet
from extradiagram.xml_utils import get_pretty_xml, get_xml, parse_xml


def to_xml_string(obj: Any, pretty: bool = False, registry: CodecRegistry | None = None) -> str:
    """Encode obj to an XML string.

    Raises:
        SerializationError: If no codec produced a node for obj
    """
    node = HierarchyCodec(registry=registry).encode(obj)
    if node is None:
        raise SerializationError(f"Cannot encode {type(obj).__name__}")
    return get_pretty_xml(node) if pretty else get_xml(node)


def from_xml_string(xml: str, into: Any = None, registry: CodecRegistry | None = None) -> Any:
    """Decode the root element of an XML string, resolving ids within it."""
    root: Element = parse_xml(xml)
    return HierarchyCodec(root, registry).decode(root, into)


__all__ = [
    "Cell",
    "CodecError",
    "CodecRegistry",
    "CodecSettings",
    "CollapseChange",
    "DuplicateIdError",
    "ExpressionError",
    "Geometry",
    "GeometryChange",
    "GraphModel",
    "HierarchyCodec",
    "ObjectCodec",
    "Point",
    "SelfReferenceError",
    "SerializationError",
    "StyleChange",
    "Stylesheet",
    "ValueChange",
    "VisibleChange",
    "XmlCodec",
    "__version__",
    "build_default_registry",
    "cell_path",
    "default_registry",
    "from_xml_string",
    "get_settings",
    "serializable",
    "setup_logging",
    "to_xml_string",
]
