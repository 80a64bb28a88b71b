"""Codecs for lists (Array) and dicts (Object).

Primitive items are written as <add value="..."/>; other items are
encoded with their own codec. Dict entries carry their key in "as".
Primitive values are read back as strings.

    <Array as="points"><mxPoint x="10" y="20"/><mxPoint x="30"/></Array>
    <Object as="data"><add as="label" value="A"/></Object>
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element, SubElement

from loguru import logger

from extradiagram.object_codec import ObjectCodec, is_primitive
from extradiagram.style import format_value
from extradiagram.xml_utils import element_children, get_text_content

if TYPE_CHECKING:
    from extradiagram.codec import XmlCodec


def _add_value(child: Element) -> str:
    value = child.get("value")
    return value if value is not None else get_text_content(child)


class ListCodec(ObjectCodec):
    def __init__(self) -> None:
        super().__init__([], name="Array", fields=())

    def encode(self, enc: XmlCodec, obj: Any) -> Element | None:
        node = Element(self.get_name())
        for item in obj:
            if item is None:
                continue
            if is_primitive(item):
                SubElement(node, "add").set("value", format_value(item))
                continue
            child = enc.encode(item)
            if child is not None:
                node.append(child)
            else:
                logger.warning(f"ListCodec.encode: No node for item {item!r}")
        return node

    def decode(self, dec: XmlCodec, node: Element, into: Any = None) -> Any:
        result = into if isinstance(into, list) else []
        for child in element_children(node):
            if self.process_include(dec, child, result):
                continue
            if child.tag == "add":
                result.append(_add_value(child))
            else:
                value = dec.decode(child)
                if value is not None:
                    result.append(value)
        return result


class DictCodec(ObjectCodec):
    def __init__(self) -> None:
        super().__init__({}, name="Object", fields=())

    def encode(self, enc: XmlCodec, obj: Any) -> Element | None:
        node = Element(self.get_name())
        for key, value in obj.items():
            if value is None:
                continue
            if is_primitive(value):
                child = SubElement(node, "add")
                child.set("as", str(key))
                child.set("value", format_value(value))
                continue
            encoded = enc.encode(value)
            if encoded is not None:
                encoded.set("as", str(key))
                node.append(encoded)
            else:
                logger.warning(f"DictCodec.encode: No node for {key}: {value!r}")
        return node

    def decode(self, dec: XmlCodec, node: Element, into: Any = None) -> Any:
        result = into if isinstance(into, dict) else {}
        for child in element_children(node):
            if self.process_include(dec, child, result):
                continue
            key = child.get("as")
            if key is None:
                continue
            if child.tag == "add":
                result[key] = _add_value(child)
            else:
                value = dec.decode(child)
                if value is not None:
                    result[key] = value
        return result
