"""Codec for style sheets (mxStylesheet).

Each named style is an <add as="name"> element holding one entry per key.
A style may extend a style decoded earlier in the same sheet, and remove
keys it inherited:

    <mxStylesheet>
      <add as="defaultVertex">
        <add as="shape" value="label"/>
        <add as="fontSize" value="11"/>
      </add>
      <add as="group" extend="defaultVertex">
        <add as="fillColor" value="none"/>
        <remove as="fontSize"/>
      </add>
    </mxStylesheet>

The text content of an entry is evaluated only when allow_eval is set.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element, SubElement

from loguru import logger

from extradiagram.expressions import StyleRegistry, evaluate
from extradiagram.object_codec import ObjectCodec, is_primitive
from extradiagram.style import coerce_value, format_value
from extradiagram.stylesheet import Stylesheet
from extradiagram.xml_utils import element_children, get_text_content

if TYPE_CHECKING:
    from extradiagram.codec import XmlCodec


class StylesheetCodec(ObjectCodec):
    """Encodes a Stylesheet as one <add> element per named style.

    Args:
        style_registry: Names for style values that have no string form
        allow_eval: Evaluate entry text; defaults to the session's settings
    """

    def __init__(
        self,
        style_registry: StyleRegistry | None = None,
        allow_eval: bool | None = None,
    ) -> None:
        super().__init__(Stylesheet(), name="mxStylesheet", fields=())
        self.style_registry = style_registry or StyleRegistry()
        self.allow_eval = allow_eval

    def get_string_value(self, key: str, value: Any) -> str | None:
        """Return the wire form of a style value, or None to drop it."""
        if value is None:
            return None
        if is_primitive(value):
            return format_value(value)
        name = self.style_registry.get_name(value)
        if name is None:
            logger.debug(f"StylesheetCodec.encode: Dropping {key}, no name for {value!r}")
        return name

    def encode(self, enc: XmlCodec, obj: Any) -> Element | None:
        node = Element(self.get_name())
        for name, style in obj.styles.items():
            if not name:
                continue
            style_node = Element("add", {"as": name})
            for key, value in style.items():
                text = self.get_string_value(key, value)
                if text:
                    SubElement(style_node, "add", {"value": text, "as": key})
            if len(style_node):
                node.append(style_node)
        return node

    def decode(self, dec: XmlCodec, node: Element, into: Any = None) -> Any:
        obj = into if into is not None else self.clone_template()
        id = node.get("id")
        if id:
            dec.put_object(id, obj)

        for child in element_children(node):
            if self.process_include(dec, child, obj) or child.tag != "add":
                continue
            name = child.get("as")
            if name:
                obj.put_cell_style(name, self.decode_style(dec, child, obj))
        return obj

    def decode_style(self, dec: XmlCodec, node: Element, obj: Stylesheet) -> dict[str, Any]:
        extend = node.get("extend")
        style = None
        if extend:
            base = obj.get_style(extend)
            if base is None:
                logger.warning(f"StylesheetCodec.decode: stylesheet {extend} not found to extend")
            else:
                style = copy.deepcopy(base)
        if style is None:
            style = {}

        for entry in element_children(node):
            key = entry.get("as")
            if not key:
                continue
            if entry.tag == "add":
                value = self.decode_value(dec, entry)
                if value is not None and value != "":
                    style[key] = value
            elif entry.tag == "remove":
                style.pop(key, None)
        return style

    def decode_value(self, dec: XmlCodec, entry: Element) -> Any:
        allow_eval = self.allow_eval if self.allow_eval is not None else dec.settings.allow_eval
        text = get_text_content(entry).strip()
        if text and allow_eval:
            return evaluate(text, self.style_registry.values)
        value = entry.get("value")
        return coerce_value(value) if value is not None else None
