"""Generic codec mapping an object's fields to an XML element.

An ObjectCodec is built from a template instance of the type it handles.
The template supplies the default value of every field and is cloned to
create new instances while decoding.

Encoding writes one element named after the codec:

- primitive fields (str, int, float, bool) become attributes,
- other values become child elements tagged with as="<field>",
- reference fields (idrefs) are written as the id of the referenced object,
- fields equal to the template's value are skipped unless the session
  encodes defaults.

Decoding reverses the mapping. Objects with an id are memoized in the
session before their fields are decoded, so cyclic references resolve to
the instance under construction.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element, SubElement

from loguru import logger

from .style import format_value, is_numeric
from .xml_utils import element_children, get_text_content, load_xml

if TYPE_CHECKING:
    from .codec import XmlCodec

PRIMITIVE_TYPES = (str, int, float, bool)


def is_primitive(value: Any) -> bool:
    return isinstance(value, PRIMITIVE_TYPES)


def template_fields(template: Any) -> list[str]:
    """Return the field names of a template: dataclass fields or attributes."""
    if dataclasses.is_dataclass(template):
        return [f.name for f in dataclasses.fields(template)]
    return [name for name in vars(template) if not name.startswith("_")]


class ObjectCodec:
    """Encodes and decodes one type through an explicit field list.

    Args:
        template: Default-constructed instance of the handled type
        name: Element name; defaults to the template's class name
        fields: Field names to handle; defaults to template_fields(template)
        exclude: Fields that are never written or read
        idrefs: Fields holding references, written as ids
        mapping: Field name to attribute name translations
    """

    def __init__(
        self,
        template: Any,
        name: str | None = None,
        fields: Iterable[str] | None = None,
        exclude: Iterable[str] = (),
        idrefs: Iterable[str] = (),
        mapping: Mapping[str, str] | None = None,
    ) -> None:
        self.template = template
        self.name = name or type(template).__name__
        self.fields = list(fields) if fields is not None else template_fields(template)
        self.exclude = set(exclude)
        self.idrefs = set(idrefs)
        self.mapping = dict(mapping or {})
        self.reverse = {attr: field for field, attr in self.mapping.items()}

    def get_name(self) -> str:
        return self.name

    def clone_template(self) -> Any:
        return type(self.template)()

    def get_fields(self, obj: Any) -> list[str]:
        return self.fields

    def get_field_name(self, attribute: str | None) -> str | None:
        if attribute is None:
            return None
        return self.reverse.get(attribute, attribute)

    def get_attribute_name(self, field: str) -> str:
        return self.mapping.get(field, field)

    def is_excluded(self, obj: Any, attr: str, value: Any, write: bool) -> bool:
        return attr in self.exclude

    def is_reference(self, obj: Any, attr: str, value: Any, write: bool) -> bool:
        return attr in self.idrefs

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def encode(self, enc: XmlCodec, obj: Any) -> Element | None:
        node = Element(self.get_name())
        obj = self.before_encode(enc, obj, node)
        self.encode_object(enc, obj, node)
        return self.after_encode(enc, obj, node)

    def encode_object(self, enc: XmlCodec, obj: Any, node: Element) -> None:
        """Write the id of obj, then every field that is set."""
        enc.set_attribute(node, "id", enc.get_id(obj))
        for name in self.get_fields(obj):
            if name == "id" and node.get("id") is not None:
                continue
            value = getattr(obj, name, None)
            if value is not None and not self.is_excluded(obj, name, value, True):
                self.encode_value(enc, obj, name, value, node)

    def encode_value(self, enc: XmlCodec, obj: Any, name: str, value: Any, node: Element) -> None:
        if self.is_reference(obj, name, value, True):
            ref = enc.get_id(value)
            if ref is None:
                logger.warning(f"ObjectCodec.encode: No ID for {self.get_name()}.{name}={value!r}")
                return
            value = ref

        default = getattr(self.template, name, None)
        if enc.encode_defaults or default != value:
            self.write_attribute(enc, obj, self.get_attribute_name(name), value, node)

    def write_attribute(
        self, enc: XmlCodec, obj: Any, name: str | None, value: Any, node: Element
    ) -> None:
        if is_primitive(value):
            self.write_primitive_attribute(enc, obj, name, value, node)
        else:
            self.write_complex_attribute(enc, obj, name, value, node)

    def write_primitive_attribute(
        self, enc: XmlCodec, obj: Any, name: str | None, value: Any, node: Element
    ) -> None:
        text = self.convert_attribute_to_xml(enc, obj, name, value)
        if name is None:
            child = SubElement(node, "add")
            enc.set_attribute(child, "value", text)
        else:
            enc.set_attribute(node, name, text)

    def write_complex_attribute(
        self, enc: XmlCodec, obj: Any, name: str | None, value: Any, node: Element
    ) -> None:
        child = enc.encode(value)
        if child is not None:
            if name is not None:
                child.set("as", name)
            node.append(child)
        else:
            logger.warning(f"ObjectCodec.encode: No node for {self.get_name()}.{name}: {value!r}")

    def convert_attribute_to_xml(self, enc: XmlCodec, obj: Any, name: str | None, value: Any) -> str:
        return format_value(value)

    def before_encode(self, enc: XmlCodec, obj: Any, node: Element) -> Any:
        """Hook to replace the object being encoded."""
        return obj

    def after_encode(self, enc: XmlCodec, obj: Any, node: Element) -> Element | None:
        """Hook to post-process or replace the encoded node."""
        return node

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def decode(self, dec: XmlCodec, node: Element, into: Any = None) -> Any:
        """Decode node into a new instance, or into the given object.

        An object already decoded under the same id is returned as is.
        """
        id = node.get("id")
        obj = dec.objects.get(id) if id is not None else None
        if obj is not None:
            return obj

        obj = into if into is not None else self.clone_template()
        if id is not None:
            dec.put_object(id, obj)

        decoded = self.before_decode(dec, node, obj)
        self.decode_node(dec, decoded, obj)
        return self.after_decode(dec, node, obj)

    def decode_node(self, dec: XmlCodec, node: Element | None, obj: Any) -> None:
        if node is not None:
            self.decode_attributes(dec, node, obj)
            self.decode_children(dec, node, obj)

    def decode_attributes(self, dec: XmlCodec, node: Element, obj: Any) -> None:
        for attr, value in node.attrib.items():
            if attr != "as":
                self.decode_attribute(dec, attr, value, obj)

    def decode_attribute(self, dec: XmlCodec, attr: str, value: str, obj: Any) -> None:
        name = self.get_field_name(attr)
        if name not in self.get_fields(obj) or self.is_excluded(obj, name, value, False):
            return

        decoded: Any
        if self.is_reference(obj, name, value, False):
            if dec.defers_references:
                dec.defer_reference(obj, name, value)
                return
            decoded = dec.get_object(value)
            if decoded is None:
                logger.warning(f"ObjectCodec.decode: No object for {self.get_name()}.{name}={value}")
                return
        else:
            decoded = self.convert_attribute_from_xml(dec, name, value, obj)
        setattr(obj, name, decoded)

    def convert_attribute_from_xml(self, dec: XmlCodec, name: str, value: str, obj: Any) -> Any:
        """Convert an attribute string to the type of the template's field.

        Fields whose default is None, or not a primitive, keep the string:
        a cell value of 5 decodes as "5".
        """
        default = getattr(self.template, name, None)
        if isinstance(default, bool):
            return value in ("1", "true")
        if isinstance(default, int) and is_numeric(value):
            return int(float(value))
        if isinstance(default, float) and is_numeric(value):
            return float(value)
        return value

    def decode_children(self, dec: XmlCodec, node: Element, obj: Any) -> None:
        for child in element_children(node):
            if not self.process_include(dec, child, obj):
                self.decode_child(dec, child, obj)

    def decode_child(self, dec: XmlCodec, child: Element, obj: Any) -> None:
        name = self.get_field_name(child.get("as"))
        if name is None or name not in self.get_fields(obj):
            return
        if self.is_excluded(obj, name, child, False):
            return

        template = self.get_field_template(obj, name, child)
        if child.tag == "add":
            value: Any = child.get("value")
            if value is None:
                value = get_text_content(child)
        else:
            value = dec.decode(child, template)
        self.add_object_value(obj, name, value, template)

    def get_field_template(self, obj: Any, name: str, child: Element) -> Any:
        """Return the current field value to decode into, if reusable."""
        value = getattr(obj, name, None)
        # Collections are rebuilt rather than extended
        if isinstance(value, list | dict) or is_primitive(value):
            return None
        return value

    def add_object_value(self, obj: Any, name: str, value: Any, template: Any) -> None:
        if value is not None and value is not template:
            setattr(obj, name, value)

    def process_include(self, dec: XmlCodec, node: Element, into: Any) -> bool:
        """Expand <include href="..."/> by decoding the referenced file into into.

        Returns:
            True if node was an include and has been processed.
        """
        if node.tag != "include":
            return False
        href = node.get("href") or node.get("name")
        if href:
            path = dec.settings.resolve_include(href)
            logger.debug(f"ObjectCodec.process_include: {path}")
            dec.decode(load_xml(path), into)
        return True

    def before_decode(self, dec: XmlCodec, node: Element, obj: Any) -> Element | None:
        """Hook to replace the node whose fields are decoded into obj."""
        return node

    def after_decode(self, dec: XmlCodec, node: Element, obj: Any) -> Any:
        """Hook to post-process or replace the decoded object."""
        return obj
