"""XML helpers shared by the codecs."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from xml.etree.ElementTree import Element, ElementTree, fromstring, indent, tostring


def is_element(node: Any) -> bool:
    """True for element nodes (not comments or processing instructions)."""
    return isinstance(node, Element) and isinstance(node.tag, str)


def as_root(document: Element | ElementTree | None) -> Element | None:
    """Unwrap an ElementTree to its root element."""
    if isinstance(document, ElementTree):
        return document.getroot()
    return document


def element_children(node: Element) -> Iterator[Element]:
    """Iterate over the element children of a node, skipping comments."""
    for child in node:
        if is_element(child):
            yield child


def import_node(node: Element) -> Element:
    """Return a deep copy of a node, detached from its sibling text."""
    clone = copy.deepcopy(node)
    clone.tail = None
    return clone


def get_text_content(node: Element | None) -> str:
    """Return the concatenated text of a node and its descendants."""
    if node is None:
        return ""
    return "".join(node.itertext())


# ---------------------------------------------------------------------------
# String and file conversions
# ---------------------------------------------------------------------------


def parse_xml(xml: str) -> Element:
    """Parse an XML string into its root element."""
    return fromstring(xml)


def load_xml(path: Path | str) -> Element:
    """Read an XML file into its root element."""
    return parse_xml(Path(path).read_text(encoding="utf-8"))


def get_xml(node: Element) -> str:
    """Convert an element to a compact XML string."""
    return tostring(node, encoding="unicode")


def get_pretty_xml(node: Element) -> str:
    """Convert an element to a pretty-printed XML string with declaration.

    Indents a copy, so the given tree is left untouched.
    """
    node = import_node(node)
    indent(node)
    xml_str = tostring(node, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + xml_str + "\n"
