"""XML codec session for object graphs.

An XmlCodec encodes objects to elements and decodes elements back to
objects, delegating each object to the codec the registry returns for its
type or element name. One instance serves one document: it memoizes
decoded objects by id and indexes the elements of its document by id, so
references to elements that have not been decoded yet (forward
references) are decoded on demand, once.

Example:
    codec = XmlCodec(document)
    model = codec.decode(document)
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from xml.etree.ElementTree import Element, ElementTree

from loguru import logger

from . import cell_path
from .config import CodecSettings, get_settings
from .exceptions import CodecError, DuplicateIdError
from .logging import session_id_ctx
from .model import Cell
from .registry import CodecRegistry, default_registry
from .style import format_value
from .xml_utils import as_root, import_node, is_element


class XmlCodec:
    """Encoder/decoder session bound to one XML document.

    Args:
        document: Root element (or ElementTree) holding the elements that
            ids refer to while decoding
        registry: Codec registry; defaults to the shared built-in registry
        encode_defaults: Write fields equal to their defaults; defaults to
            the configured setting
        settings: Codec settings; defaults to get_settings()
    """

    def __init__(
        self,
        document: Element | ElementTree | None = None,
        registry: CodecRegistry | None = None,
        *,
        encode_defaults: bool | None = None,
        settings: CodecSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.document = as_root(document)
        self.registry = registry or default_registry()
        self.encode_defaults = (
            self.settings.encode_defaults if encode_defaults is None else encode_defaults
        )
        self.objects: dict[str, Any] = {}
        self.elements: dict[str, Element] | None = None
        self.session_id = uuid.uuid4().hex
        self._deferred: list[tuple[Any, str, str]] | None = None

    # -------------------------------------------------------------------------
    # Objects and elements by id
    # -------------------------------------------------------------------------

    def put_object(self, id: str, obj: Any) -> Any:
        self.objects[id] = obj
        return obj

    def get_object(self, id: str | None) -> Any:
        """Return the object for id: memoized, looked up, or decoded now."""
        obj = None
        if id:
            obj = self.objects.get(id)
            if obj is None:
                obj = self.lookup(id)
                if obj is None:
                    node = self.get_element_by_id(id)
                    if node is not None:
                        obj = self.decode(node)
                        if obj is not None:
                            self.objects.setdefault(id, obj)
        return obj

    def lookup(self, id: str) -> Any:
        """Hook returning an existing object for id. Default: None."""
        return None

    def get_element_by_id(self, id: str) -> Element | None:
        self.update_elements()
        return (self.elements or {}).get(id)

    def update_elements(self) -> None:
        """Index the elements of the document by id, once.

        Raises:
            DuplicateIdError: If two distinct elements share an id
        """
        if self.elements is None:
            elements: dict[str, Element] = {}
            if self.document is not None:
                self._index_elements(self.document, elements)
            self.elements = elements

    def _index_elements(self, root: Element, elements: dict[str, Element]) -> None:
        for node in root.iter():
            if not is_element(node):
                continue
            id = node.get("id")
            if id:
                existing = elements.get(id)
                if existing is None:
                    elements[id] = node
                elif existing is not node:
                    raise DuplicateIdError(id)

    def get_id(self, obj: Any) -> str | None:
        """Return the id of obj.

        Tries reference() first, then the id of a cell, then the cell's
        path ("root" for the root cell).
        """
        id = None
        if obj is not None:
            id = self.reference(obj)
            if id is None and isinstance(obj, Cell):
                id = obj.get_id()
                if not id:
                    id = cell_path.create(obj) or "root"
        return id

    def reference(self, obj: Any) -> str | None:
        """Hook returning a custom id for obj. Default: None."""
        return None

    # -------------------------------------------------------------------------
    # Encoding and decoding
    # -------------------------------------------------------------------------

    def encode(self, obj: Any) -> Element | None:
        """Encode obj with its codec.

        Elements without a codec are copied verbatim. Other objects without
        a codec are skipped with a warning.
        """
        node = None
        if obj is not None:
            with self._bound_session():
                codec = self.registry.get_codec(type(obj))
                if codec is not None:
                    node = codec.encode(self, obj)
                elif is_element(obj):
                    node = import_node(obj)
                else:
                    logger.warning(f"XmlCodec.encode: No codec for {type(obj).__name__}")
        return node

    def decode(self, node: Element | None, into: Any = None) -> Any:
        """Decode an element, optionally into an existing object.

        Elements without a codec decode to a copy of themselves with the
        "as" attribute removed, so they encode back unchanged.
        """
        self.update_elements()
        obj = None
        if node is not None and is_element(node):
            with self._bound_session():
                codec = self.registry.get_codec(node.tag)
                if codec is not None:
                    obj = codec.decode(self, node, into)
                else:
                    logger.debug(f"XmlCodec.decode: No codec for {node.tag}, keeping element")
                    obj = import_node(node)
                    obj.attrib.pop("as", None)
        return obj

    def set_attribute(self, node: Element, attribute: str | None, value: Any) -> None:
        if attribute and value is not None:
            node.set(attribute, format_value(value))

    # -------------------------------------------------------------------------
    # Deferred references
    # -------------------------------------------------------------------------

    @property
    def defers_references(self) -> bool:
        return self._deferred is not None

    def defer_reference(self, obj: Any, field: str, id: str) -> None:
        """Record a reference field to resolve once decoding is complete."""
        if self._deferred is None:
            raise CodecError("defer_reference called outside deferring_references()")
        self._deferred.append((obj, field, id))

    @contextmanager
    def deferring_references(self) -> Iterator[None]:
        """Record reference fields as ids while decoding, resolve them on exit.

        Nested uses share the outermost scope.
        """
        if self._deferred is not None:
            yield
            return

        self._deferred = []
        try:
            yield
            pending = self._deferred
        finally:
            self._deferred = None
        self.resolve_references(pending)

    def resolve_references(self, pending: list[tuple[Any, str, str]]) -> None:
        for obj, field, id in pending:
            value = self.get_object(id)
            if value is None:
                logger.warning(f"XmlCodec.resolve_references: No object for {field}={id}")
            else:
                setattr(obj, field, value)

    @contextmanager
    def _bound_session(self) -> Iterator[None]:
        if session_id_ctx.get() == self.session_id:
            yield
            return
        token = session_id_ctx.set(self.session_id)
        try:
            yield
        finally:
            session_id_ctx.reset(token)
