"""Codec for single-field cell changes (mxValueChange, mxStyleChange, ...).

The model is never written and the previous value is restored from the
changed field after decoding. The cell is written as a reference, so
decoding against a HierarchyCodec bound to a model resolves it to the
model's cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element

from extradiagram.object_codec import ObjectCodec

if TYPE_CHECKING:
    from extradiagram.codec import XmlCodec


class GenericChangeCodec(ObjectCodec):
    """Codec for a change record that edits one field of a cell.

    Args:
        template: Default instance of the change type
        variable: Name of the changed field
    """

    def __init__(self, template: Any, variable: str, name: str | None = None) -> None:
        super().__init__(
            template,
            name=name or f"mx{type(template).__name__}",
            fields=["cell", variable],
            exclude=["model", "previous"],
            idrefs=["cell"],
        )
        self.variable = variable

    def after_decode(self, dec: XmlCodec, node: Element, obj: Any) -> Any:
        obj.previous = getattr(obj, self.variable)
        return obj
