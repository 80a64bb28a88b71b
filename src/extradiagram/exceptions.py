"""Exception classes for the diagram codec."""

from __future__ import annotations


class CodecError(Exception):
    """Base class for codec errors."""


class DuplicateIdError(CodecError):
    """Raised when two distinct elements of one document share an id."""

    def __init__(self, id: str) -> None:
        super().__init__(f"{id}: Duplicate ID")
        self.id = id


class SelfReferenceError(CodecError):
    """Raised when a decoded cell names itself as its parent."""

    def __init__(self, id: str | None) -> None:
        super().__init__(f"{id}: Self Reference")
        self.id = id


class ExpressionError(CodecError):
    """Raised when a style expression is rejected or fails to evaluate."""


class SerializationError(CodecError):
    """Raised when a type cannot be declared serializable."""
