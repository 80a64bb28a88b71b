"""Codec registry: type names to codecs.

Codecs are looked up by class or by element name. Types without a
registered codec get a generic ObjectCodec on first use, but only if they
were declared with @serializable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any, TypeVar

from loguru import logger

from .exceptions import SerializationError
from .object_codec import ObjectCodec

_T = TypeVar("_T", bound=type)

# Wire name → class, for every type declared with @serializable
_DECLARED: dict[str, type] = {}

_OPTIONS_ATTR = "__codec_options__"


def serializable(
    cls: _T | None = None,
    *,
    name: str | None = None,
    exclude: Iterable[str] = (),
    idrefs: Iterable[str] = (),
    mapping: Mapping[str, str] | None = None,
) -> Any:
    """Declare a class serializable by the generic object codec.

    Usable bare (@serializable) or with codec options
    (@serializable(name="mxThing", idrefs=["owner"])). The class must be
    constructible without arguments.
    """

    def wrap(target: _T) -> _T:
        if not isinstance(target, type):
            raise SerializationError(f"Only classes can be serializable, got {target!r}")
        options = {
            "name": name or target.__name__,
            "exclude": tuple(exclude),
            "idrefs": tuple(idrefs),
            "mapping": dict(mapping or {}),
        }
        setattr(target, _OPTIONS_ATTR, options)
        _DECLARED[options["name"]] = target
        return target

    if cls is not None:
        return wrap(cls)
    return wrap


def is_serializable(cls: type) -> bool:
    """True if cls itself (not only a base class) was declared serializable."""
    return _OPTIONS_ATTR in vars(cls)


class CodecRegistry:
    """Maps codec names to codecs, with aliases for class names."""

    def __init__(self) -> None:
        self.codecs: dict[str, ObjectCodec] = {}
        self.aliases: dict[str, str] = {}

    def register(self, codec: ObjectCodec) -> ObjectCodec:
        """Register codec under its name; the last registration wins.

        The class name of the codec's template becomes an alias when it
        differs from the codec name.
        """
        name = codec.get_name()
        self.codecs[name] = codec
        classname = type(codec.template).__name__
        if classname != name:
            self.add_alias(classname, name)
        return codec

    def add_alias(self, classname: str, codecname: str) -> None:
        self.aliases[classname] = codecname

    def get_codec(self, ctor: type | str | None) -> ObjectCodec | None:
        """Return the codec for a class or element name.

        Declared serializable types are registered on first use. Returns
        None if no codec is known or the template cannot be created.
        """
        if ctor is None:
            return None

        name = ctor if isinstance(ctor, str) else ctor.__name__
        name = self.aliases.get(name, name)
        codec = self.codecs.get(name)
        if codec is None:
            cls = ctor if isinstance(ctor, type) else _DECLARED.get(name)
            if cls is not None and is_serializable(cls):
                codec = self._create_codec(cls)
        return codec

    def get_type(self, name: str) -> type | None:
        """Return the class handled under an element name."""
        codec = self.get_codec(name)
        if codec is not None:
            return type(codec.template)
        return None

    def _create_codec(self, cls: type) -> ObjectCodec | None:
        options = dict(vars(cls)[_OPTIONS_ATTR])
        try:
            template = cls()
        except (TypeError, ValueError) as e:
            logger.debug(f"CodecRegistry.get_codec: Cannot create template for {cls.__name__}: {e}")
            return None
        codec = ObjectCodec(template, **options)
        logger.debug(f"CodecRegistry.get_codec: Registered {codec.get_name()} for {cls.__name__}")
        return self.register(codec)


def build_default_registry() -> CodecRegistry:
    """Create a registry holding the built-in codecs."""
    from .codecs import register_builtin_codecs

    registry = CodecRegistry()
    register_builtin_codecs(registry)
    return registry


@lru_cache
def default_registry() -> CodecRegistry:
    """Get the shared registry with the built-in codecs."""
    return build_default_registry()
