"""
Type-descriptor table backing the schema codec.

Every target type is described once as a :class:`TypeDescriptor`: an ordered
tuple of :class:`FieldDescriptor` entries, each holding the field name and a
:class:`TypeRef` (semantic kind plus element/value reference). Descriptors
are derived from dataclass fields or Pydantic ``model_fields`` the first time
a type is seen and cached in a process-wide registry; a type can also be
registered explicitly with :func:`register_descriptor`.

Nested composite types are referenced by class only, never expanded at
description time, so self-referential types describe without recursion.
"""
from __future__ import annotations

import dataclasses
import datetime as dt
import threading
import types
import typing
from collections import abc
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from pydantic import BaseModel


class SchemaDefinitionError(TypeError):
    """Raised when a type (or one of its fields) has no schema mapping."""


class Kind(str, Enum):
    """Semantic kind of a described value."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ENUM = "enum"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date-time"
    ARRAY = "array"
    MAP = "map"
    OPTIONAL = "optional"
    OBJECT = "object"


@dataclass(frozen=True)
class TypeRef:
    """Reference to the shape of one value.

    Attributes:
        kind: Semantic kind.
        py_type: Concrete Python type for scalars, enums, nested objects and
            the container class of arrays (``list``, ``tuple``, ``set``,
            ``frozenset``).
        item: Element reference for arrays, value reference for maps, wrapped
            reference for optionals. ``None`` for untyped arrays and maps.
    """

    kind: Kind
    py_type: Optional[type] = None
    item: Optional["TypeRef"] = None

    @property
    def descriptor(self) -> "TypeDescriptor":
        """Descriptor of the nested type; only valid for ``Kind.OBJECT``."""
        if self.kind is not Kind.OBJECT or self.py_type is None:
            raise SchemaDefinitionError(f"{self.kind.value} reference has no nested descriptor")
        return describe(self.py_type)


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    ref: TypeRef

    @property
    def required(self) -> bool:
        return self.ref.kind is not Kind.OPTIONAL


@dataclass(frozen=True)
class TypeDescriptor:
    """Ordered field table of one composite type plus how to construct it."""

    py_type: type
    fields: Tuple[FieldDescriptor, ...]
    factory: Callable[..., Any]

    def field(self, name: str) -> FieldDescriptor:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


_REGISTRY: Dict[type, TypeDescriptor] = {}
_LOCK = threading.RLock()

_SCALARS: Tuple[Tuple[type, Kind], ...] = (
    (bool, Kind.BOOLEAN),
    (int, Kind.INTEGER),
    (float, Kind.NUMBER),
    (Decimal, Kind.NUMBER),
    (str, Kind.STRING),
    # datetime subclasses date, so it must be checked first
    (dt.datetime, Kind.DATE_TIME),
    (dt.date, Kind.DATE),
    (dt.time, Kind.TIME),
)

_ARRAY_ORIGINS: Dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Collection: list,
    abc.Iterable: list,
    abc.Set: frozenset,
    abc.MutableSet: set,
}

_MAP_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def is_composite(tp: Any) -> bool:
    """True for types the codec expands into an object schema."""
    if not isinstance(tp, type):
        return False
    if tp in _REGISTRY:
        return True
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def _is_none(tp: Any) -> bool:
    return tp is None or tp is type(None)


def resolve_type_ref(annotation: Any) -> TypeRef:
    """Map a type annotation to a :class:`TypeRef`.

    Raises:
        SchemaDefinitionError: For annotations with no JSON Schema mapping
            (``Any``, non-optional unions, bytes, arbitrary classes).
    """
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Union or (hasattr(types, "UnionType") and origin is getattr(types, "UnionType")):
        non_none = [a for a in args if not _is_none(a)]
        if len(non_none) == 1 and len(non_none) < len(args):
            return TypeRef(Kind.OPTIONAL, item=resolve_type_ref(non_none[0]))
        raise SchemaDefinitionError(f"Unsupported union type: {annotation!r}")

    if origin is typing.Annotated:
        return resolve_type_ref(args[0])

    if origin is not None:
        if origin in _ARRAY_ORIGINS:
            container = _ARRAY_ORIGINS[origin]
            element_args = [a for a in args if a is not Ellipsis]
            if origin is tuple and len(element_args) > 1 and len(set(element_args)) > 1:
                raise SchemaDefinitionError(f"Heterogeneous tuples are not supported: {annotation!r}")
            item = resolve_type_ref(element_args[0]) if element_args else None
            return TypeRef(Kind.ARRAY, py_type=container, item=item)
        if origin in _MAP_ORIGINS:
            if args and args[0] is not str:
                raise SchemaDefinitionError(f"Map keys must be str: {annotation!r}")
            item = resolve_type_ref(args[1]) if len(args) == 2 else None
            return TypeRef(Kind.MAP, py_type=dict, item=item)
        raise SchemaDefinitionError(f"Unsupported generic type: {annotation!r}")

    if not isinstance(annotation, type):
        raise SchemaDefinitionError(f"Unsupported type: {annotation!r}")
    if issubclass(annotation, Enum):
        return TypeRef(Kind.ENUM, py_type=annotation)
    for scalar, kind in _SCALARS:
        if issubclass(annotation, scalar):
            return TypeRef(kind, py_type=annotation)
    if annotation in _ARRAY_ORIGINS:
        return TypeRef(Kind.ARRAY, py_type=_ARRAY_ORIGINS[annotation])
    if annotation in _MAP_ORIGINS:
        return TypeRef(Kind.MAP, py_type=dict)
    if is_composite(annotation):
        return TypeRef(Kind.OBJECT, py_type=annotation)
    raise SchemaDefinitionError(f"Unsupported type: {annotation.__module__}.{annotation.__qualname__}")


def _derive(tp: type) -> TypeDescriptor:
    if dataclasses.is_dataclass(tp):
        hints = typing.get_type_hints(tp, include_extras=True)
        names = [f.name for f in dataclasses.fields(tp) if f.init]
        fields = tuple(FieldDescriptor(name, _field_ref(tp, name, hints[name])) for name in names)
        return TypeDescriptor(tp, fields, tp)
    if issubclass(tp, BaseModel):
        fields = tuple(
            FieldDescriptor(name, _field_ref(tp, name, info.annotation))
            for name, info in tp.model_fields.items()
        )
        return TypeDescriptor(tp, fields, tp)
    raise SchemaDefinitionError(f"Unsupported type: {tp.__module__}.{tp.__qualname__}")


def _field_ref(owner: type, name: str, annotation: Any) -> TypeRef:
    try:
        return resolve_type_ref(annotation)
    except SchemaDefinitionError as exc:
        raise SchemaDefinitionError(f"{owner.__qualname__}.{name}: {exc}") from None


def describe(tp: type) -> TypeDescriptor:
    """Return the cached descriptor for ``tp``, deriving it on first use."""
    descriptor = _REGISTRY.get(tp)
    if descriptor is not None:
        return descriptor
    with _LOCK:
        descriptor = _REGISTRY.get(tp)
        if descriptor is None:
            descriptor = _derive(tp)
            _REGISTRY[tp] = descriptor
        return descriptor


def register_descriptor(
    tp: type,
    fields: Sequence[Tuple[str, Any]],
    factory: Optional[Callable[..., Any]] = None,
) -> TypeDescriptor:
    """Register an explicit field table for ``tp``.

    ``fields`` is a sequence of ``(name, annotation)`` pairs; ``factory``
    receives the parsed fields as keyword arguments (defaults to ``tp``).
    Useful for plain classes that are neither dataclasses nor Pydantic models.
    """
    descriptor = TypeDescriptor(
        tp,
        tuple(FieldDescriptor(name, _field_ref(tp, name, annotation)) for name, annotation in fields),
        factory or tp,
    )
    with _LOCK:
        _REGISTRY[tp] = descriptor
    return descriptor


__all__ = [
    "Kind",
    "TypeRef",
    "FieldDescriptor",
    "TypeDescriptor",
    "SchemaDefinitionError",
    "describe",
    "register_descriptor",
    "resolve_type_ref",
    "is_composite",
]
