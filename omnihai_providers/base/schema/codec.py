"""
JSON Schema generation, strict transform, parsing and rendering.

``build_schema(T)`` walks the descriptor table of ``T`` and produces a plain
JSON Schema document:

=====================  ==================================================
Python type            Schema
=====================  ==================================================
``bool``               ``{"type": "boolean"}``
``int``                ``{"type": "integer"}``
``float``/``Decimal``  ``{"type": "number"}``
``str``                ``{"type": "string"}``
``Enum``               ``{"type": "string", "enum": [member names]}``
``date``               ``{"type": "string", "format": "date"}``
``time``               ``{"type": "string", "format": "time"}``
``datetime``           ``{"type": "string", "format": "date-time"}``
``list[T]`` & co.      ``{"type": "array", "items": schema(T)}``
``dict[str, V]``       ``{"type": "object", "additionalProperties": schema(V)}``
``Optional[T]``        ``schema(T)``, field left out of ``required``
dataclass / model      ``{"type": "object", "properties": ..., "required": ...}``
=====================  ==================================================

Untyped arrays get ``items: {"type": "object"}``; untyped maps are a bare
``{"type": "object"}``. A composite type that is already being expanded
further up the current path is emitted as a bare ``{"type": "object"}``.

``parse(json, T)`` is the inverse and ``render(instance, T)`` produces the
JSON value ``parse`` accepts, so ``parse(render(x, T), T) == x`` for every
supported shape. An absent or ``null`` optional field parses to ``None``.
"""
from __future__ import annotations

import copy
import datetime as dt
import json
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set, Type, TypeVar, Union

from ..json_path import parse_json
from .descriptors import Kind, TypeRef, resolve_type_ref

T = TypeVar("T")

_STRING_FORMATS = {Kind.DATE: "date", Kind.TIME: "time", Kind.DATE_TIME: "date-time"}
_SCALAR_TYPES = {Kind.BOOLEAN: "boolean", Kind.INTEGER: "integer", Kind.NUMBER: "number", Kind.STRING: "string"}


class SchemaParseError(ValueError):
    """Raised when a JSON value does not fit the target type.

    Attributes:
        path: Dotted location of the offending value (``$`` is the root).
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


# ---------------------------------------------------------------------------
# Schema generation
# ---------------------------------------------------------------------------


def build_schema(tp: Any) -> Dict[str, Any]:
    """Return the JSON Schema for ``tp`` (usually a dataclass or Pydantic model)."""
    return _schema_for(resolve_type_ref(tp), set())


def _schema_for(ref: TypeRef, expanding: Set[type]) -> Dict[str, Any]:
    kind = ref.kind
    if kind in _SCALAR_TYPES:
        return {"type": _SCALAR_TYPES[kind]}
    if kind in _STRING_FORMATS:
        return {"type": "string", "format": _STRING_FORMATS[kind]}
    if kind is Kind.ENUM:
        return {"type": "string", "enum": [member.name for member in ref.py_type]}  # type: ignore[union-attr]
    if kind is Kind.OPTIONAL:
        return _schema_for(ref.item, expanding)  # type: ignore[arg-type]
    if kind is Kind.ARRAY:
        items = _schema_for(ref.item, expanding) if ref.item is not None else {"type": "object"}
        return {"type": "array", "items": items}
    if kind is Kind.MAP:
        if ref.item is None:
            return {"type": "object"}
        return {"type": "object", "additionalProperties": _schema_for(ref.item, expanding)}
    return _object_schema(ref, expanding)


def _object_schema(ref: TypeRef, expanding: Set[type]) -> Dict[str, Any]:
    tp = ref.py_type
    if tp in expanding:
        return {"type": "object"}
    expanding.add(tp)  # type: ignore[arg-type]
    try:
        descriptor = ref.descriptor
        properties = {f.name: _schema_for(f.ref, expanding) for f in descriptor.fields}
        required = [f.name for f in descriptor.fields if f.required]
    finally:
        expanding.discard(tp)  # type: ignore[arg-type]
    return {"type": "object", "properties": properties, "required": required}


def strict_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy where every object subschema forbids undeclared properties.

    Objects without an ``additionalProperties`` schema get
    ``additionalProperties: false``; map schemas keep their value schema,
    which is made strict in turn. Property, array item and map value
    subschemas are handled recursively. Applying this twice equals applying
    it once.
    """
    return _strict(copy.deepcopy(schema))


def _strict(schema: Any) -> Any:
    if not isinstance(schema, dict):
        return schema
    if schema.get("type") == "object":
        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            schema["additionalProperties"] = _strict(additional)
        else:
            schema["additionalProperties"] = False
        properties = schema.get("properties")
        if isinstance(properties, dict):
            schema["properties"] = {name: _strict(sub) for name, sub in properties.items()}
    elif schema.get("type") == "array" and isinstance(schema.get("items"), dict):
        schema["items"] = _strict(schema["items"])
    return schema


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse(value: Union[str, Dict[str, Any], Any], tp: Type[T]) -> T:
    """Parse a JSON document (text or already decoded) into an instance of ``tp``.

    Text is decoded leniently (surrounding markdown fences are tolerated).

    Raises:
        SchemaParseError: When a value does not match the declared type; the
            message names the offending field path.
    """
    ref = resolve_type_ref(tp)
    if isinstance(value, str) and ref.kind is Kind.OBJECT:
        value = parse_json(value, parse_float=Decimal)
    elif isinstance(value, str) and ref.kind not in (Kind.STRING, Kind.ENUM) and ref.kind not in _STRING_FORMATS:
        try:
            value = json.loads(value, parse_float=Decimal)
        except ValueError as exc:
            raise SchemaParseError("$", f"invalid JSON: {exc}") from None
    return _parse(value, ref, "$")


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _expect(condition: bool, path: str, expected: str, value: Any) -> None:
    if not condition:
        raise SchemaParseError(path, f"expected {expected}, got {_type_name(value)}")


def _parse(value: Any, ref: TypeRef, path: str) -> Any:  # noqa: C901
    kind = ref.kind
    if kind is Kind.OPTIONAL:
        return None if value is None else _parse(value, ref.item, path)  # type: ignore[arg-type]
    if value is None:
        raise SchemaParseError(path, "missing required value")
    if kind is Kind.BOOLEAN:
        _expect(isinstance(value, bool), path, "boolean", value)
        return value
    if kind is Kind.INTEGER:
        _expect(isinstance(value, int) and not isinstance(value, bool), path, "integer", value)
        return ref.py_type(value) if ref.py_type not in (None, int) else value  # type: ignore[misc]
    if kind is Kind.NUMBER:
        _expect(isinstance(value, (int, float, Decimal)) and not isinstance(value, bool), path, "number", value)
        if ref.py_type is Decimal:
            return value if isinstance(value, Decimal) else Decimal(str(value))
        return float(value)
    if kind is Kind.STRING:
        _expect(isinstance(value, str), path, "string", value)
        return value
    if kind is Kind.ENUM:
        _expect(isinstance(value, str), path, "string", value)
        try:
            return ref.py_type[value]  # type: ignore[index]
        except KeyError:
            names = [m.name for m in ref.py_type]  # type: ignore[union-attr]
            raise SchemaParseError(path, f"{value!r} is not one of {names}") from None
    if kind in _STRING_FORMATS:
        _expect(isinstance(value, str), path, "string", value)
        return _parse_temporal(value, kind, path)
    if kind is Kind.ARRAY:
        _expect(isinstance(value, list), path, "array", value)
        if ref.item is None:
            items: List[Any] = [_plain(v) for v in value]
        else:
            items = [_parse(v, ref.item, f"{path}[{i}]") for i, v in enumerate(value)]
        return ref.py_type(items) if ref.py_type not in (None, list) else items  # type: ignore[misc]
    if kind is Kind.MAP:
        _expect(isinstance(value, dict), path, "object", value)
        if ref.item is None:
            return {k: _plain(v) for k, v in value.items()}
        return {k: _parse(v, ref.item, f"{path}.{k}") for k, v in value.items()}
    return _parse_object(value, ref, path)


def _plain(value: Any) -> Any:
    # untyped containers keep the float numbers json.loads would give
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def _parse_temporal(value: str, kind: Kind, path: str) -> Any:
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        if kind is Kind.DATE:
            return dt.date.fromisoformat(text)
        if kind is Kind.TIME:
            return dt.time.fromisoformat(text)
        return dt.datetime.fromisoformat(text)
    except ValueError:
        raise SchemaParseError(path, f"{value!r} is not a valid {_STRING_FORMATS[kind]}") from None


def _parse_object(value: Any, ref: TypeRef, path: str) -> Any:
    _expect(isinstance(value, dict), path, "object", value)
    descriptor = ref.descriptor
    kwargs = {}
    for f in descriptor.fields:
        kwargs[f.name] = _parse(value.get(f.name), f.ref, f"{path}.{f.name}")
    return descriptor.factory(**kwargs)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render(instance: Any, tp: Optional[Any] = None) -> Any:
    """Return the JSON-compatible value for ``instance`` as described by ``tp``.

    ``tp`` defaults to ``type(instance)``. ``None`` optionals are omitted from
    rendered objects.
    """
    ref = resolve_type_ref(tp if tp is not None else type(instance))
    return _render(instance, ref)


def render_json(instance: Any, tp: Optional[Any] = None) -> str:
    """Serialize :func:`render` output; ``Decimal`` numbers keep every digit."""
    return _dump(render(instance, tp))


def _dump(value: Any) -> str:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        members = (f"{json.dumps(k, ensure_ascii=False)}: {_dump(v)}" for k, v in value.items())
        return "{" + ", ".join(members) + "}"
    if isinstance(value, list):
        return "[" + ", ".join(_dump(v) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False)


def _render(value: Any, ref: TypeRef) -> Any:
    kind = ref.kind
    if kind is Kind.OPTIONAL:
        return None if value is None else _render(value, ref.item)  # type: ignore[arg-type]
    if kind is Kind.NUMBER:
        return value if isinstance(value, Decimal) else float(value)
    if kind is Kind.ENUM:
        return value.name
    if kind in _STRING_FORMATS:
        return value.isoformat()
    if kind is Kind.ARRAY:
        if ref.item is None:
            return list(value)
        return [_render(v, ref.item) for v in value]
    if kind is Kind.MAP:
        if ref.item is None:
            return dict(value)
        return {k: _render(v, ref.item) for k, v in value.items()}
    if kind is Kind.OBJECT:
        out = {}
        for f in ref.descriptor.fields:
            rendered = _render(getattr(value, f.name), f.ref)
            if rendered is not None or f.required:
                out[f.name] = rendered
        return out
    return value


__all__ = [
    "SchemaParseError",
    "build_schema",
    "strict_schema",
    "parse",
    "render",
    "render_json",
]
