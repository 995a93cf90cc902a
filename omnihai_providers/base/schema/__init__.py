"""JSON Schema support for structured output.

``build_schema`` / ``parse`` / ``render`` map between Python types and JSON
Schema documents through the descriptor table in :mod:`.descriptors`;
``strict_schema`` prepares a schema for vendors that reject open objects.
"""

from .codec import SchemaParseError, build_schema, parse, render, render_json, strict_schema
from .descriptors import (
    FieldDescriptor,
    Kind,
    SchemaDefinitionError,
    TypeDescriptor,
    TypeRef,
    describe,
    register_descriptor,
    resolve_type_ref,
)

__all__ = [
    "SchemaParseError",
    "SchemaDefinitionError",
    "build_schema",
    "parse",
    "render",
    "render_json",
    "strict_schema",
    "FieldDescriptor",
    "Kind",
    "TypeDescriptor",
    "TypeRef",
    "describe",
    "register_descriptor",
    "resolve_type_ref",
]
