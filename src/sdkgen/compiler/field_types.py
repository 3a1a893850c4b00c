"""Resolve JSON-Schema nodes into :class:`~sdkgen.models.FieldType` values.

:func:`resolve_field_type` is a pure recursive function. Anything outside the
supported subset raises :class:`~sdkgen.exceptions.UnsupportedSchemaError`
with a message describing the offending construct; whether that drops an
operation, drops a named type, or fails the run is the caller's decision.

Supported shapes::

    {"type": "boolean"}                                  -> Bool
    {"type": "integer", "format": "int16"}               -> Int16 (also uint16,
                                                            int32, int/int64,
                                                            uint/uint64)
    {"type": "string"}                                   -> String
    {"type": "string", "format": "date-time" | "uri"}    -> DateTime | Uri
    {"type": "array", "items": {...}}                    -> List(inner)
    {"type": "array", "items": {...}, "uniqueItems": true}
                                                         -> Set(inner)
    {"type": "object", "additionalProperties": true}     -> JsonObject
    {"type": "object", "additionalProperties": {...}}    -> Map(value)
    {"$ref": "#/components/schemas/Name"}                -> SchemaRef("Name")
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from sdkgen.exceptions import UnsupportedSchemaError
from sdkgen.models import FieldKind, FieldType
from sdkgen.parser.refs import schema_name

ARRAY_KEYWORDS = frozenset(
    {"items", "additionalItems", "maxItems", "minItems", "uniqueItems", "contains"}
)
"""Keywords that make up JSON Schema's array validation."""

OBJECT_KEYWORDS = frozenset(
    {
        "maxProperties",
        "minProperties",
        "required",
        "properties",
        "patternProperties",
        "additionalProperties",
        "propertyNames",
    }
)
"""Keywords that make up JSON Schema's object validation."""

_INTEGER_FORMATS = {
    "int16": FieldKind.INT16,
    "uint16": FieldKind.UINT16,
    "int32": FieldKind.INT32,
    "int": FieldKind.INT64,
    "int64": FieldKind.INT64,
    "uint": FieldKind.UINT64,
    "uint64": FieldKind.UINT64,
}

_STRING_FORMATS = {
    None: FieldKind.STRING,
    "date-time": FieldKind.DATETIME,
    "uri": FieldKind.URI,
}


def resolve_field_type(schema: Any) -> FieldType:
    """Classify *schema* as one of the supported field types.

    Args:
        schema: A Schema Object (``dict``) or a boolean schema.

    Returns:
        The resolved :class:`~sdkgen.models.FieldType`.

    Raises:
        UnsupportedSchemaError: If the schema, or any schema nested in it,
            uses a construct outside the supported subset.
    """
    if isinstance(schema, bool):
        raise UnsupportedSchemaError(f"found unexpected `{str(schema).lower()}` schema")
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(f"expected a schema object, got {type(schema).__name__}")

    instance_type = single_instance_type(schema)
    if instance_type is None:
        name = schema_name(schema.get("$ref"))
        if name is None:
            raise UnsupportedSchemaError("unsupported type-less schema")
        return FieldType.schema_ref(name)

    resolver = _RESOLVERS.get(instance_type)
    if resolver is None:
        raise UnsupportedSchemaError(f"unsupported type: `{instance_type}`")
    return resolver(schema)


def single_instance_type(schema: dict[str, Any]) -> Optional[str]:
    """Return the schema's ``type`` keyword, rejecting multi-typed schemas.

    Raises:
        UnsupportedSchemaError: If ``type`` is an array (even of one element).
    """
    instance_type = schema.get("type")
    if isinstance(instance_type, list):
        raise UnsupportedSchemaError(f"unsupported multi-typed schema: `{instance_type}`")
    if instance_type is not None and not isinstance(instance_type, str):
        raise UnsupportedSchemaError(f"invalid schema type: `{instance_type!r}`")
    return instance_type


def _resolve_boolean(schema: dict[str, Any]) -> FieldType:
    return FieldType.scalar(FieldKind.BOOL)


def _resolve_integer(schema: dict[str, Any]) -> FieldType:
    fmt = schema.get("format")
    kind = _INTEGER_FORMATS.get(fmt) if isinstance(fmt, str) else None
    if kind is None:
        raise UnsupportedSchemaError(f"unsupported integer format: `{fmt}`")
    return FieldType.scalar(kind)


def _resolve_string(schema: dict[str, Any]) -> FieldType:
    fmt = schema.get("format")
    kind = _STRING_FORMATS.get(fmt) if fmt is None or isinstance(fmt, str) else None
    if kind is None:
        raise UnsupportedSchemaError(f"unsupported string format: `{fmt}`")
    return FieldType.scalar(kind)


def _resolve_array(schema: dict[str, Any]) -> FieldType:
    if not ARRAY_KEYWORDS & schema.keys():
        raise UnsupportedSchemaError("array type must have array constraints")
    if "additionalItems" in schema:
        raise UnsupportedSchemaError("unsupported: additionalItems")
    items = schema.get("items")
    if items is None:
        raise UnsupportedSchemaError("array type must have an items schema")
    if isinstance(items, list):
        raise UnsupportedSchemaError("unsupported multi-typed array items")

    inner = resolve_field_type(items)
    if schema.get("uniqueItems") is True:
        return FieldType.set_of(inner)
    return FieldType.list_of(inner)


def _resolve_object(schema: dict[str, Any]) -> FieldType:
    if not OBJECT_KEYWORDS & schema.keys():
        raise UnsupportedSchemaError("unsupported: object type without further validation")
    if "additionalProperties" not in schema:
        raise UnsupportedSchemaError("unsupported: object field type without additionalProperties")
    for keyword in ("maxProperties", "minProperties", "propertyNames"):
        if keyword in schema:
            raise UnsupportedSchemaError(f"unsupported: {keyword}")
    if schema.get("properties"):
        raise UnsupportedSchemaError("unsupported: properties on field type")
    if schema.get("patternProperties"):
        raise UnsupportedSchemaError("unsupported: patternProperties")
    if schema.get("required"):
        raise UnsupportedSchemaError("unsupported: required on field type")

    additional = schema["additionalProperties"]
    if additional is True:
        return FieldType.scalar(FieldKind.JSON_OBJECT)
    if additional is False:
        raise UnsupportedSchemaError("unsupported `additionalProperties: false`")
    return FieldType.map_of(resolve_field_type(additional))


_RESOLVERS: dict[str, Callable[[dict[str, Any]], FieldType]] = {
    "boolean": _resolve_boolean,
    "integer": _resolve_integer,
    "string": _resolve_string,
    "array": _resolve_array,
    "object": _resolve_object,
}
