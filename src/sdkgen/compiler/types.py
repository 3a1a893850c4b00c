"""Build named :class:`~sdkgen.models.Type` values from component schemas.

Only component schemas that some operation actually uses end up in the
output: :func:`resolve_types` starts from the request and response body
schema names of the :class:`~sdkgen.models.Api` and follows ``SchemaRef``
fields from there. Everything else in ``components.schemas`` is dropped.

A named type must be a plain object schema. ``additionalProperties`` and
the other map-shaped keywords are reserved for map-typed *fields*, and a
``const`` or ``enum`` on any field is unsupported, so such schemas fail
with :class:`~sdkgen.exceptions.UnsupportedSchemaError`.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from sdkgen.compiler.field_types import OBJECT_KEYWORDS, resolve_field_type, single_instance_type
from sdkgen.diagnostics import Diagnostics
from sdkgen.exceptions import SpecCompileError, UnsupportedSchemaError
from sdkgen.models import Api, Field, StructData, Type, Types

_MAP_KEYWORDS = ("additionalProperties", "maxProperties", "minProperties", "propertyNames")


def build_type(name: str, schema: Any) -> Type:
    """Build the struct type for component schema *name*.

    Raises:
        UnsupportedSchemaError: If the schema is not a plain object schema
            or one of its properties cannot be turned into a field.
    """
    if isinstance(schema, bool):
        raise UnsupportedSchemaError(f"found unexpected `{str(schema).lower()}` schema")
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(f"expected a schema object, got {type(schema).__name__}")

    instance_type = single_instance_type(schema)
    if instance_type is None:
        raise UnsupportedSchemaError("unsupported: no type")
    if instance_type != "object":
        raise UnsupportedSchemaError(f"unsupported type `{instance_type}`")
    if not OBJECT_KEYWORDS & schema.keys():
        raise UnsupportedSchemaError("unsupported: object type without further validation")
    for keyword in _MAP_KEYWORDS:
        if keyword in schema:
            raise UnsupportedSchemaError(f"unsupported: {keyword}")
    if schema.get("patternProperties"):
        raise UnsupportedSchemaError("unsupported: patternProperties")

    required = set(schema.get("required") or [])
    fields = []
    for field_name, field_schema in (schema.get("properties") or {}).items():
        try:
            fields.append(build_field(field_name, field_schema, field_name in required))
        except UnsupportedSchemaError as exc:
            raise UnsupportedSchemaError(f"unsupported field {field_name}: {exc}") from exc

    return Type(
        name=name,
        description=schema.get("description"),
        deprecated=bool(schema.get("deprecated", False)),
        data=StructData(fields=tuple(fields)),
    )


def build_field(name: str, schema: Any, required: bool) -> Field:
    """Build one field of a struct type."""
    if isinstance(schema, bool):
        raise UnsupportedSchemaError("unsupported bool schema")
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(f"expected a schema object, got {type(schema).__name__}")
    if "const" in schema:
        raise UnsupportedSchemaError("unsupported const value")
    if "enum" in schema:
        raise UnsupportedSchemaError("unsupported enum values")

    return Field(
        name=name,
        type=resolve_field_type(schema),
        default=schema.get("default"),
        description=schema.get("description"),
        required=required,
        deprecated=bool(schema.get("deprecated", False)),
    )


def resolve_types(
    api: Api,
    schemas: dict[str, Any],
    diagnostics: Diagnostics,
    strict_types: bool = False,
    strict_refs: bool = False,
) -> Types:
    """Build every named type reachable from an operation body.

    *schemas* (the document's ``components.schemas``) is only read. Each
    name is claimed at most once, so a schema referenced from several places
    is built once.

    Args:
        api: The compiled :class:`~sdkgen.models.Api`.
        schemas: The raw component schema table.
        diagnostics: Sink for dropped and dangling types.
        strict_types: Raise instead of dropping a type that cannot be built.
        strict_refs: Raise instead of warning about a missing schema.

    Returns:
        The built types, sorted by name.

    Raises:
        SpecCompileError: Only in strict mode, as described above.
    """
    built: dict[str, Type] = {}
    claimed: set[str] = set()
    pending = deque(api.referenced_schema_names())

    while pending:
        name = pending.popleft()
        if name in claimed:
            continue
        claimed.add(name)
        diag = diagnostics.scoped(schema_name=name)

        if name not in schemas:
            if strict_refs:
                raise SpecCompileError(f"referenced schema not found (schema_name={name})")
            diag.warning("schema not found")
            continue

        schema = schemas[name]
        if isinstance(schema, bool):
            if strict_types:
                raise SpecCompileError(f"referenced schema is a boolean schema (schema_name={name})")
            diag.warning("found $ref'erenced boolean schema")
            continue

        try:
            named_type = build_type(name, schema)
        except UnsupportedSchemaError as exc:
            if strict_types:
                raise SpecCompileError(f"cannot build type: {exc} (schema_name={name})") from exc
            diag.warning(f"skipping type: {exc}")
            continue

        built[name] = named_type
        pending.extend(sorted(set(named_type.referenced_names()) - claimed))

    return Types(types={name: built[name] for name in sorted(built)})


def check_query_param_refs(
    api: Api,
    types: Types,
    diagnostics: Diagnostics,
    strict_refs: bool = False,
) -> None:
    """Report query parameters that name a type missing from *types*.

    Only body schemas seed :func:`resolve_types`, so a ``$ref`` query
    parameter type is generated only when a body reaches it as well.

    Raises:
        SpecCompileError: With *strict_refs*, instead of the warning.
    """
    for resource in api.resources.values():
        for op in resource.operations:
            for param in op.query_params:
                for name in sorted(set(param.type.referenced_names())):
                    if name in types:
                        continue
                    diag = diagnostics.scoped(operation_id=op.id, parameter=param.name, schema_name=name)
                    if strict_refs:
                        raise SpecCompileError(
                            f"query parameter references a type that is not generated ({diag.location()})"
                        )
                    diag.warning("query parameter references a type that is not generated")
