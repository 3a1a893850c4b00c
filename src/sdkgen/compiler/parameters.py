"""Validation of Parameter Objects.

Path and header parameters are carried as opaque strings, so their schema
must be a plain ``{"type": "string"}``. Query parameters get a real type via
:func:`~sdkgen.compiler.field_types.resolve_field_type`. Both go through
:func:`parameter_schema`, which rejects ``content``-style parameters.
"""

from __future__ import annotations

from typing import Any

from sdkgen.compiler.field_types import resolve_field_type
from sdkgen.exceptions import UnsupportedSchemaError
from sdkgen.models import FieldType

_ANNOTATION_KEYWORDS = frozenset(
    {"type", "title", "description", "default", "example", "examples", "deprecated", "readOnly", "writeOnly"}
)


def parameter_schema(parameter: dict[str, Any]) -> Any:
    """Return the parameter's ``schema``.

    Raises:
        UnsupportedSchemaError: For ``content``-style parameters or a
            parameter without a schema.
    """
    if "content" in parameter or "schema" not in parameter:
        raise UnsupportedSchemaError("found unexpected 'content' data format")
    return parameter["schema"]


def enforce_string_parameter(parameter: dict[str, Any]) -> None:
    """Check that *parameter* is a plain string parameter.

    The schema must be inline, have ``type: string`` and carry nothing but
    annotations (description, example, ...) and ``x-`` extensions.

    Raises:
        UnsupportedSchemaError: Describing the first violation found.
    """
    schema = parameter_schema(parameter)
    if isinstance(schema, bool):
        raise UnsupportedSchemaError(f"found unexpected `{str(schema).lower()}` schema")
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(f"expected a schema object, got {type(schema).__name__}")
    if schema.get("type") != "string":
        raise UnsupportedSchemaError(f"unsupported parameter type `{schema.get('type')}`")

    constraints = sorted(
        key for key in schema if key not in _ANNOTATION_KEYWORDS and not key.startswith("x-")
    )
    if constraints:
        raise UnsupportedSchemaError(
            f"unsupported constraints on string parameter: {', '.join(constraints)}"
        )


def resolve_parameter_type(parameter: dict[str, Any]) -> FieldType:
    """Resolve a query parameter's schema to a :class:`~sdkgen.models.FieldType`."""
    return resolve_field_type(parameter_schema(parameter))
