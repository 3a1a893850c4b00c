"""Canonical Pydantic models shared across all sdkgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- read from ``sdkgen.json`` (or YAML) and CLI flags:
    :class:`TargetLanguage`, :class:`TargetConfig`, and :class:`GeneratorConfig`.

**Intermediate representation (IR)** -- produced by :mod:`sdkgen.compiler`
and consumed by :mod:`sdkgen.generator`:
    :class:`FieldKind`, :class:`FieldType`, :class:`Field`, :class:`Variant`,
    :class:`StructData`, :class:`EnumData`, :class:`Type`, :class:`Types`,
    :class:`HTTPMethod`, :class:`HeaderParam`, :class:`QueryParam`,
    :class:`Operation`, :class:`Resource`, :class:`Api`, and
    :class:`CompiledSpec`.

IR models are frozen: they are built once per compilation and handed to the
rendering stage read-only. Sequences are stored as tuples for the same reason.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Iterator, Literal, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, model_validator


# --- Configuration ---


class TargetLanguage(str, enum.Enum):
    """Languages a client SDK can be generated for."""

    CSHARP = "csharp"
    GO = "go"
    JAVASCRIPT = "javascript"
    KOTLIN = "kotlin"
    RUST = "rust"


class TargetConfig(BaseModel):
    """One SDK to generate: a language and where its sources go.

    Example::

        TargetConfig(language="rust", output_dir="clients/rust/src")
    """

    language: TargetLanguage
    output_dir: str = pydantic.Field(description="Directory receiving the generated files")
    package: str = pydantic.Field(
        default="client",
        description="Package / namespace name for languages that need one (C#, Go, Kotlin)",
    )
    format: bool = pydantic.Field(
        default=True, description="Run the language's formatter on the output"
    )
    formatter: Optional[list[str]] = pydantic.Field(
        default=None,
        description="Formatter command overriding the language default; "
        "the generated file paths are appended to it",
    )


class GeneratorConfig(BaseModel):
    """Effective configuration for one ``sdkgen`` run.

    Assembled by :func:`~sdkgen.config.resolve_config` from defaults, the
    project config file, environment variables and CLI flags.
    """

    strict_types: bool = pydantic.Field(
        default=False,
        description="Fail the run when a referenced named type cannot be built",
    )
    strict_refs: bool = pydantic.Field(
        default=False,
        description="Fail the run when a body references a schema that does not exist",
    )
    templates_dir: Optional[str] = pydantic.Field(
        default=None,
        description="Directory with <language>/resource.j2 and <language>/type.j2 overrides",
    )
    targets: list[TargetConfig] = pydantic.Field(default_factory=list)


# --- Intermediate representation ---


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class FieldKind(str, enum.Enum):
    """The closed set of semantic field types the compiler understands.

    Equivalent to OpenAPI's ``type`` + ``format`` + ``$ref``.
    """

    BOOL = "bool"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    INT64 = "int64"
    UINT64 = "uint64"
    STRING = "string"
    DATETIME = "datetime"
    URI = "uri"
    JSON_OBJECT = "json_object"
    """A JSON object with arbitrary field values."""
    LIST = "list"
    SET = "set"
    """A list whose items are unique."""
    MAP = "map"
    """A string-keyed map with a given value type."""
    SCHEMA_REF = "schema_ref"


_CONTAINER_KINDS = frozenset({FieldKind.LIST, FieldKind.SET})


class FieldType(_Frozen):
    """A resolved field type.

    Scalars only carry ``kind``. ``List``/``Set`` carry ``item_type``,
    ``Map`` carries ``value_type`` (keys are always strings in JSON), and
    ``SchemaRef`` carries the referenced component ``name``.
    """

    kind: FieldKind
    item_type: Optional[FieldType] = None
    value_type: Optional[FieldType] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> FieldType:
        if (self.item_type is not None) != (self.kind in _CONTAINER_KINDS):
            raise ValueError(f"item_type is required for, and only for, list/set (got {self.kind.value})")
        if (self.value_type is not None) != (self.kind == FieldKind.MAP):
            raise ValueError(f"value_type is required for, and only for, map (got {self.kind.value})")
        if (self.name is not None) != (self.kind == FieldKind.SCHEMA_REF):
            raise ValueError(f"name is required for, and only for, schema_ref (got {self.kind.value})")
        return self

    @classmethod
    def scalar(cls, kind: FieldKind) -> FieldType:
        return cls(kind=kind)

    @classmethod
    def list_of(cls, item_type: FieldType) -> FieldType:
        return cls(kind=FieldKind.LIST, item_type=item_type)

    @classmethod
    def set_of(cls, item_type: FieldType) -> FieldType:
        return cls(kind=FieldKind.SET, item_type=item_type)

    @classmethod
    def map_of(cls, value_type: FieldType) -> FieldType:
        return cls(kind=FieldKind.MAP, value_type=value_type)

    @classmethod
    def schema_ref(cls, name: str) -> FieldType:
        return cls(kind=FieldKind.SCHEMA_REF, name=name)

    @property
    def is_datetime(self) -> bool:
        return self.kind == FieldKind.DATETIME

    def referenced_names(self) -> Iterator[str]:
        """Yield every component name referenced by this type, including nested ones."""
        if self.name is not None:
            yield self.name
        for inner in (self.item_type, self.value_type):
            if inner is not None:
                yield from inner.referenced_names()


class Field(_Frozen):
    """A named, typed member of a :class:`Type`."""

    name: str
    type: FieldType
    default: Any = None
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False


class Variant(_Frozen):
    """One alternative of an :class:`EnumData` type."""

    fields: tuple[Field, ...] = ()


class StructData(_Frozen):
    """Record type: a named, ordered list of fields."""

    kind: Literal["struct"] = "struct"
    fields: tuple[Field, ...] = ()


class EnumData(_Frozen):
    """Tagged union type. Modelled so templates can branch on it; never produced yet."""

    kind: Literal["enum"] = "enum"
    variants: tuple[Variant, ...] = ()


TypeData = Annotated[Union[StructData, EnumData], pydantic.Field(discriminator="kind")]


class Type(_Frozen):
    """A named type built from one component schema."""

    name: str
    description: Optional[str] = None
    deprecated: bool = False
    data: TypeData

    def referenced_names(self) -> Iterator[str]:
        """Yield the names of other types this type's fields refer to."""
        if isinstance(self.data, StructData):
            fields: tuple[Field, ...] = self.data.fields
        else:
            fields = tuple(f for variant in self.data.variants for f in variant.fields)
        for field in fields:
            yield from field.type.referenced_names()


class Types(_Frozen):
    """Named types referenced by the :class:`Api`, keyed and sorted by name.

    Intermediate representation of (some) ``components.schemas`` from the
    document: only schemas reachable from an operation body are included.
    """

    types: dict[str, Type] = pydantic.Field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.types

    def __len__(self) -> int:
        return len(self.types)

    def get(self, name: str) -> Optional[Type]:
        return self.types.get(name)


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class HeaderParam(_Frozen):
    """A header parameter. Values are opaque strings."""

    name: str
    required: bool = False
    description: Optional[str] = None


class QueryParam(_Frozen):
    """A ``form``-style query parameter with a resolved type."""

    name: str
    required: bool = False
    type: FieldType
    description: Optional[str] = None


class Operation(_Frozen):
    """A named HTTP endpoint.

    ``id`` is the raw ``operationId`` (``v1.<resource>.<operation>``) and
    ``name`` its third segment, used for the operation in generated code.
    Path parameters are always required strings, so only their names are kept.
    """

    id: str
    name: str
    description: Optional[str] = None
    method: HTTPMethod
    path: str
    path_params: tuple[str, ...] = ()
    header_params: tuple[HeaderParam, ...] = ()
    query_params: tuple[QueryParam, ...] = ()
    request_body_schema_name: Optional[str] = None
    response_body_schema_name: Optional[str] = None


class Resource(_Frozen):
    """A named group of :class:`Operation` objects, in document order."""

    name: str
    operations: tuple[Operation, ...] = ()


class Api(_Frozen):
    """The API a client is generated for, keyed and sorted by resource name.

    Intermediate representation of ``paths`` from the document.
    """

    resources: dict[str, Resource] = pydantic.Field(default_factory=dict)

    def operations(self) -> Iterator[Operation]:
        for resource in self.resources.values():
            yield from resource.operations

    def referenced_schema_names(self) -> list[str]:
        """Sorted, de-duplicated schema names used as a request or response body."""
        names: set[str] = set()
        for operation in self.operations():
            if operation.request_body_schema_name is not None:
                names.add(operation.request_body_schema_name)
            if operation.response_body_schema_name is not None:
                names.add(operation.response_body_schema_name)
        return sorted(names)


class CompiledSpec(_Frozen):
    """Output of one compilation pass, handed to the rendering stage."""

    api: Api
    types: Types
