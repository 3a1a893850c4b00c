"""Project :class:`~sdkgen.models.FieldType` values onto target-language type names.

Each target language has one table keyed by :class:`~sdkgen.models.FieldKind`.
:class:`TypeNameProjector` refuses to build from a table that does not cover
every kind, so adding a kind fails at import time until every language has
an entry for it.

The tables reproduce the names the already-published SDKs use, including
their historical collapses:

* every integer wider than 16 bits is a 32-bit integer in C#, Go, Kotlin
  and Rust;
* ``Set`` is rendered exactly like ``List`` everywhere;
* ``Uri`` is a plain ``String`` in Rust;
* several kinds have no mapping yet in some languages (see
  :func:`_unimplemented`). Reaching one raises
  :class:`~sdkgen.exceptions.ProjectionError` instead of guessing.
"""

from __future__ import annotations

from typing import Callable

from sdkgen.exceptions import ProjectionError
from sdkgen.models import FieldKind, FieldType, TargetLanguage

Entry = Callable[["TypeNameProjector", FieldType], str]


class TypeNameProjector:
    """Total mapping from field types to type names for one language.

    Args:
        language: The language the names belong to.
        table: One entry per :class:`~sdkgen.models.FieldKind`. Entries get
            the projector itself so container types can project their
            element types.

    Raises:
        TypeError: If *table* does not cover every field kind.
    """

    def __init__(self, language: TargetLanguage, table: dict[FieldKind, Entry]) -> None:
        missing = sorted(kind.value for kind in FieldKind if kind not in table)
        if missing:
            raise TypeError(f"type name table for {language.value} is missing: {', '.join(missing)}")
        self.language = language
        self._table = dict(table)

    def __call__(self, field_type: FieldType) -> str:
        return self._table[field_type.kind](self, field_type)

    def __repr__(self) -> str:
        return f"TypeNameProjector({self.language.value})"


def _literal(name: str) -> Entry:
    return lambda project, field_type: name


def _items(pattern: str) -> Entry:
    return lambda project, field_type: pattern.format(project(field_type.item_type))


def _values(pattern: str) -> Entry:
    return lambda project, field_type: pattern.format(project(field_type.value_type))


def _schema_ref(project: TypeNameProjector, field_type: FieldType) -> str:
    return field_type.name


def _unimplemented(project: TypeNameProjector, field_type: FieldType) -> str:
    raise ProjectionError(
        f"{field_type.kind.value} fields are not implemented for {project.language.value}"
    )


_CSHARP: dict[FieldKind, Entry] = {
    FieldKind.BOOL: _literal("bool"),
    FieldKind.INT16: _unimplemented,
    FieldKind.UINT16: _unimplemented,
    FieldKind.INT32: _literal("int"),
    # FIXME: should be long; kept for compatibility with the published SDK
    FieldKind.INT64: _literal("int"),
    FieldKind.UINT64: _literal("int"),
    FieldKind.STRING: _literal("string"),
    FieldKind.DATETIME: _literal("DateTime"),
    FieldKind.URI: _unimplemented,
    FieldKind.JSON_OBJECT: _unimplemented,
    FieldKind.LIST: _items("List<{}>"),
    FieldKind.SET: _items("List<{}>"),
    FieldKind.MAP: _unimplemented,
    FieldKind.SCHEMA_REF: _schema_ref,
}

_GO: dict[FieldKind, Entry] = {
    FieldKind.BOOL: _literal("bool"),
    FieldKind.INT16: _unimplemented,
    FieldKind.UINT16: _unimplemented,
    FieldKind.INT32: _literal("int32"),
    FieldKind.INT64: _literal("int32"),
    FieldKind.UINT64: _literal("int32"),
    FieldKind.STRING: _literal("string"),
    FieldKind.DATETIME: _literal("time.Time"),
    FieldKind.URI: _unimplemented,
    FieldKind.JSON_OBJECT: _unimplemented,
    FieldKind.LIST: _items("[]{}"),
    FieldKind.SET: _items("[]{}"),
    FieldKind.MAP: _unimplemented,
    FieldKind.SCHEMA_REF: _schema_ref,
}

_JAVASCRIPT: dict[FieldKind, Entry] = {
    FieldKind.BOOL: _literal("boolean"),
    FieldKind.INT16: _literal("number"),
    FieldKind.UINT16: _literal("number"),
    FieldKind.INT32: _literal("number"),
    FieldKind.INT64: _literal("number"),
    FieldKind.UINT64: _literal("number"),
    FieldKind.STRING: _literal("string"),
    FieldKind.DATETIME: _literal("Date | null"),
    FieldKind.URI: _unimplemented,
    FieldKind.JSON_OBJECT: _unimplemented,
    FieldKind.LIST: _items("{}[]"),
    FieldKind.SET: _items("{}[]"),
    FieldKind.MAP: _unimplemented,
    FieldKind.SCHEMA_REF: _schema_ref,
}

_KOTLIN: dict[FieldKind, Entry] = {
    FieldKind.BOOL: _literal("Boolean"),
    FieldKind.INT16: _unimplemented,
    FieldKind.UINT16: _unimplemented,
    FieldKind.INT32: _literal("Int"),
    # FIXME: should be Long
    FieldKind.INT64: _literal("Int"),
    FieldKind.UINT64: _literal("Int"),
    FieldKind.STRING: _literal("String"),
    FieldKind.DATETIME: _literal("OffsetDateTime"),
    FieldKind.URI: _unimplemented,
    FieldKind.JSON_OBJECT: _unimplemented,
    FieldKind.LIST: _items("List<{}>"),
    FieldKind.SET: _items("List<{}>"),
    FieldKind.MAP: _unimplemented,
    FieldKind.SCHEMA_REF: _schema_ref,
}

_RUST: dict[FieldKind, Entry] = {
    FieldKind.BOOL: _literal("bool"),
    FieldKind.INT16: _literal("i16"),
    FieldKind.UINT16: _literal("u16"),
    FieldKind.INT32: _literal("i32"),
    FieldKind.INT64: _literal("i32"),
    FieldKind.UINT64: _literal("i32"),
    FieldKind.STRING: _literal("String"),
    FieldKind.DATETIME: _literal("DateTime<Utc>"),
    FieldKind.URI: _literal("String"),
    FieldKind.JSON_OBJECT: _literal("serde_json::Value"),
    # TODO: use BTreeSet once the Rust SDK's models can take the breaking change
    FieldKind.LIST: _items("Vec<{}>"),
    FieldKind.SET: _items("Vec<{}>"),
    FieldKind.MAP: _values("std::collections::HashMap<String, {}>"),
    FieldKind.SCHEMA_REF: _schema_ref,
}

PROJECTORS: dict[TargetLanguage, TypeNameProjector] = {
    TargetLanguage.CSHARP: TypeNameProjector(TargetLanguage.CSHARP, _CSHARP),
    TargetLanguage.GO: TypeNameProjector(TargetLanguage.GO, _GO),
    TargetLanguage.JAVASCRIPT: TypeNameProjector(TargetLanguage.JAVASCRIPT, _JAVASCRIPT),
    TargetLanguage.KOTLIN: TypeNameProjector(TargetLanguage.KOTLIN, _KOTLIN),
    TargetLanguage.RUST: TypeNameProjector(TargetLanguage.RUST, _RUST),
}

to_csharp = PROJECTORS[TargetLanguage.CSHARP]
to_go = PROJECTORS[TargetLanguage.GO]
to_javascript = PROJECTORS[TargetLanguage.JAVASCRIPT]
to_kotlin = PROJECTORS[TargetLanguage.KOTLIN]
to_rust = PROJECTORS[TargetLanguage.RUST]


def type_name(field_type: FieldType, language: TargetLanguage) -> str:
    """Project *field_type* for *language*.

    Raises:
        ProjectionError: If the type has no representation in *language* yet.
    """
    return PROJECTORS[language](field_type)
