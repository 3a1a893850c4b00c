"""Helpers for JSON Reference (``$ref``) values in OpenAPI documents.

The compiler does not inline references the way a generic resolver would:
it has to *see* a ``$ref`` in positions it refuses (path items, parameters,
request bodies), and component-schema references are exactly how a body or
field names the type it uses. This module therefore only offers targeted
helpers:

* :func:`is_reference` -- is this node a Reference Object?
* :func:`schema_name` -- ``#/components/schemas/Name`` -> ``"Name"``.
* :func:`resolve_pointer` -- look up an internal reference (used for
  ``#/components/responses/...``) following RFC 6901.
"""

from __future__ import annotations

from typing import Any, Optional

from sdkgen.exceptions import SpecParseError

SCHEMA_REF_PREFIX = "#/components/schemas/"


def is_reference(node: Any) -> bool:
    """Return ``True`` if *node* is a Reference Object (a mapping with ``$ref``)."""
    return isinstance(node, dict) and "$ref" in node


def schema_name(ref: Optional[str]) -> Optional[str]:
    """Extract the component name from a ``#/components/schemas/<Name>`` reference.

    Returns ``None`` for a missing reference, a reference to anything other
    than a component schema, an empty name, or a value that is not a
    string.
    """
    if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
        return None
    rest = ref[len(SCHEMA_REF_PREFIX):]
    if not rest or "/" in rest:
        return None
    return _unescape(rest)


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve an internal ``$ref`` string against *root*.

    Only internal references (``#/...``) are supported. ``~1`` and ``~0``
    escapes are decoded per RFC 6901.

    Raises:
        SpecParseError: If the reference is external or points at a
            location that does not exist.
    """
    if not isinstance(ref, str):
        raise SpecParseError(f"Invalid $ref: expected a string, got {type(ref).__name__}")
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. Only internal references (#/...) are handled."
        )

    current: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = _unescape(raw_segment)
        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(f"Cannot resolve $ref '{ref}': key '{segment}' not found")
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )
    return current


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")
