"""OpenAPI document input -- load a document and work with its ``$ref`` values.

Typical usage::

    from sdkgen.parser import load_spec, validate_openapi_version

    document = load_spec("openapi.json")
    validate_openapi_version(document)

Sub-modules:

* :mod:`~sdkgen.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~sdkgen.parser.refs` -- ``$ref`` detection, component-schema name
  extraction and internal JSON pointer lookup.
"""

from sdkgen.parser.loader import load_spec, validate_openapi_version
from sdkgen.parser.refs import is_reference, resolve_pointer, schema_name

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "is_reference",
    "resolve_pointer",
    "schema_name",
]
